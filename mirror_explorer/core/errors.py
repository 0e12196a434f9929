"""Exception types for the mirror-explorer engine.

Absence of a mapping, match or classification is signaled with ``None``
throughout the package. Exceptions are reserved for invalid configuration and
malformed definition files supplied by the user.
"""

from __future__ import annotations


class MirrorExplorerError(Exception):
    """Base class for all mirror-explorer errors."""


class ConfigurationError(MirrorExplorerError):
    """Raised when a persisted or user-supplied setting cannot be parsed."""

    def __init__(self, setting: str, value: object, allowed: list[str] | None = None) -> None:
        self.setting = setting
        self.value = value
        self.allowed = allowed or []
        message = f"Invalid value for {setting}: {value!r}"
        if self.allowed:
            message += f" (expected one of: {', '.join(self.allowed)})"
        super().__init__(message)


class ComponentDefinitionError(MirrorExplorerError):
    """Raised when a component definition file cannot be loaded."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not load component definition {path}: {reason}")
