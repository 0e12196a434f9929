"""Component classifiers and the primary/fallback cascade.

The heuristic classifier is total: it always returns a list, possibly empty.
Other classifiers (for example an LLM-backed one supplied by the caller) may
return ``None`` to signal failure, in which case the cascade falls back.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Protocol, Sequence, runtime_checkable

from ..core.config import COMPONENT_DETECTION_MODES, config
from ..core.errors import ConfigurationError
from ..core.logger import log
from .component_detector import ComponentDetector, ScreenComponent
from .components import ComponentDefinition
from .element_classifier import ClassifiedElement


@runtime_checkable
class ComponentClassifier(Protocol):
    """Anything that groups classified elements into screen components."""

    def classify(
        self,
        classified: Sequence[ClassifiedElement],
        definitions: Sequence[ComponentDefinition],
        screen_height: float,
    ) -> Optional[List[ScreenComponent]]:
        ...


class HeuristicClassifier:
    """Wraps :meth:`ComponentDetector.detect`. Never returns ``None``."""

    def classify(
        self,
        classified: Sequence[ClassifiedElement],
        definitions: Sequence[ComponentDefinition],
        screen_height: float,
    ) -> List[ScreenComponent]:
        return ComponentDetector.detect(classified, definitions, screen_height)


class CompositeClassifier:
    """Try ``primary``, fall back to ``fallback`` when it yields ``None``.

    With ``primary_only_for_first_screen`` the primary is consulted for the
    first call only; every later call goes straight to the fallback. One
    instance belongs to one exploration session.
    """

    def __init__(
        self,
        primary: ComponentClassifier,
        fallback: ComponentClassifier,
        primary_only_for_first_screen: bool = False,
    ) -> None:
        self.primary = primary
        self.fallback = fallback
        self.primary_only_for_first_screen = primary_only_for_first_screen
        self._first_screen_done = False

    @property
    def first_screen_done(self) -> bool:
        return self._first_screen_done

    def classify(
        self,
        classified: Sequence[ClassifiedElement],
        definitions: Sequence[ComponentDefinition],
        screen_height: float,
    ) -> Optional[List[ScreenComponent]]:
        use_primary = not self.primary_only_for_first_screen or not self._first_screen_done
        self._first_screen_done = True

        if use_primary:
            result = self.primary.classify(classified, definitions, screen_height)
            if result is not None:
                return result
            log.debug(f"{type(self.primary).__name__} returned no result, using {type(self.fallback).__name__}")

        return self.fallback.classify(classified, definitions, screen_height)

    def reset(self) -> None:
        """Start a new session: the primary is eligible again."""
        self._first_screen_done = False


class ComponentDetectionMode(Enum):
    """How screen components are detected during exploration."""

    HEURISTIC = "heuristic"
    LLM_FIRST_SCREEN = "llm_first_screen"
    LLM_EVERY_SCREEN = "llm_every_screen"
    LLM_FALLBACK = "llm_fallback"

    @classmethod
    def parse(cls, value: str) -> Optional["ComponentDetectionMode"]:
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def from_config(cls, value: Optional[str] = None) -> "ComponentDetectionMode":
        """Resolve the configured mode.

        Raises:
            ConfigurationError: If the setting names no known mode.
        """
        raw = config.component_detection if value is None else value
        mode = cls.parse(raw)
        if mode is None:
            log.error(f"Unknown component detection mode {raw!r}")
            raise ConfigurationError("component_detection", raw, COMPONENT_DETECTION_MODES)
        return mode

    @property
    def uses_llm(self) -> bool:
        return self is not ComponentDetectionMode.HEURISTIC

    def build_classifier(self, llm: Optional[ComponentClassifier] = None) -> ComponentClassifier:
        """Build the classifier this mode describes.

        Raises:
            ConfigurationError: If an LLM mode is requested without ``llm``.
        """
        heuristic = HeuristicClassifier()
        if not self.uses_llm:
            return heuristic

        if llm is None:
            raise ConfigurationError("component_detection", self.value, ["heuristic"])

        if self is ComponentDetectionMode.LLM_FIRST_SCREEN:
            return CompositeClassifier(llm, heuristic, primary_only_for_first_screen=True)
        if self is ComponentDetectionMode.LLM_EVERY_SCREEN:
            return CompositeClassifier(llm, heuristic, primary_only_for_first_screen=False)
        return CompositeClassifier(heuristic, llm, primary_only_for_first_screen=False)
