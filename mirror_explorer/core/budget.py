"""Budget constraints for autonomous app exploration."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Tuple

from .config import Config, config

# Safety-critical skip patterns that are always present. Covers destructive
# actions, network toggles, ad/sponsored content and purchase flows in
# English, French, Spanish and German.
BUILT_IN_SKIP_PATTERNS: Tuple[str, ...] = (
    # English destructive
    "delete", "sign out", "log out", "reset all", "erase all", "remove all",
    # French destructive
    "supprimer", "déconnexion", "déconnecter", "réinitialiser", "effacer",
    # Spanish destructive
    "eliminar", "cerrar sesión", "restablecer", "borrar",
    # Network toggles
    "airplane mode", "mode avion", "modo avión", "flugmodus",
    # Ad/sponsored content
    "sponsored", "promoted", "advertisement", "order now", "buy now", "install now",
    # Purchases
    "subscribe", "purchase", "s'abonner", "acheter",
)


@dataclass(frozen=True)
class ExplorationBudget:
    """Limits on depth, screen count, time and per-screen actions for one session."""

    max_depth: int = 6
    max_screens: int = 30
    max_time_seconds: int = 300
    max_actions_per_screen: int = 5
    scroll_limit: int = 3
    max_scouts_per_screen: int = 8
    skip_patterns: Tuple[str, ...] = field(default=BUILT_IN_SKIP_PATTERNS)

    @classmethod
    def from_config(cls, settings: Optional[Config] = None) -> "ExplorationBudget":
        """Build a budget from configuration, with extra skip patterns appended."""
        settings = settings or config
        budget = cls(
            max_depth=settings.exploration_max_depth,
            max_screens=settings.exploration_max_screens,
            max_time_seconds=settings.exploration_max_time_seconds,
            max_actions_per_screen=settings.exploration_max_actions_per_screen,
            scroll_limit=settings.exploration_scroll_limit,
            max_scouts_per_screen=settings.exploration_max_scouts_per_screen,
        )
        return budget.merged_with(settings.skip_elements)

    def merged_with(self, additional_patterns: Iterable[str]) -> "ExplorationBudget":
        """Return a new budget with extra skip patterns appended to the current ones."""
        extra = tuple(additional_patterns)
        if not extra:
            return self
        return replace(self, skip_patterns=self.skip_patterns + extra)

    def is_exhausted(self, depth: int, screen_count: int, elapsed_seconds: float) -> bool:
        """Check whether any budget limit has been reached."""
        return (
            depth >= self.max_depth
            or screen_count >= self.max_screens
            or elapsed_seconds >= self.max_time_seconds
        )

    def should_skip_element(self, text: str) -> bool:
        """Case-insensitive containment check against the skip patterns."""
        lowered = text.lower()
        return any(pattern.lower() in lowered for pattern in self.skip_patterns)


DEFAULT_BUDGET = ExplorationBudget()
