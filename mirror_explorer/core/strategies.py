"""Exploration strategies for the three app categories (mobile, social, desktop).

Each strategy decides how a screen is classified, which elements are worth
tapping and in what order, when a branch is terminal and how to go back. The
set is closed: ``MobileAppStrategy`` is the base policy, ``SocialAppStrategy``
holds a mobile strategy and layers engagement filters and a detail-screen depth
cap on top of it, and ``DesktopAppStrategy`` is an independent sibling for
generic desktop windows.
"""

from __future__ import annotations

from enum import Enum
from typing import AbstractSet, List, Optional, Protocol, Sequence

from ..vision.landmarks import HEADER_ZONE_MAX_Y, LANDMARK_MAX_LENGTH, filter_navigable_elements
from ..vision.models import DetectedIcon, TapPoint
from .budget import ExplorationBudget
from .fingerprint import StructuralFingerprint

BACK_NAVIGATION_HINT = "Back navigation"


class ScreenType(Enum):
    """Coarse shape of a screen."""

    TAB_ROOT = "tab_root"
    LIST = "list"
    DETAIL = "detail"
    MODAL = "modal"
    SETTINGS = "settings"
    UNKNOWN = "unknown"


class BacktrackAction(Enum):
    """How the driver should return to the previous screen."""

    PRESS_BACK = "press_back"  # keyboard shortcut, desktop windows
    PRESS_HOME = "press_home"
    TAP_BACK = "tap_back"  # "<" button in the navigation bar
    NONE = "none"


class ExplorationStrategy(Protocol):
    """Capability set shared by every strategy variant."""

    name: str
    budget: ExplorationBudget

    def classify_screen(self, elements: Sequence[TapPoint], hints: Sequence[str]) -> ScreenType:
        ...

    def should_skip(self, element_text: str, budget: Optional[ExplorationBudget] = None) -> bool:
        ...

    def rank_elements(
        self,
        elements: Sequence[TapPoint],
        icons: Sequence[DetectedIcon],
        visited_elements: AbstractSet[str],
        depth: int,
        screen_type: ScreenType,
    ) -> List[TapPoint]:
        ...

    def is_terminal(
        self,
        elements: Sequence[TapPoint],
        depth: int,
        budget: ExplorationBudget,
        screen_type: ScreenType,
    ) -> bool:
        ...

    def backtrack_method(self, current_hints: Sequence[str], depth: int) -> BacktrackAction:
        ...

    def extract_fingerprint(self, elements: Sequence[TapPoint], icons: Sequence[DetectedIcon]) -> str:
        ...


def _has_back_hint(hints: Sequence[str]) -> bool:
    return any(BACK_NAVIGATION_HINT in hint for hint in hints)


def _split_visited(
    elements: Sequence[TapPoint], visited: AbstractSet[str]
) -> tuple[List[TapPoint], List[TapPoint]]:
    unvisited = [el for el in elements if el.text not in visited]
    seen = [el for el in elements if el.text in visited]
    return unvisited, seen


class MobileAppStrategy:
    """Base strategy for standard phone apps.

    Recognizes tab bars, lists, detail screens and modals, prefers unvisited
    navigation targets and never taps destructive actions.
    """

    name = "mobile"

    modal_dismiss_patterns = frozenset(["close", "done", "cancel", "dismiss", "ok"])

    # Minimum navigable rows for a list/settings screen
    list_row_threshold = 4

    # Tab bars occupy roughly the bottom 12% of the screen
    tab_bar_zone_fraction = 0.88

    def __init__(self, budget: Optional[ExplorationBudget] = None) -> None:
        # Ranking filters against this budget's skip patterns
        self.budget = budget or ExplorationBudget.from_config()

    def classify_screen(self, elements: Sequence[TapPoint], hints: Sequence[str]) -> ScreenType:
        has_back_chevron = _has_back_hint(hints)
        has_tab_bar = self._detect_tab_bar(elements)

        top_elements = [el for el in elements if el.tap_y < HEADER_ZONE_MAX_Y]
        if any(el.text.lower() in self.modal_dismiss_patterns for el in top_elements):
            return ScreenType.MODAL
        if has_tab_bar and not has_back_chevron:
            return ScreenType.TAB_ROOT

        navigable = filter_navigable_elements(elements)
        if len(navigable) >= self.list_row_threshold:
            return ScreenType.LIST if has_back_chevron else ScreenType.SETTINGS
        if has_back_chevron:
            return ScreenType.DETAIL
        return ScreenType.UNKNOWN

    def should_skip(self, element_text: str, budget: Optional[ExplorationBudget] = None) -> bool:
        return (budget or self.budget).should_skip_element(element_text)

    def rank_elements(
        self,
        elements: Sequence[TapPoint],
        icons: Sequence[DetectedIcon],
        visited_elements: AbstractSet[str],
        depth: int,
        screen_type: ScreenType,
    ) -> List[TapPoint]:
        """Order candidate elements by exploration value, most interesting first.

        Skip-matched and non-navigable elements are dropped. Unvisited elements
        come first, top to bottom; on tab roots the tab bar items lead. Visited
        elements trail in their original order.
        """
        navigable = [el for el in filter_navigable_elements(elements) if not self.should_skip(el.text)]
        unvisited, visited = _split_visited(navigable, visited_elements)

        if screen_type is ScreenType.TAB_ROOT:
            tab_bar_y = self._estimate_tab_bar_y(elements)
            tab_items = [el for el in unvisited if el.tap_y >= tab_bar_y]
            content_items = [el for el in unvisited if el.tap_y < tab_bar_y]
            return tab_items + sorted(content_items, key=lambda el: el.tap_y) + visited

        return sorted(unvisited, key=lambda el: el.tap_y) + visited

    def is_terminal(
        self,
        elements: Sequence[TapPoint],
        depth: int,
        budget: ExplorationBudget,
        screen_type: ScreenType,
    ) -> bool:
        return depth >= budget.max_depth

    def backtrack_method(self, current_hints: Sequence[str], depth: int) -> BacktrackAction:
        if _has_back_hint(current_hints) or depth > 0:
            return BacktrackAction.TAP_BACK
        return BacktrackAction.NONE

    def extract_fingerprint(self, elements: Sequence[TapPoint], icons: Sequence[DetectedIcon]) -> str:
        return StructuralFingerprint.compute(elements, icons)

    # ------------------------------------------------------------------
    # Tab bar detection
    # ------------------------------------------------------------------
    def _detect_tab_bar(self, elements: Sequence[TapPoint]) -> bool:
        if not elements:
            return False
        tab_bar_y = self._estimate_tab_bar_y(elements)
        # Tab bar items are short labels, usually 3-5 of them
        bottom_labels = [
            el for el in elements if el.tap_y >= tab_bar_y and len(el.text) <= LANDMARK_MAX_LENGTH
        ]
        return len(bottom_labels) >= 3

    def _estimate_tab_bar_y(self, elements: Sequence[TapPoint]) -> float:
        if not elements:
            return 800.0
        return max(el.tap_y for el in elements) * self.tab_bar_zone_fraction


class SocialAppStrategy:
    """Strategy for social media apps (Reddit, Instagram, TikTok...).

    Delegates classification, backtracking and fingerprinting to a mobile
    strategy unchanged. Adds engagement skip patterns and caps how deep it
    follows detail screens (profiles, post threads), which chain on forever.
    """

    name = "social"

    social_skip_patterns = frozenset(
        [
            "sponsored", "promoted", "story", "stories",
            "follow", "unfollow", "share", "repost",
            "upvote", "downvote",
        ]
    )

    profile_depth_cap = 3

    def __init__(
        self,
        base: Optional[MobileAppStrategy] = None,
        budget: Optional[ExplorationBudget] = None,
    ) -> None:
        self._base = base or MobileAppStrategy(budget)

    @property
    def budget(self) -> ExplorationBudget:
        return self._base.budget

    def classify_screen(self, elements: Sequence[TapPoint], hints: Sequence[str]) -> ScreenType:
        return self._base.classify_screen(elements, hints)

    def should_skip(self, element_text: str, budget: Optional[ExplorationBudget] = None) -> bool:
        if self._base.should_skip(element_text, budget):
            return True
        return self._is_social_skip(element_text)

    def rank_elements(
        self,
        elements: Sequence[TapPoint],
        icons: Sequence[DetectedIcon],
        visited_elements: AbstractSet[str],
        depth: int,
        screen_type: ScreenType,
    ) -> List[TapPoint]:
        ranked = self._base.rank_elements(elements, icons, visited_elements, depth, screen_type)
        return [el for el in ranked if not self._is_social_skip(el.text)]

    def is_terminal(
        self,
        elements: Sequence[TapPoint],
        depth: int,
        budget: ExplorationBudget,
        screen_type: ScreenType,
    ) -> bool:
        if self._base.is_terminal(elements, depth, budget, screen_type):
            return True
        return screen_type is ScreenType.DETAIL and depth >= self.profile_depth_cap

    def backtrack_method(self, current_hints: Sequence[str], depth: int) -> BacktrackAction:
        return self._base.backtrack_method(current_hints, depth)

    def extract_fingerprint(self, elements: Sequence[TapPoint], icons: Sequence[DetectedIcon]) -> str:
        return self._base.extract_fingerprint(elements, icons)

    def _is_social_skip(self, text: str) -> bool:
        lowered = text.lower()
        return any(pattern in lowered for pattern in self.social_skip_patterns)


class DesktopAppStrategy:
    """Strategy for generic desktop application windows.

    Desktop windows have sidebars, dialogs and content panes instead of tab
    bars; going back is a keyboard shortcut rather than a tap.
    """

    name = "desktop"

    # Elements left of this X are treated as sidebar items
    sidebar_max_x = 200.0
    sidebar_min_elements = 3
    list_min_elements = 4
    dialog_max_elements = 8

    modal_dismiss_patterns = frozenset(["ok", "cancel", "close", "done", "dismiss"])
    desktop_skip_patterns = ("quit", "force quit", "format", "uninstall")

    def __init__(self, budget: Optional[ExplorationBudget] = None) -> None:
        self.budget = budget or ExplorationBudget.from_config()

    def classify_screen(self, elements: Sequence[TapPoint], hints: Sequence[str]) -> ScreenType:
        navigable = filter_navigable_elements(elements)

        has_modal_dismiss = any(el.text.lower() in self.modal_dismiss_patterns for el in navigable)
        if has_modal_dismiss and len(navigable) <= self.dialog_max_elements:
            return ScreenType.MODAL

        sidebar = [el for el in navigable if el.tap_x < self.sidebar_max_x]
        if len(sidebar) >= self.sidebar_min_elements:
            return ScreenType.SETTINGS
        if len(navigable) >= self.list_min_elements:
            return ScreenType.LIST
        if navigable:
            return ScreenType.DETAIL
        return ScreenType.UNKNOWN

    def should_skip(self, element_text: str, budget: Optional[ExplorationBudget] = None) -> bool:
        if (budget or self.budget).should_skip_element(element_text):
            return True
        lowered = element_text.lower()
        return any(pattern in lowered for pattern in self.desktop_skip_patterns)

    def rank_elements(
        self,
        elements: Sequence[TapPoint],
        icons: Sequence[DetectedIcon],
        visited_elements: AbstractSet[str],
        depth: int,
        screen_type: ScreenType,
    ) -> List[TapPoint]:
        """Sidebar items first, then content, both top to bottom; visited last."""
        navigable = [el for el in filter_navigable_elements(elements) if not self.should_skip(el.text)]
        unvisited, visited = _split_visited(navigable, visited_elements)

        sidebar = sorted((el for el in unvisited if el.tap_x < self.sidebar_max_x), key=lambda el: el.tap_y)
        content = sorted((el for el in unvisited if el.tap_x >= self.sidebar_max_x), key=lambda el: el.tap_y)
        return sidebar + content + visited

    def is_terminal(
        self,
        elements: Sequence[TapPoint],
        depth: int,
        budget: ExplorationBudget,
        screen_type: ScreenType,
    ) -> bool:
        if depth >= budget.max_depth:
            return True
        # Dialogs get dismissed, not explored
        if screen_type is ScreenType.MODAL:
            return True
        if screen_type is ScreenType.DETAIL:
            return len(filter_navigable_elements(elements)) <= 1
        return False

    def backtrack_method(self, current_hints: Sequence[str], depth: int) -> BacktrackAction:
        if depth > 0:
            return BacktrackAction.PRESS_BACK
        return BacktrackAction.NONE

    def extract_fingerprint(self, elements: Sequence[TapPoint], icons: Sequence[DetectedIcon]) -> str:
        return StructuralFingerprint.compute(elements, icons)
