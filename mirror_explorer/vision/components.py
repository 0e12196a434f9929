"""Component definitions and the built-in catalog of phone UI patterns.

A ``ComponentDefinition`` describes a recognizable structured pattern (table
row with a disclosure chevron, toggle row, tab bar item...) through match
rules over row properties, interaction hints and grouping rules. Definitions
are pydantic models so user-supplied JSON files are validated on load.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.errors import ComponentDefinitionError
from ..core.logger import log


class ScreenZone(str, Enum):
    NAV_BAR = "nav_bar"
    CONTENT = "content"
    TAB_BAR = "tab_bar"


class ChevronMode(str, Enum):
    REQUIRED = "required"
    FORBIDDEN = "forbidden"
    PREFERRED = "preferred"


class ClickTargetRule(str, Enum):
    FIRST_NAVIGATION = "first_navigation_element"
    FIRST_DISMISS_BUTTON = "first_dismiss_button"
    CENTERED = "centered_element"
    NONE = "none"


class ClickResult(str, Enum):
    NAVIGATES = "navigates"
    TOGGLES = "toggles"
    DISMISSES = "dismisses"
    NONE = "none"


class AbsorbCondition(str, Enum):
    ANY = "any"
    INFO_OR_DECORATION_ONLY = "info_or_decoration_only"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ComponentMatchRules(_Frozen):
    """Constraints a row must satisfy to match a definition. ``None`` means don't care."""

    row_has_chevron: Optional[bool] = None
    chevron_mode: Optional[ChevronMode] = None
    min_elements: int = Field(default=1, ge=0)
    max_elements: int = Field(default=4, ge=0)
    max_row_height_pt: float = Field(default=90.0, ge=0)
    has_numeric_value: Optional[bool] = None
    has_long_text: Optional[bool] = None
    has_dismiss_button: Optional[bool] = None
    zone: ScreenZone = ScreenZone.CONTENT
    min_confidence: Optional[float] = Field(default=None, ge=0, le=1)
    exclude_numeric_only: Optional[bool] = None
    text_pattern: Optional[str] = None


class ComponentInteraction(_Frozen):
    clickable: bool = False
    click_target: ClickTargetRule = ClickTargetRule.NONE
    click_result: ClickResult = ClickResult.NONE
    back_after_click: bool = False


class ComponentGrouping(_Frozen):
    absorbs_same_row: bool = True
    absorbs_below_within_pt: float = Field(default=0.0, ge=0)
    absorb_condition: AbsorbCondition = AbsorbCondition.ANY


class ComponentDefinition(_Frozen):
    """Catalog entry describing one structured UI pattern."""

    name: str
    platform: str = "ios"
    description: str = ""
    visual_pattern: Tuple[str, ...] = ()
    match_rules: ComponentMatchRules = ComponentMatchRules()
    interaction: ComponentInteraction = ComponentInteraction()
    grouping: ComponentGrouping = ComponentGrouping()


def _definition(
    name: str,
    description: str,
    visual_pattern: Sequence[str],
    match: dict,
    interaction: dict,
    grouping: dict,
) -> ComponentDefinition:
    return ComponentDefinition(
        name=name,
        description=description,
        visual_pattern=tuple(visual_pattern),
        match_rules=ComponentMatchRules(**match),
        interaction=ComponentInteraction(**interaction),
        grouping=ComponentGrouping(**grouping),
    )


_NOT_CLICKABLE = {"clickable": False}
_NAVIGATES_BACK = {
    "clickable": True,
    "click_target": ClickTargetRule.FIRST_NAVIGATION,
    "click_result": ClickResult.NAVIGATES,
    "back_after_click": True,
}

# ----------------------------------------------------------------------
# Built-in catalog
# ----------------------------------------------------------------------
NAVIGATION_BAR = _definition(
    "navigation-bar",
    "Nav bar with back button, title, and optional action buttons at the top of the screen.",
    ["Back chevron or label on the left", "Title centered", "Action buttons on the right"],
    {"max_elements": 4, "max_row_height_pt": 50, "zone": ScreenZone.NAV_BAR},
    _NOT_CLICKABLE,
    {},
)

TAB_BAR_ITEM = _definition(
    "tab-bar-item",
    "Tab bar button at the bottom of the screen for top-level navigation.",
    ["Short label", "Bottom 12% of screen", "Evenly spaced horizontally"],
    {"max_elements": 6, "max_row_height_pt": 60, "zone": ScreenZone.TAB_BAR},
    {"clickable": True, "click_target": ClickTargetRule.CENTERED, "click_result": ClickResult.NAVIGATES},
    {"absorbs_same_row": False},
)

TABLE_ROW_DISCLOSURE = _definition(
    "table-row-disclosure",
    "Standard table row with disclosure chevron indicating navigation.",
    ["One or two text labels aligned left", "Optional value aligned right", "Chevron at the far right edge"],
    {"row_has_chevron": True, "max_elements": 4, "max_row_height_pt": 90},
    _NAVIGATES_BACK,
    {},
)

TABLE_ROW_DETAIL = _definition(
    "table-row-detail",
    "Table row with label and value but no chevron, indicating non-navigable detail.",
    ["Label on the left", "Value or detail text on the right", "No chevron indicator"],
    {"row_has_chevron": False, "max_elements": 4, "max_row_height_pt": 90},
    _NOT_CLICKABLE,
    {},
)

TOGGLE_ROW = _definition(
    "toggle-row",
    "Row with a switch/toggle control that should be skipped during exploration.",
    ["Label on the left", "On/Off indicator on the right"],
    {"row_has_chevron": False, "max_elements": 3, "max_row_height_pt": 90, "text_pattern": r"(?i)^(on|off)$"},
    {"clickable": False, "click_result": ClickResult.TOGGLES},
    {},
)

SECTION_HEADER = _definition(
    "section-header",
    "Section header text that labels a group of rows.",
    ["Short uppercase or title-case text", "Above a group of rows"],
    {"max_elements": 2, "max_row_height_pt": 40},
    _NOT_CLICKABLE,
    {},
)

SECTION_FOOTER = _definition(
    "section-footer",
    "Explanatory text below a group of rows, providing context about the section above.",
    ["Small text below a group of rows", "Often multiple lines"],
    {"max_elements": 3, "max_row_height_pt": 80, "has_long_text": True},
    _NOT_CLICKABLE,
    {"absorbs_below_within_pt": 50, "absorb_condition": AbsorbCondition.INFO_OR_DECORATION_ONLY},
)

SUMMARY_CARD = _definition(
    "summary-card",
    "Card showing a metric with title, large numeric value, and optional chevron.",
    ["Title text on first line", "Large numeric value on second line", "Optional chevron"],
    {"min_elements": 2, "max_elements": 6, "max_row_height_pt": 120, "has_numeric_value": True},
    _NAVIGATES_BACK,
    {"absorbs_below_within_pt": 50, "absorb_condition": AbsorbCondition.INFO_OR_DECORATION_ONLY},
)

ACTION_BUTTON = _definition(
    "action-button",
    "Standalone button for triggering an action.",
    ["Centered text", "Button styling or distinct color"],
    {"max_elements": 1, "max_row_height_pt": 60},
    {
        "clickable": True,
        "click_target": ClickTargetRule.CENTERED,
        "click_result": ClickResult.NAVIGATES,
        "back_after_click": True,
    },
    {"absorbs_same_row": False},
)

SEARCH_BAR = _definition(
    "search-bar",
    "Search field, typically near the top of the screen.",
    ["Search placeholder text", "Magnifying glass icon"],
    {"max_elements": 2, "max_row_height_pt": 50, "text_pattern": r"(?i)^search"},
    {
        "clickable": True,
        "click_target": ClickTargetRule.CENTERED,
        "click_result": ClickResult.NAVIGATES,
        "back_after_click": True,
    },
    {},
)

SEGMENTED_CONTROL = _definition(
    "segmented-control",
    "Tab-like selector with 2-4 short labels for switching content views.",
    ["2-4 short labels in a row", "Evenly spaced", "One appears selected"],
    {"min_elements": 2, "max_elements": 4, "max_row_height_pt": 50, "row_has_chevron": False},
    {"clickable": True, "click_target": ClickTargetRule.CENTERED, "click_result": ClickResult.NAVIGATES},
    {},
)

ALERT_DIALOG = _definition(
    "alert-dialog",
    "Modal alert dialog with dismiss/confirm buttons.",
    ["Overlay on screen", "OK/Cancel/Allow/Deny buttons"],
    {"max_elements": 4, "max_row_height_pt": 200, "has_dismiss_button": True},
    {
        "clickable": True,
        "click_target": ClickTargetRule.FIRST_DISMISS_BUTTON,
        "click_result": ClickResult.DISMISSES,
    },
    {"absorbs_below_within_pt": 20},
)

EXPLANATION_TEXT = _definition(
    "explanation-text",
    "Informational paragraph that is not an interactive element.",
    ["Long text spanning most of the screen width", "Sentence-like content"],
    {"max_elements": 3, "max_row_height_pt": 100, "has_long_text": True, "row_has_chevron": False},
    _NOT_CLICKABLE,
    {"absorbs_below_within_pt": 30, "absorb_condition": AbsorbCondition.INFO_OR_DECORATION_ONLY},
)

PAGE_TITLE = _definition(
    "page-title",
    "Large title text at the top of a content screen.",
    ["Large text", "Top of content zone", "Short descriptive text"],
    {"max_elements": 2, "max_row_height_pt": 60},
    _NOT_CLICKABLE,
    {},
)

EMPTY_STATE = _definition(
    "empty-state",
    "Empty screen with centered text and optional call-to-action button.",
    ["Centered text", "Possibly an icon above", "Optional button below"],
    {"max_elements": 4, "max_row_height_pt": 200, "text_pattern": r"(?i)^no .+"},
    _NOT_CLICKABLE,
    {"absorbs_below_within_pt": 40},
)

LIST_ITEM = _definition(
    "list-item",
    "Simple list item without chevron that may still be tappable.",
    ["Single label", "No chevron", "In a list context"],
    {"row_has_chevron": False, "max_elements": 2, "max_row_height_pt": 90},
    _NAVIGATES_BACK,
    {},
)

COMPONENT_CATALOG: Tuple[ComponentDefinition, ...] = (
    NAVIGATION_BAR,
    TAB_BAR_ITEM,
    TABLE_ROW_DISCLOSURE,
    TABLE_ROW_DETAIL,
    TOGGLE_ROW,
    SECTION_HEADER,
    SECTION_FOOTER,
    SUMMARY_CARD,
    ACTION_BUTTON,
    SEARCH_BAR,
    SEGMENTED_CONTROL,
    ALERT_DIALOG,
    EXPLANATION_TEXT,
    PAGE_TITLE,
    EMPTY_STATE,
    LIST_ITEM,
)

UNCLASSIFIED = ComponentDefinition(
    name="unclassified",
    description="Element not matching any component definition.",
    match_rules=ComponentMatchRules(min_elements=1, max_elements=1, max_row_height_pt=100),
)


# ----------------------------------------------------------------------
# Loading user definitions
# ----------------------------------------------------------------------
def load_definition_file(path: Path) -> ComponentDefinition:
    """Load and validate one JSON definition file.

    The file stem is used as the name when the file does not set one.

    Raises:
        ComponentDefinitionError: If the file is unreadable or invalid.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        log.error(f"Failed to read component definition {path}: {e}")
        raise ComponentDefinitionError(str(path), str(e)) from e

    if not isinstance(data, dict):
        raise ComponentDefinitionError(str(path), "top-level JSON value must be an object")
    data.setdefault("name", path.stem)

    try:
        return ComponentDefinition.model_validate(data)
    except ValidationError as e:
        log.error(f"Invalid component definition {path}: {e.error_count()} error(s)")
        raise ComponentDefinitionError(str(path), str(e)) from e


def load_definitions(directories: Iterable[Path]) -> List[ComponentDefinition]:
    """Load ``*.json`` definitions from ``directories``.

    Earlier directories take priority when names collide; missing directories
    are skipped.
    """
    seen: set[str] = set()
    definitions: List[ComponentDefinition] = []
    for directory in directories:
        directory = Path(directory)
        if not directory.is_dir():
            continue
        for path in sorted(directory.glob("*.json")):
            definition = load_definition_file(path)
            if definition.name in seen:
                continue
            seen.add(definition.name)
            definitions.append(definition)
    log.debug(f"Loaded {len(definitions)} component definition(s) from disk")
    return definitions


def merged_catalog(overrides: Sequence[ComponentDefinition]) -> Tuple[ComponentDefinition, ...]:
    """Overlay user definitions on the built-in catalog; user entries replace same-named ones."""
    by_name = {d.name: d for d in COMPONENT_CATALOG}
    for definition in overrides:
        by_name[definition.name] = definition
    return tuple(by_name.values())
