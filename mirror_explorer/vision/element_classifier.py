"""Role classification for OCR elements.

Roles come from text patterns plus row context: a label sharing a row with a
chevron leads somewhere, a label sharing a row with "On"/"Off" is a toggle,
and so on. Rows are formed by grouping elements whose Y positions are close.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Sequence, Tuple

from ..core.budget import DEFAULT_BUDGET, ExplorationBudget
from .landmarks import LANDMARK_MIN_LENGTH, is_punctuation_only
from .models import TapPoint

ROW_TOLERANCE = 15.0

CHEVRON_CHARACTERS = frozenset([">", "›", "❯"])
DISMISS_CHARACTERS = frozenset(["X", "x", "✕", "×", "✖"])
STATE_INDICATORS = frozenset(["on", "off"])
INFO_WORDS = frozenset(
    [
        "on", "off", "none", "auto", "connected", "enabled", "disabled",
        "default", "never", "always", "manual",
    ]
)

# Fraction of screen height holding clock, battery and signal glyphs
STATUS_BAR_ZONE_FRACTION = 0.10

LONG_TEXT_LENGTH = 50

_VALUE_PATTERN = re.compile(r"^\d+(\.\d+)?\s*(GB|MB|KB|TB|%)$", re.IGNORECASE)
_TIME_PATTERN = re.compile(r"^\d{1,2}:\d{2}\d?$")
_CONJUNCTIONS = frozenset(["and", "or", "but", "et", "ou", "mais"])
_HELP_LINK_PATTERNS = (
    "learn more", "en savoir plus", "mas informacion", "weitere infos",
    "see how", "find out", "how to",
)


class ElementRole(Enum):
    """Semantic role of an OCR element."""

    NAVIGATION = "navigation"  # leads to a new screen
    STATE_CHANGE = "state_change"  # toggle row label
    DESTRUCTIVE = "destructive"  # matches a skip pattern
    INFO = "info"  # value or state text
    DECORATION = "decoration"  # chevrons, punctuation, status bar


@dataclass(frozen=True, slots=True)
class ClassifiedElement:
    """A tap point annotated with its role."""

    point: TapPoint
    role: ElementRole
    # The element's row holds a chevron: tapping it is expected to navigate
    has_chevron_context: bool = False


def element_key(point: TapPoint) -> str:
    """Position-qualified key; the same text may appear at several places."""
    return f"{point.text}@{int(point.tap_x)},{int(point.tap_y)}"


def is_chevron(text: str) -> bool:
    return text.strip() in CHEVRON_CHARACTERS


def is_state_indicator(text: str) -> bool:
    return text.strip().lower() in STATE_INDICATORS


def is_dismiss_button(text: str) -> bool:
    return text.strip() in DISMISS_CHARACTERS


def _is_info_text(text: str) -> bool:
    trimmed = text.strip()
    if trimmed.lower() in INFO_WORDS:
        return True
    return bool(_VALUE_PATTERN.match(trimmed) or _TIME_PATTERN.match(trimmed))


def _is_sentence_like(text: str) -> bool:
    if "," not in text:
        return False
    words = set(text.lower().split())
    return not _CONJUNCTIONS.isdisjoint(words)


def _is_help_link(text: str) -> bool:
    lowered = text.lower()
    return any(pattern in lowered for pattern in _HELP_LINK_PATTERNS)


class ElementClassifier:
    """Classifies OCR elements by role. Stateless."""

    @staticmethod
    def group_into_rows(elements: Sequence[TapPoint], tolerance: float = ROW_TOLERANCE) -> List[List[TapPoint]]:
        """Group elements into rows by Y proximity, rows ordered top to bottom.

        An element joins the current row when it lies within ``tolerance`` of
        the row's last element.
        """
        if not elements:
            return []

        ordered = sorted(elements, key=lambda el: el.tap_y)
        rows: List[List[TapPoint]] = []
        current = [ordered[0]]
        for element in ordered[1:]:
            if abs(element.tap_y - current[-1].tap_y) <= tolerance:
                current.append(element)
            else:
                rows.append(current)
                current = [element]
        rows.append(current)
        return rows

    @staticmethod
    def classify(
        elements: Sequence[TapPoint],
        budget: ExplorationBudget = DEFAULT_BUDGET,
        screen_height: float = 0.0,
    ) -> List[ClassifiedElement]:
        """Classify every element, preserving input order.

        Priority order:
        0. decoration: status bar zone (skipped when ``screen_height`` is 0)
        1. decoration: chevrons, punctuation-only
        2. info: state words, values ("3.2 GB"), clock text
        3. decoration: text shorter than three characters
        4. destructive: skip pattern match
        5. state change: label on a row with an On/Off indicator
        6. navigation: label on a row with a chevron
        7. info: long, sentence-like or help-link text
        8. navigation: everything else
        """
        rows = ElementClassifier.group_into_rows(elements)
        row_of: Dict[str, int] = {}
        row_has_chevron: Dict[int, bool] = {}
        row_has_state: Dict[int, bool] = {}
        for index, row in enumerate(rows):
            row_has_chevron[index] = any(is_chevron(el.text) for el in row)
            row_has_state[index] = any(is_state_indicator(el.text) for el in row)
            for el in row:
                row_of[element_key(el)] = index

        result = []
        for element in elements:
            role, chevron_context = _classify_single(
                element, budget, screen_height, row_of, row_has_chevron, row_has_state
            )
            result.append(ClassifiedElement(point=element, role=role, has_chevron_context=chevron_context))
        return result


def _classify_single(
    element: TapPoint,
    budget: ExplorationBudget,
    screen_height: float,
    row_of: Dict[str, int],
    row_has_chevron: Dict[int, bool],
    row_has_state: Dict[int, bool],
) -> Tuple[ElementRole, bool]:
    text = element.text

    if screen_height > 0 and element.tap_y < screen_height * STATUS_BAR_ZONE_FRACTION:
        return ElementRole.DECORATION, False

    if is_chevron(text) or is_punctuation_only(text):
        return ElementRole.DECORATION, False

    # Before the length check: "On"/"Off" are short but meaningful
    if _is_info_text(text):
        return ElementRole.INFO, False

    if len(text) < LANDMARK_MIN_LENGTH:
        return ElementRole.DECORATION, False

    if budget.should_skip_element(text):
        return ElementRole.DESTRUCTIVE, False

    row = row_of.get(element_key(element))
    if row is None:
        return ElementRole.NAVIGATION, False

    if row_has_state[row] and not is_state_indicator(text):
        return ElementRole.STATE_CHANGE, False

    if row_has_chevron[row]:
        return ElementRole.NAVIGATION, True

    if len(text) > LONG_TEXT_LENGTH or _is_sentence_like(text) or _is_help_link(text):
        return ElementRole.INFO, False

    return ElementRole.NAVIGATION, False
