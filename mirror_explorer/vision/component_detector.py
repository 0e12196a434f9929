"""Heuristic grouping of classified OCR elements into screen components."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Optional, Pattern, Sequence, Tuple

from .components import (
    UNCLASSIFIED,
    AbsorbCondition,
    ChevronMode,
    ClickTargetRule,
    ComponentDefinition,
    ScreenZone,
)
from .element_classifier import (
    CHEVRON_CHARACTERS,
    ClassifiedElement,
    ElementClassifier,
    ElementRole,
    element_key,
    is_chevron,
    is_dismiss_button,
    is_state_indicator,
)
from .models import TapPoint

NAV_BAR_ZONE_FRACTION = 0.12
TAB_BAR_ZONE_FRACTION = 0.12
LONG_TEXT_THRESHOLD = 50

_NUMERIC_PATTERN = re.compile(r"\d+([.,]\d+)?")


@dataclass(frozen=True)
class ScreenComponent:
    """A detected grouping of classified elements. Never mutated after creation."""

    kind: str
    definition: ComponentDefinition
    elements: Tuple[ClassifiedElement, ...]
    # Best element to tap, None for non-interactive components
    tap_target: Optional[TapPoint]
    has_chevron: bool
    top_y: float
    bottom_y: float


@dataclass(frozen=True)
class RowProperties:
    """Properties of one row used to score definitions."""

    element_count: int
    has_chevron: bool
    has_numeric_value: bool
    row_height: float
    top_y: float
    bottom_y: float
    zone: ScreenZone
    has_state_indicator: bool
    has_long_text: bool
    has_dismiss_button: bool
    average_confidence: float
    # Bare 1-3 digit elements such as badge counts
    numeric_only_count: int
    element_texts: Tuple[str, ...]


def _is_short_numeric_only(text: str) -> bool:
    trimmed = text.strip()
    return 0 < len(trimmed) <= 3 and trimmed.isdigit()


def compute_row_properties(row: Sequence[ClassifiedElement], screen_height: float) -> RowProperties:
    ys = [el.point.tap_y for el in row]
    top_y = min(ys, default=0.0)
    bottom_y = max(ys, default=0.0)
    mid_y = (top_y + bottom_y) / 2

    if screen_height > 0 and mid_y < screen_height * NAV_BAR_ZONE_FRACTION:
        zone = ScreenZone.NAV_BAR
    elif screen_height > 0 and mid_y > screen_height * (1 - TAB_BAR_ZONE_FRACTION):
        zone = ScreenZone.TAB_BAR
    else:
        zone = ScreenZone.CONTENT

    texts = tuple(el.point.text for el in row)
    return RowProperties(
        element_count=len(row),
        # Exact ">" or embedded "Wi-Fi >"
        has_chevron=any(t.strip().endswith(tuple(CHEVRON_CHARACTERS)) for t in texts),
        has_numeric_value=any(_NUMERIC_PATTERN.search(t) for t in texts),
        row_height=bottom_y - top_y,
        top_y=top_y,
        bottom_y=bottom_y,
        zone=zone,
        has_state_indicator=any(is_state_indicator(t) for t in texts),
        has_long_text=any(len(t) > LONG_TEXT_THRESHOLD for t in texts),
        has_dismiss_button=any(is_dismiss_button(t) for t in texts),
        average_confidence=sum(el.point.confidence for el in row) / len(row) if row else 0.0,
        numeric_only_count=sum(1 for t in texts if _is_short_numeric_only(t)),
        element_texts=texts,
    )


@lru_cache(maxsize=128)
def _compile(pattern: str) -> Optional[Pattern[str]]:
    try:
        return re.compile(pattern)
    except re.error:
        return None


class ComponentScoring:
    """Scores definitions against row properties. Stateless."""

    @staticmethod
    def score_match(definition: ComponentDefinition, row: RowProperties) -> Optional[float]:
        """Return a specificity score, or None when a hard constraint fails."""
        rules = definition.match_rules
        score = 0.0

        if rules.zone != row.zone:
            return None

        count = row.element_count
        if rules.exclude_numeric_only:
            count -= row.numeric_only_count
        if count < rules.min_elements or count > rules.max_elements:
            return None

        if row.row_height > rules.max_row_height_pt:
            return None

        if rules.chevron_mode is ChevronMode.REQUIRED:
            if not row.has_chevron:
                return None
            score += 3.0
        elif rules.chevron_mode is ChevronMode.FORBIDDEN:
            if row.has_chevron:
                return None
            score += 1.0
        elif rules.chevron_mode is ChevronMode.PREFERRED:
            if row.has_chevron:
                score += 3.0
        elif rules.row_has_chevron is not None:
            if rules.row_has_chevron != row.has_chevron:
                return None
            score += 3.0 if rules.row_has_chevron else 1.0

        if rules.has_numeric_value is not None:
            if rules.has_numeric_value != row.has_numeric_value:
                return None
            score += 2.0

        if rules.has_long_text is not None:
            if rules.has_long_text != row.has_long_text:
                return None
            score += 2.0

        if rules.has_dismiss_button is not None:
            if rules.has_dismiss_button != row.has_dismiss_button:
                return None
            score += 3.0

        if rules.min_confidence is not None and row.average_confidence < rules.min_confidence:
            return None

        if rules.text_pattern:
            regex = _compile(rules.text_pattern)
            if regex is None or not any(regex.search(t) for t in row.element_texts):
                return None
            score += 2.0

        # Tighter ranges are more specific
        if rules.max_elements - rules.min_elements < 3:
            score += 1.0

        if rules.zone in (ScreenZone.NAV_BAR, ScreenZone.TAB_BAR):
            score += 2.0

        return score

    @staticmethod
    def best_match(definitions: Sequence[ComponentDefinition], row: RowProperties) -> Optional[ComponentDefinition]:
        """Highest-scoring definition; the earliest wins ties."""
        best: Optional[ComponentDefinition] = None
        best_score = -1.0
        for definition in definitions:
            score = ComponentScoring.score_match(definition, row)
            if score is not None and score > best_score:
                best, best_score = definition, score
        return best


def _should_absorb(row: Sequence[ClassifiedElement], condition: AbsorbCondition) -> bool:
    if condition is AbsorbCondition.INFO_OR_DECORATION_ONLY:
        return all(el.role in (ElementRole.INFO, ElementRole.DECORATION) for el in row)
    return True


def _select_tap_target(elements: Sequence[ClassifiedElement], definition: ComponentDefinition) -> Optional[TapPoint]:
    interaction = definition.interaction
    if not interaction.clickable or not elements:
        return None

    rule = interaction.click_target
    if rule is ClickTargetRule.FIRST_NAVIGATION:
        for el in elements:
            if el.role is ElementRole.NAVIGATION:
                return el.point
    elif rule is ClickTargetRule.FIRST_DISMISS_BUTTON:
        for el in elements:
            if is_dismiss_button(el.point.text):
                return el.point
    elif rule is ClickTargetRule.CENTERED:
        ordered = sorted(elements, key=lambda el: el.point.tap_x)
        return ordered[len(ordered) // 2].point
    else:
        return None

    # Fall back to the first non-decoration element
    for el in elements:
        if el.role is not ElementRole.DECORATION:
            return el.point
    return None


def build_component(definition: ComponentDefinition, elements: Sequence[ClassifiedElement]) -> ScreenComponent:
    ys = [el.point.tap_y for el in elements]
    return ScreenComponent(
        kind=definition.name,
        definition=definition,
        elements=tuple(elements),
        tap_target=_select_tap_target(elements, definition),
        has_chevron=any(is_chevron(el.point.text) for el in elements),
        top_y=min(ys, default=0.0),
        bottom_y=max(ys, default=0.0),
    )


def _build_fallback(element: ClassifiedElement) -> ScreenComponent:
    return ScreenComponent(
        kind=UNCLASSIFIED.name,
        definition=UNCLASSIFIED,
        elements=(element,),
        tap_target=None,
        has_chevron=element.has_chevron_context,
        top_y=element.point.tap_y,
        bottom_y=element.point.tap_y,
    )


class ComponentDetector:
    """Groups classified elements into components using definitions. Stateless."""

    @staticmethod
    def detect(
        classified: Sequence[ClassifiedElement],
        definitions: Sequence[ComponentDefinition],
        screen_height: float,
    ) -> List[ScreenComponent]:
        """Group ``classified`` into components.

        1. Rows are formed by Y proximity.
        2. Each row is matched against the definitions (most specific wins).
        3. A matched definition with ``absorbs_below_within_pt`` pulls in the rows
           below it while they stay within range and meet the absorb condition.
        4. Rows matching nothing become one ``unclassified`` component per element.

        Returns components ordered by ``top_y``; empty input gives ``[]``.
        """
        if not classified:
            return []

        by_key: Dict[str, ClassifiedElement] = {element_key(el.point): el for el in classified}
        rows = ElementClassifier.group_into_rows([el.point for el in classified])
        classified_rows = [[by_key[element_key(p)] for p in row if element_key(p) in by_key] for row in rows]

        components: List[ScreenComponent] = []
        consumed: set[int] = set()

        for index, row in enumerate(classified_rows):
            if index in consumed or not row:
                continue
            consumed.add(index)

            props = compute_row_properties(row, screen_height)
            match = ComponentScoring.best_match(definitions, props)
            if match is None:
                components.extend(_build_fallback(el) for el in row)
                continue

            members = list(row)
            absorb_range = match.grouping.absorbs_below_within_pt
            if absorb_range > 0:
                max_y = props.bottom_y + absorb_range
                for below_index in range(index + 1, len(classified_rows)):
                    below = classified_rows[below_index]
                    if below_index in consumed or not below:
                        continue
                    if min(el.point.tap_y for el in below) > max_y:
                        break
                    if _should_absorb(below, match.grouping.absorb_condition):
                        members.extend(below)
                        consumed.add(below_index)

            components.append(build_component(match, members))

        return sorted(components, key=lambda c: c.top_y)

    @staticmethod
    def apply_absorption(components: Sequence[ScreenComponent]) -> List[ScreenComponent]:
        """Merge components produced by any classifier using their absorb rules.

        Absorbers never swallow other absorbers nor components from another zone.
        """
        ordered = sorted(components, key=lambda c: c.top_y)
        consumed: set[int] = set()
        result: List[ScreenComponent] = []

        for i, component in enumerate(ordered):
            if i in consumed:
                continue
            absorb_range = component.definition.grouping.absorbs_below_within_pt
            if absorb_range <= 0:
                result.append(component)
                continue

            max_y = component.bottom_y + absorb_range
            merged = list(component.elements)
            for j in range(i + 1, len(ordered)):
                if j in consumed:
                    continue
                below = ordered[j]
                if below.top_y > max_y:
                    break
                if below.definition.grouping.absorbs_below_within_pt > 0:
                    continue
                if below.definition.match_rules.zone != component.definition.match_rules.zone:
                    continue
                if _should_absorb(below.elements, component.definition.grouping.absorb_condition):
                    merged.extend(below.elements)
                    consumed.add(j)

            if len(merged) > len(component.elements):
                result.append(build_component(component.definition, merged))
            else:
                result.append(component)

        return result
