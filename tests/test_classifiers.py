from __future__ import annotations

import pytest

from mirror_explorer.core.errors import ConfigurationError
from mirror_explorer.vision.classifiers import (
    ComponentClassifier,
    ComponentDetectionMode,
    CompositeClassifier,
    HeuristicClassifier,
)
from mirror_explorer.vision.component_detector import (
    ComponentDetector,
    ComponentScoring,
    build_component,
    compute_row_properties,
)
from mirror_explorer.vision.components import (
    COMPONENT_CATALOG,
    EXPLANATION_TEXT,
    LIST_ITEM,
    TABLE_ROW_DISCLOSURE,
)
from mirror_explorer.vision.element_classifier import ElementClassifier
from mirror_explorer.vision.models import TapPoint

SCREEN_HEIGHT = 800.0


def _classified(points: list[TapPoint]):
    return ElementClassifier.classify(points, screen_height=SCREEN_HEIGHT)


def _detect(points: list[TapPoint]):
    return HeuristicClassifier().classify(_classified(points), COMPONENT_CATALOG, SCREEN_HEIGHT)


class FakeClassifier:
    def __init__(self, result) -> None:
        self.result = result
        self.calls = 0

    def classify(self, classified, definitions, screen_height):
        self.calls += 1
        return self.result


# ----------------------------------------------------------------------
# Heuristic detection
# ----------------------------------------------------------------------
def test_heuristic_is_total_on_empty_input() -> None:
    assert HeuristicClassifier().classify([], COMPONENT_CATALOG, SCREEN_HEIGHT) == []
    assert HeuristicClassifier().classify([], [], SCREEN_HEIGHT) == []


def test_disclosure_row() -> None:
    [component] = _detect([TapPoint("General", 60, 300), TapPoint(">", 360, 300)])
    assert component.kind == "table-row-disclosure"
    assert component.has_chevron
    assert component.tap_target is not None
    assert component.tap_target.text == "General"


def test_toggle_row_is_not_clickable() -> None:
    [component] = _detect([TapPoint("Bluetooth", 60, 400), TapPoint("On", 360, 400)])
    assert component.kind == "toggle-row"
    assert component.tap_target is None


def test_nav_bar_zone() -> None:
    [component] = _detect([TapPoint("Settings", 200, 90)])
    assert component.kind == "navigation-bar"


def test_unmatched_row_becomes_unclassified_per_element() -> None:
    points = [TapPoint(name, 20 + i * 70, 400) for i, name in enumerate(["Alpha", "Bravo", "Charlie", "Delta", "Echo"])]
    components = _detect(points)
    assert len(components) == 5
    assert all(c.kind == "unclassified" for c in components)
    assert all(len(c.elements) == 1 and c.tap_target is None for c in components)


def test_absorbs_info_rows_below() -> None:
    text = "Turning this setting on lets the app refresh content in the background while idle."
    components = _detect([TapPoint(text, 180, 300), TapPoint("Off", 180, 325)])
    assert len(components) == 1
    assert components[0].kind == EXPLANATION_TEXT.name
    assert len(components[0].elements) == 2
    assert components[0].bottom_y == 325


def test_results_sorted_by_top_y() -> None:
    components = _detect(
        [
            TapPoint("Privacy", 60, 500),
            TapPoint(">", 360, 500),
            TapPoint("General", 60, 300),
            TapPoint(">", 360, 300),
        ]
    )
    assert [c.top_y for c in components] == sorted(c.top_y for c in components)
    assert [c.tap_target.text for c in components] == ["General", "Privacy"]


def test_scoring_rejects_zone_and_prefers_specific() -> None:
    row = _classified([TapPoint("General", 60, 300), TapPoint(">", 360, 300)])
    props = compute_row_properties(row, SCREEN_HEIGHT)
    assert props.has_chevron
    assert ComponentScoring.score_match(LIST_ITEM, props) is None
    assert ComponentScoring.score_match(TABLE_ROW_DISCLOSURE, props) is not None
    assert ComponentScoring.best_match(COMPONENT_CATALOG, props) == TABLE_ROW_DISCLOSURE
    assert ComponentScoring.best_match([], props) is None


def test_apply_absorption_merges_components() -> None:
    text = "Turning this setting on lets the app refresh content in the background while idle."
    classified = _classified([TapPoint(text, 180, 300), TapPoint("Off", 180, 320)])
    separate = [build_component(EXPLANATION_TEXT, [classified[0]]), build_component(LIST_ITEM, [classified[1]])]
    merged = ComponentDetector.apply_absorption(separate)
    assert len(merged) == 1
    assert len(merged[0].elements) == 2


# ----------------------------------------------------------------------
# Cascade
# ----------------------------------------------------------------------
def test_classifiers_satisfy_protocol() -> None:
    assert isinstance(HeuristicClassifier(), ComponentClassifier)
    assert isinstance(CompositeClassifier(FakeClassifier([]), HeuristicClassifier()), ComponentClassifier)


def test_first_screen_only_uses_primary_once() -> None:
    primary = FakeClassifier(["primary"])
    fallback = FakeClassifier(["fallback"])
    composite = CompositeClassifier(primary, fallback, primary_only_for_first_screen=True)

    assert not composite.first_screen_done
    assert composite.classify([], COMPONENT_CATALOG, SCREEN_HEIGHT) == ["primary"]
    assert composite.first_screen_done
    # Primary would succeed again, but it is no longer consulted
    assert composite.classify([], COMPONENT_CATALOG, SCREEN_HEIGHT) == ["fallback"]
    assert composite.classify([], COMPONENT_CATALOG, SCREEN_HEIGHT) == ["fallback"]
    assert primary.calls == 1
    assert fallback.calls == 2

    composite.reset()
    assert composite.classify([], COMPONENT_CATALOG, SCREEN_HEIGHT) == ["primary"]


def test_primary_failure_falls_back() -> None:
    primary = FakeClassifier(None)
    fallback = FakeClassifier(["fallback"])
    composite = CompositeClassifier(primary, fallback, primary_only_for_first_screen=False)
    assert composite.classify([], COMPONENT_CATALOG, SCREEN_HEIGHT) == ["fallback"]
    assert composite.classify([], COMPONENT_CATALOG, SCREEN_HEIGHT) == ["fallback"]
    assert primary.calls == 2


def test_empty_primary_result_is_a_success() -> None:
    fallback = FakeClassifier(["fallback"])
    composite = CompositeClassifier(FakeClassifier([]), fallback)
    assert composite.classify([], COMPONENT_CATALOG, SCREEN_HEIGHT) == []
    assert fallback.calls == 0


def test_every_screen_always_tries_primary() -> None:
    primary = FakeClassifier(["primary"])
    composite = CompositeClassifier(primary, FakeClassifier(["fallback"]), primary_only_for_first_screen=False)
    for _ in range(3):
        assert composite.classify([], COMPONENT_CATALOG, SCREEN_HEIGHT) == ["primary"]
    assert primary.calls == 3


# ----------------------------------------------------------------------
# Detection mode
# ----------------------------------------------------------------------
def test_mode_parse() -> None:
    assert ComponentDetectionMode.parse("heuristic") is ComponentDetectionMode.HEURISTIC
    assert ComponentDetectionMode.parse("llm_first_screen") is ComponentDetectionMode.LLM_FIRST_SCREEN
    assert ComponentDetectionMode.parse("llm_every_screen") is ComponentDetectionMode.LLM_EVERY_SCREEN
    assert ComponentDetectionMode.parse("llm_fallback") is ComponentDetectionMode.LLM_FALLBACK
    assert ComponentDetectionMode.parse("llmFirstScreen") is None
    assert ComponentDetectionMode.parse("") is None


def test_mode_from_config() -> None:
    assert ComponentDetectionMode.from_config() is ComponentDetectionMode.HEURISTIC
    assert ComponentDetectionMode.from_config("llm_fallback") is ComponentDetectionMode.LLM_FALLBACK
    with pytest.raises(ConfigurationError):
        ComponentDetectionMode.from_config("sometimes")


def test_build_classifier() -> None:
    assert isinstance(ComponentDetectionMode.HEURISTIC.build_classifier(), HeuristicClassifier)

    with pytest.raises(ConfigurationError):
        ComponentDetectionMode.LLM_FIRST_SCREEN.build_classifier()

    llm = FakeClassifier(None)
    first = ComponentDetectionMode.LLM_FIRST_SCREEN.build_classifier(llm)
    assert isinstance(first, CompositeClassifier)
    assert first.primary is llm and first.primary_only_for_first_screen

    every = ComponentDetectionMode.LLM_EVERY_SCREEN.build_classifier(llm)
    assert every.primary is llm and not every.primary_only_for_first_screen

    fallback = ComponentDetectionMode.LLM_FALLBACK.build_classifier(llm)
    assert isinstance(fallback.primary, HeuristicClassifier)
    assert fallback.fallback is llm
