from __future__ import annotations

import pytest

from mirror_explorer.core.budget import BUILT_IN_SKIP_PATTERNS, DEFAULT_BUDGET, ExplorationBudget
from mirror_explorer.core.config import Config
from mirror_explorer.core.errors import ConfigurationError


def test_defaults_validate() -> None:
    settings = Config()
    assert settings.scroll_dedup_levenshtein_max == 3
    assert settings.scroll_dedup_proximity_pt == 15.0
    assert settings.validate_config()


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SCROLL_DEDUP_STRATEGY", "levenshtein")
    monkeypatch.setenv("EXPLORATION_MAX_DEPTH", "4")
    settings = Config()
    assert settings.scroll_dedup_strategy == "levenshtein"
    assert settings.exploration_max_depth == 4


@pytest.mark.parametrize(
    "overrides",
    [
        {"scroll_dedup_strategy": "fuzzy"},
        {"component_detection": "llmFirstScreen"},
        {"log_level": "LOUD"},
        {"fingerprint_similarity_threshold": 1.5},
        {"exploration_max_depth": 0},
    ],
)
def test_invalid_values_raise(overrides: dict) -> None:
    with pytest.raises(ConfigurationError) as exc:
        Config(**overrides).validate_config()
    assert exc.value.setting in overrides


def test_budget_from_config() -> None:
    settings = Config(exploration_max_depth=3, exploration_max_screens=10, skip_elements=["Archive"])
    budget = ExplorationBudget.from_config(settings)
    assert budget.max_depth == 3
    assert budget.max_screens == 10
    assert budget.skip_patterns[: len(BUILT_IN_SKIP_PATTERNS)] == BUILT_IN_SKIP_PATTERNS
    assert budget.should_skip_element("Archive chat")


def test_budget_limits() -> None:
    assert not DEFAULT_BUDGET.is_exhausted(depth=2, screen_count=5, elapsed_seconds=10)
    assert DEFAULT_BUDGET.is_exhausted(depth=6, screen_count=5, elapsed_seconds=10)
    assert DEFAULT_BUDGET.is_exhausted(depth=2, screen_count=30, elapsed_seconds=10)
    assert DEFAULT_BUDGET.is_exhausted(depth=2, screen_count=5, elapsed_seconds=300)


def test_skip_patterns_are_case_insensitive() -> None:
    assert DEFAULT_BUDGET.should_skip_element("DELETE ALL PHOTOS")
    assert DEFAULT_BUDGET.should_skip_element("Se déconnecter")
    assert not DEFAULT_BUDGET.should_skip_element("General")
    assert DEFAULT_BUDGET.merged_with([]) is DEFAULT_BUDGET
