from __future__ import annotations

import pytest

from mirror_explorer.core.budget import ExplorationBudget
from mirror_explorer.core.strategies import DesktopAppStrategy, MobileAppStrategy, SocialAppStrategy
from mirror_explorer.core.strategy_detector import StrategyChoice, StrategyDetector, strategy_for


def test_explicit_strategy_wins() -> None:
    choice = StrategyDetector.detect("generic-window", "com.reddit.Reddit", "Reddit", explicit_strategy="mobile")
    assert choice is StrategyChoice.MOBILE


def test_unknown_explicit_strategy_falls_through() -> None:
    assert StrategyDetector.detect("iphone", "com.reddit.Reddit", None, explicit_strategy="rocket") is StrategyChoice.SOCIAL


def test_generic_window_is_desktop() -> None:
    assert StrategyDetector.detect("generic-window", None, "Reddit") is StrategyChoice.DESKTOP


@pytest.mark.parametrize(
    "bundle_id",
    ["com.reddit.Reddit", "com.burbn.instagram", "com.atebits.Tweetie2", "com.zhiliaoapp.musically"],
)
def test_social_bundle_ids(bundle_id: str) -> None:
    assert StrategyDetector.detect("iphone", bundle_id, None) is StrategyChoice.SOCIAL


@pytest.mark.parametrize("app_name", ["Reddit", "INSTAGRAM", "tiktok", "Facebook Lite", "X"])
def test_social_app_names(app_name: str) -> None:
    assert StrategyDetector.detect("iphone", "com.example.unknown", app_name) is StrategyChoice.SOCIAL


@pytest.mark.parametrize("app_name", ["Settings", "Xcode", "Redditor's Notes", None])
def test_everything_unmatched_is_mobile(app_name) -> None:
    assert StrategyDetector.detect("iphone", "com.apple.Preferences", app_name) is StrategyChoice.MOBILE
    assert StrategyDetector.detect("iphone", None, app_name) is StrategyChoice.MOBILE


@pytest.mark.parametrize("app_name", ["X-Plane Flight", "Photo X", "X Files Viewer"])
def test_single_letter_name_needs_whole_name_match(app_name: str) -> None:
    assert StrategyDetector.detect("iphone", "com.laminar.xplane", app_name) is StrategyChoice.MOBILE
    assert StrategyDetector.detect("iphone", "com.laminar.xplane", " x ") is StrategyChoice.SOCIAL


def test_strategy_for() -> None:
    assert isinstance(strategy_for(StrategyChoice.MOBILE), MobileAppStrategy)
    assert isinstance(strategy_for(StrategyChoice.SOCIAL), SocialAppStrategy)
    assert isinstance(strategy_for(StrategyChoice.DESKTOP), DesktopAppStrategy)


def test_strategy_for_passes_budget() -> None:
    budget = ExplorationBudget().merged_with(["erase device"])
    for choice in StrategyChoice:
        strategy = strategy_for(choice, budget)
        assert strategy.budget is budget
        assert strategy.should_skip("Erase Device")


def test_parse_choice() -> None:
    assert StrategyChoice.parse("social") is StrategyChoice.SOCIAL
    assert StrategyChoice.parse("Social") is None
