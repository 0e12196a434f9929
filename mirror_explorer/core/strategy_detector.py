"""Detect which exploration strategy fits a target/app combination."""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional

from .budget import ExplorationBudget
from .logger import log
from .strategies import DesktopAppStrategy, ExplorationStrategy, MobileAppStrategy, SocialAppStrategy

GENERIC_WINDOW_TARGET = "generic-window"


class StrategyChoice(Enum):
    """The exploration strategy selected for an app."""

    MOBILE = "mobile"
    SOCIAL = "social"
    DESKTOP = "desktop"

    @classmethod
    def parse(cls, value: str) -> Optional["StrategyChoice"]:
        try:
            return cls(value)
        except ValueError:
            return None


class StrategyDetector:
    """Resolve a strategy: explicit override, target type, bundle ID, app name, then mobile."""

    # Bundle IDs are matched case-sensitively; by convention they are lowercase.
    social_bundle_prefixes = (
        "com.reddit.",
        "com.facebook.",
        "com.burbn.instagram",
        "com.instagram.",
        "com.atebits.Tweetie2",
        "com.zhiliaoapp.musically",
        "com.toyopagroup.picaboo",
    )

    social_app_names = frozenset(
        ["reddit", "instagram", "facebook", "twitter", "x", "tiktok", "snapchat", "threads", "mastodon"]
    )

    # Names this short never match as one word of a longer name
    min_keyword_length = 2

    @classmethod
    def detect(
        cls,
        target_type: str,
        bundle_id: Optional[str],
        app_name: Optional[str],
        explicit_strategy: Optional[str] = None,
    ) -> StrategyChoice:
        """Detect the exploration strategy from the available signals.

        Each signal is optional; an absent or unrecognized one falls through
        to the next step instead of failing.
        """
        if explicit_strategy:
            choice = StrategyChoice.parse(explicit_strategy)
            if choice is not None:
                log.log_strategy_decision(choice.value, "explicit override")
                return choice
            log.warning(f"Ignoring unknown explicit strategy {explicit_strategy!r}")

        if target_type == GENERIC_WINDOW_TARGET:
            log.log_strategy_decision(StrategyChoice.DESKTOP.value, f"target type {target_type}")
            return StrategyChoice.DESKTOP

        if bundle_id and bundle_id.startswith(cls.social_bundle_prefixes):
            log.log_strategy_decision(StrategyChoice.SOCIAL.value, f"bundle id {bundle_id}")
            return StrategyChoice.SOCIAL

        if app_name and cls._is_social_app_name(app_name):
            log.log_strategy_decision(StrategyChoice.SOCIAL.value, f"app name {app_name}")
            return StrategyChoice.SOCIAL

        log.log_strategy_decision(StrategyChoice.MOBILE.value, "default")
        return StrategyChoice.MOBILE

    @classmethod
    def _is_social_app_name(cls, app_name: str) -> bool:
        lowered = app_name.strip().lower()
        if lowered in cls.social_app_names:
            return True
        # Keyword match so "Reddit Pro" or "Facebook Lite" still count.
        # Short names like "x" only count as the whole name.
        words = re.split(r"[^\w]+", lowered)
        return any(
            word in cls.social_app_names for word in words if len(word) > cls.min_keyword_length
        )


def strategy_for(choice: StrategyChoice, budget: Optional[ExplorationBudget] = None) -> ExplorationStrategy:
    """Instantiate the strategy for ``choice``.

    ``budget`` defaults to the configured one, extra skip patterns included.
    """
    if choice is StrategyChoice.SOCIAL:
        return SocialAppStrategy(budget=budget)
    if choice is StrategyChoice.DESKTOP:
        return DesktopAppStrategy(budget)
    return MobileAppStrategy(budget)
