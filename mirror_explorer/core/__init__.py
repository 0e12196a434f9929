"""Core engine: configuration, logging, dedup, fingerprints, strategies and flow checks."""

from .errors import ComponentDefinitionError, ConfigurationError, MirrorExplorerError
from .config import Config, config
from .logger import log
from .budget import DEFAULT_BUDGET, ExplorationBudget
from .fingerprint import StructuralFingerprint, is_date_pattern
from .scroll_dedup import ScrollDedupStrategy, ScrollDeduplicator, levenshtein_distance, within_edit_distance
from .screen_tracker import ScreenTracker, VisitResult
from .strategies import (
    BacktrackAction,
    DesktopAppStrategy,
    ExplorationStrategy,
    MobileAppStrategy,
    ScreenType,
    SocialAppStrategy,
)
from .strategy_detector import StrategyChoice, StrategyDetector, strategy_for
from .flow_detector import ExplorationAction, FlowDetector
from .alert_detector import AlertDetector, DetectedAlert

__all__ = [
    "AlertDetector",
    "BacktrackAction",
    "ComponentDefinitionError",
    "Config",
    "ConfigurationError",
    "DEFAULT_BUDGET",
    "DesktopAppStrategy",
    "DetectedAlert",
    "ExplorationAction",
    "ExplorationBudget",
    "ExplorationStrategy",
    "FlowDetector",
    "MirrorExplorerError",
    "MobileAppStrategy",
    "ScreenTracker",
    "ScreenType",
    "ScrollDedupStrategy",
    "ScrollDeduplicator",
    "SocialAppStrategy",
    "StrategyChoice",
    "StrategyDetector",
    "StructuralFingerprint",
    "VisitResult",
    "config",
    "is_date_pattern",
    "levenshtein_distance",
    "log",
    "strategy_for",
    "within_edit_distance",
]
