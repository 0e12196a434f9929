"""Exploration and deduplication engine for mirrored-app UI crawling.

Raw OCR output from a mirrored app window is deduplicated, fingerprinted and
classified so an exploration driver can decide what to tap next and when a
screen has already been seen.
"""

from .core import (
    ExplorationBudget,
    ScreenTracker,
    ScrollDedupStrategy,
    ScrollDeduplicator,
    StrategyChoice,
    StrategyDetector,
    StructuralFingerprint,
    config,
    log,
)
from .vision import (
    COMPONENT_CATALOG,
    ComponentDetectionMode,
    CompositeTextRecognizer,
    ElementClassifier,
    TapPoint,
)
from .automation import KeyMap

__version__ = "0.1.0"

__all__ = [
    "COMPONENT_CATALOG",
    "ComponentDetectionMode",
    "CompositeTextRecognizer",
    "ElementClassifier",
    "ExplorationBudget",
    "KeyMap",
    "ScreenTracker",
    "ScrollDedupStrategy",
    "ScrollDeduplicator",
    "StrategyChoice",
    "StrategyDetector",
    "StructuralFingerprint",
    "TapPoint",
    "config",
    "log",
]
