"""Flow boundary and stuck-state detection from an exploration's capture history.

All checks are pure: they compare structural fingerprints of captures and
inspect the action log, and never touch the device.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..vision.models import TapPoint
from .fingerprint import StructuralFingerprint
from .logger import log
from .screen_tracker import VisitResult


@dataclass(frozen=True)
class ExplorationAction:
    """One step of the action log."""

    action_type: Optional[str]
    arrived_via: Optional[str]
    # The capture after this action matched a screen already recorded
    was_duplicate: bool

    @classmethod
    def from_visit(
        cls, result: VisitResult, action_type: Optional[str] = None, arrived_via: Optional[str] = None
    ) -> "ExplorationAction":
        return cls(action_type=action_type, arrived_via=arrived_via, was_duplicate=not result.is_new)


class FlowDetector:
    """Detects returns to the start screen, revisits and stuck loops."""

    # Captures needed before "back at start" can fire; the first capture is the start itself
    min_screens_for_flow_boundary = 2

    # Consecutive duplicate captures that mean taps no longer change the screen
    stuck_threshold = 3

    @classmethod
    def is_back_at_start(
        cls,
        current: Iterable[TapPoint],
        start: Iterable[TapPoint],
        screen_count: int,
        threshold: Optional[float] = None,
    ) -> bool:
        """True when ``current`` is the start screen again after at least one other capture."""
        if screen_count < cls.min_screens_for_flow_boundary:
            return False
        return StructuralFingerprint.are_equivalent(current, start, threshold)

    @staticmethod
    def consecutive_duplicates(action_log: Sequence[ExplorationAction]) -> int:
        """Length of the run of duplicate captures at the end of ``action_log``."""
        count = 0
        for action in reversed(action_log):
            if not action.was_duplicate:
                break
            count += 1
        return count

    @staticmethod
    def visit_count(
        current: Sequence[TapPoint],
        captured_screens: Iterable[Sequence[TapPoint]],
        threshold: Optional[float] = None,
    ) -> int:
        """How many captured screens are equivalent to ``current``."""
        return sum(
            1 for screen in captured_screens if StructuralFingerprint.are_equivalent(screen, current, threshold)
        )

    @classmethod
    def is_stuck(cls, action_log: Sequence[ExplorationAction]) -> bool:
        duplicates = cls.consecutive_duplicates(action_log)
        if duplicates < cls.stuck_threshold:
            return False
        log.warning(f"Exploration looks stuck: {duplicates} consecutive duplicate captures")
        return True
