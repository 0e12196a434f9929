"""Visited-screen tracking for one exploration session.

This module records every screen the driver lands on and answers "have I
already modeled this screen?" using structural fingerprints, falling back to
structural similarity so small OCR differences still count as a revisit.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Sequence

from loguru import logger

from ..vision.models import DetectedIcon, TapPoint
from .config import config
from .fingerprint import StructuralFingerprint
from .logger import log


@dataclass(frozen=True)
class VisitResult:
    """Outcome of recording a screen capture."""

    is_new: bool
    fingerprint: str
    # Fingerprint of the known screen this capture was matched to
    matched_fingerprint: Optional[str] = None


@dataclass
class _ScreenRecord:
    fingerprint: str
    structural: FrozenSet[str]
    first_seen: float
    visit_count: int = 1


class ScreenTracker:
    """Tracks visited screens within a single exploration session.

    Not shared across sessions; each session creates its own tracker.
    """

    def __init__(self, similarity_threshold: Optional[float] = None) -> None:
        """Initialize the tracker."""
        self.similarity_threshold = (
            config.fingerprint_similarity_threshold if similarity_threshold is None else similarity_threshold
        )
        self._screens: Dict[str, _ScreenRecord] = {}
        self.current_fingerprint: str = ""
        self.last_change_time: float = 0.0

    def _match(self, fingerprint: str, structural: FrozenSet[str]) -> Optional[_ScreenRecord]:
        record = self._screens.get(fingerprint)
        if record is not None:
            return record

        best: Optional[_ScreenRecord] = None
        best_score = -1.0
        for candidate in self._screens.values():
            score = StructuralFingerprint.similarity(structural, candidate.structural)
            if score >= self.similarity_threshold and score > best_score:
                best, best_score = candidate, score
        if best is not None:
            logger.debug(f"Screen similar to {best.fingerprint[:8]} (similarity: {best_score:.2f})")
        return best

    def is_visited(self, elements: Sequence[TapPoint], icons: Sequence[DetectedIcon] = ()) -> bool:
        """Check whether a capture matches a screen recorded earlier."""
        fingerprint = StructuralFingerprint.compute(elements, icons)
        structural = StructuralFingerprint.extract_structural(elements)
        return self._match(fingerprint, structural) is not None

    def record(self, elements: Sequence[TapPoint], icons: Sequence[DetectedIcon] = ()) -> VisitResult:
        """Record a capture, returning whether it is a new screen."""
        fingerprint = StructuralFingerprint.compute(elements, icons)
        structural = StructuralFingerprint.extract_structural(elements)

        match = self._match(fingerprint, structural)
        if match is not None:
            match.visit_count += 1
            self.current_fingerprint = match.fingerprint
            log.log_screen_visit(match.fingerprint, False, len(structural))
            return VisitResult(is_new=False, fingerprint=fingerprint, matched_fingerprint=match.fingerprint)

        now = time.time()
        self._screens[fingerprint] = _ScreenRecord(
            fingerprint=fingerprint, structural=structural, first_seen=now
        )
        self.current_fingerprint = fingerprint
        self.last_change_time = now
        log.log_screen_visit(fingerprint, True, len(structural))
        return VisitResult(is_new=True, fingerprint=fingerprint)

    def visit_count(self, fingerprint: str) -> int:
        """Number of times the screen with ``fingerprint`` was recorded."""
        record = self._screens.get(fingerprint)
        return record.visit_count if record else 0

    @property
    def screen_count(self) -> int:
        return len(self._screens)

    def fingerprints(self) -> List[str]:
        """Fingerprints of known screens in discovery order."""
        return list(self._screens)

    def stats(self) -> Dict[str, Any]:
        """Get statistics about the screens seen so far."""
        total_visits = sum(r.visit_count for r in self._screens.values())
        most_visited = max(self._screens.values(), key=lambda r: r.visit_count, default=None)
        return {
            "total_screens": len(self._screens),
            "total_visits": total_visits,
            "average_visits_per_screen": round(total_visits / len(self._screens), 2) if self._screens else 0,
            "most_visited_screen": most_visited.fingerprint[:8] if most_visited else None,
            "max_visits_to_screen": most_visited.visit_count if most_visited else 0,
            "current_screen": self.current_fingerprint[:8] if self.current_fingerprint else None,
            "similarity_threshold": self.similarity_threshold,
        }

    def reset(self) -> None:
        """Forget every recorded screen."""
        self._screens.clear()
        self.current_fingerprint = ""
        self.last_change_time = 0.0
        logger.info("Screen tracking reset")
