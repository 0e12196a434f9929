"""Structural fingerprints for screen identity.

A screen's fingerprint is built only from the text that stays stable across
repeated captures of that screen: headers, labels, menu items. Status-bar
glyphs, clocks, counters, dates and long body text are filtered out so that
OCR noise and ticking clocks never make one screen look like two.
"""

from __future__ import annotations

import hashlib
import json
import re
from typing import AbstractSet, FrozenSet, Iterable, Optional, Sequence

from ..vision.landmarks import STATUS_BAR_MAX_Y, is_bare_number, is_time_pattern
from ..vision.models import DetectedIcon, TapPoint
from .config import config

# Longer strings are treated as dynamic content (paragraphs, descriptions)
MAX_STRUCTURAL_LENGTH = 50

_DAY_NAMES = frozenset(
    ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
)
_SHORT_DAYS = frozenset(["mon", "tue", "tues", "wed", "thu", "thur", "thurs", "fri", "sat", "sun"])
_MONTHS = frozenset(
    [
        "january", "february", "march", "april", "may", "june",
        "july", "august", "september", "october", "november", "december",
    ]
)
_SHORT_MONTHS = frozenset(
    ["jan", "feb", "mar", "apr", "jun", "jul", "aug", "sep", "sept", "oct", "nov", "dec"]
)
_MONTH_DAY = re.compile(r"^([a-z]+)\.?\s+(\d{1,2})$")


def is_date_pattern(text: str) -> bool:
    """Check if text is a day name, a month name, or a ``Month Day`` form.

    Case-insensitive. ``"Feb 23"`` and ``"January 1"`` match, ``"February Blues"``
    does not.
    """
    lowered = text.strip().lower()
    if lowered in _DAY_NAMES or lowered in _SHORT_DAYS:
        return True
    if lowered in _MONTHS or lowered in _SHORT_MONTHS:
        return True

    match = _MONTH_DAY.match(lowered)
    if match and (match.group(1) in _MONTHS or match.group(1) in _SHORT_MONTHS):
        return True

    return False


def _is_structural(element: TapPoint) -> bool:
    if element.tap_y < STATUS_BAR_MAX_Y:
        return False
    if is_time_pattern(element.text):
        return False
    if is_bare_number(element.text):
        return False
    if len(element.text) > MAX_STRUCTURAL_LENGTH:
        return False
    if is_date_pattern(element.text):
        return False
    return True


class StructuralFingerprint:
    """Computes and compares structural fingerprints. Stateless."""

    @staticmethod
    def extract_structural(elements: Iterable[TapPoint]) -> FrozenSet[str]:
        """Return the set of texts considered stable across captures of a screen."""
        return frozenset(el.text for el in elements if _is_structural(el))

    @staticmethod
    def compute(elements: Iterable[TapPoint], icons: Sequence[DetectedIcon] = ()) -> str:
        """Return a 64-character SHA-256 hex digest of the screen's structure.

        The structural texts are sorted before hashing so discovery order never
        changes the result. Icon positions jitter between captures but their
        count is stable, so only the count takes part.
        """
        structural = sorted(StructuralFingerprint.extract_structural(elements))
        payload = json.dumps({"texts": structural, "icons": len(icons)}, sort_keys=True, ensure_ascii=False)
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    @staticmethod
    def similarity(lhs: AbstractSet[str], rhs: AbstractSet[str]) -> float:
        """Jaccard index of two structural sets. Two empty sets are identical."""
        union = lhs | rhs
        if not union:
            return 1.0
        return len(lhs & rhs) / len(union)

    @staticmethod
    def are_equivalent(
        lhs: Iterable[TapPoint],
        rhs: Iterable[TapPoint],
        threshold: Optional[float] = None,
    ) -> bool:
        """Check if two captures show the same screen.

        Coordinates and confidences are ignored; only the structural text sets
        are compared against ``threshold`` (default
        ``config.fingerprint_similarity_threshold``).
        """
        if threshold is None:
            threshold = config.fingerprint_similarity_threshold
        left = StructuralFingerprint.extract_structural(lhs)
        right = StructuralFingerprint.extract_structural(rhs)
        return StructuralFingerprint.similarity(left, right) >= threshold

    # Exposed on the class for callers that only import StructuralFingerprint
    is_date_pattern = staticmethod(is_date_pattern)
