"""Deduplication of OCR elements collected across overlapping scroll captures.

When scrolling through one logical screen, the same on-screen element OCR'd
at different scroll offsets can come back with slightly different text
(``"O Activité"`` vs ``"D Activité"``) or slightly different coordinates.
Three strategies collapse these duplicates:

* ``exact``: literal text equality
* ``levenshtein``: edit distance within a threshold
* ``proximity``: tap points within a Euclidean radius

Grouping is transitive for every strategy: if A~B and B~C, all three merge.
Each group keeps its highest-confidence member (first seen on ties) and the
result is returned in document order (ascending ``tap_y``).
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Callable, List, Optional, Sequence

from rapidfuzz.distance import Levenshtein

from ..vision.models import TapPoint
from .config import config
from .logger import log


class ScrollDedupStrategy(Enum):
    """Strategy used to decide when two scroll observations are the same element."""

    EXACT = "exact"
    LEVENSHTEIN = "levenshtein"
    PROXIMITY = "proximity"

    @classmethod
    def parse(cls, value: str) -> Optional["ScrollDedupStrategy"]:
        """Return the strategy for ``value`` or ``None`` if it is not a known name."""
        try:
            return cls(value)
        except ValueError:
            return None


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance with unit-cost insertions, deletions and substitutions.

    Case-sensitive, computed over code points.
    """
    return Levenshtein.distance(a, b)


def within_edit_distance(a: str, b: str, max_distance: int) -> bool:
    """True when ``a`` and ``b`` are at most ``max_distance`` edits apart."""
    # With a cutoff rapidfuzz stops early and reports cutoff + 1 when exceeded
    return Levenshtein.distance(a, b, score_cutoff=max_distance) <= max_distance


class _DisjointSet:
    """Union-find over element indices."""

    def __init__(self, size: int) -> None:
        self._parent = list(range(size))

    def find(self, i: int) -> int:
        root = i
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[i] != root:
            self._parent[i], i = root, self._parent[i]
        return root

    def union(self, i: int, j: int) -> None:
        ri, rj = self.find(i), self.find(j)
        if ri == rj:
            return
        # Lower index stays root so groups are ordered by first appearance
        if ri < rj:
            self._parent[rj] = ri
        else:
            self._parent[ri] = rj


class ScrollDeduplicator:
    """Pure transformation collapsing duplicate scroll observations."""

    @staticmethod
    def deduplicate(
        elements: Sequence[TapPoint],
        strategy: ScrollDedupStrategy,
        levenshtein_max: Optional[int] = None,
        proximity_pt: Optional[float] = None,
    ) -> List[TapPoint]:
        """Deduplicate ``elements`` with ``strategy``.

        Thresholds default to ``config.scroll_dedup_levenshtein_max`` and
        ``config.scroll_dedup_proximity_pt``.
        """
        if strategy is ScrollDedupStrategy.EXACT:
            result = ScrollDeduplicator.deduplicate_exact(elements)
        elif strategy is ScrollDedupStrategy.LEVENSHTEIN:
            max_distance = config.scroll_dedup_levenshtein_max if levenshtein_max is None else levenshtein_max
            result = ScrollDeduplicator.deduplicate_levenshtein(elements, max_distance)
        else:
            threshold = config.scroll_dedup_proximity_pt if proximity_pt is None else proximity_pt
            result = ScrollDeduplicator.deduplicate_proximity(elements, threshold)

        log.log_dedup(strategy.value, len(elements), len(result))
        return result

    @staticmethod
    def deduplicate_exact(elements: Sequence[TapPoint]) -> List[TapPoint]:
        """Group by literal text equality."""
        return _collapse(elements, lambda a, b: a.text == b.text)

    @staticmethod
    def deduplicate_levenshtein(elements: Sequence[TapPoint], max_distance: int) -> List[TapPoint]:
        """Group elements whose texts are within ``max_distance`` edits (inclusive)."""
        return _collapse(elements, lambda a, b: within_edit_distance(a.text, b.text, max_distance))

    @staticmethod
    def deduplicate_proximity(elements: Sequence[TapPoint], threshold_pt: float) -> List[TapPoint]:
        """Group elements whose tap points are within ``threshold_pt`` (inclusive)."""
        return _collapse(
            elements,
            lambda a, b: math.hypot(a.tap_x - b.tap_x, a.tap_y - b.tap_y) <= threshold_pt,
        )


def _collapse(
    elements: Sequence[TapPoint],
    same: Callable[[TapPoint, TapPoint], bool],
) -> List[TapPoint]:
    """Partition ``elements`` transitively by ``same`` and keep one representative per group."""
    if not elements:
        return []

    groups = _DisjointSet(len(elements))
    for i in range(len(elements)):
        for j in range(i + 1, len(elements)):
            if groups.find(i) != groups.find(j) and same(elements[i], elements[j]):
                groups.union(i, j)

    best: dict[int, TapPoint] = {}
    for index, element in enumerate(elements):
        root = groups.find(index)
        current = best.get(root)
        if current is None or element.confidence > current.confidence:
            best[root] = element

    # sorted() is stable, so equal Y keeps group discovery order
    return sorted(best.values(), key=lambda el: el.tap_y)
