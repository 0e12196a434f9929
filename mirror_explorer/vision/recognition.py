"""Text recognition boundary: backend protocol, result merging and coordinate scaling.

Recognition backends (OCR engines, element detectors) live outside this
package. They hand back ``RawTextElement`` lists in window-point space; this
module merges the lists of several backends and provides the content-bounds
scaling every backend applies before returning its results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Protocol, Sequence, runtime_checkable

from ..core.logger import log
from .models import ContentBounds, RawTextElement, WindowSize


@runtime_checkable
class TextRecognizer(Protocol):
    """A backend that turns a captured frame into raw text observations."""

    def recognize_text(
        self,
        image: Any,
        window_size: WindowSize,
        content_bounds: ContentBounds,
    ) -> List[RawTextElement]:
        ...


class CompositeTextRecognizer:
    """Run several recognition backends and concatenate their outputs.

    Results keep backend order and each backend's internal order. No
    deduplication or reordering happens here; that belongs to the scroll
    deduplicator and the fingerprint engine.
    """

    def __init__(self, backends: Sequence[TextRecognizer]) -> None:
        self._backends = tuple(backends)

    @property
    def backends(self) -> tuple[TextRecognizer, ...]:
        return self._backends

    def recognize_text(
        self,
        image: Any,
        window_size: WindowSize,
        content_bounds: ContentBounds,
    ) -> List[RawTextElement]:
        merged: List[RawTextElement] = []
        for backend in self._backends:
            merged.extend(backend.recognize_text(image, window_size, content_bounds))
        log.debug(f"Merged {len(merged)} observations from {len(self._backends)} backend(s)")
        return merged


@dataclass(frozen=True, slots=True)
class NormalizedObservation:
    """One backend observation with a normalized, bottom-left-origin bounding box."""

    text: str
    confidence: float
    min_x: float
    min_y: float
    width: float
    height: float

    @property
    def mid_x(self) -> float:
        return self.min_x + self.width / 2

    @property
    def max_y(self) -> float:
        return self.min_y + self.height


def scale_to_window(
    observations: Sequence[NormalizedObservation],
    image_width: float,
    window_size: WindowSize,
    content_bounds: ContentBounds,
) -> List[RawTextElement]:
    """Convert normalized observations into window-point ``RawTextElement``s.

    ``content_bounds`` is the pixel rectangle the mirrored content occupies in
    the capture. When it is smaller than the capture (e.g. a bordered display
    mode), positions are stretched so the content covers the whole window:
    shrinking the bounds while pixel positions stay fixed yields proportionally
    larger window coordinates and widths.

    Args:
        observations: Backend results, normalized to [0, 1] with origin bottom-left.
        image_width: Width of the captured image in pixels.
        window_size: Size of the target window in points.
        content_bounds: Pixel-space rectangle of the visible content.

    Returns:
        Elements with top-left-origin coordinates in window points.
    """
    window_width = window_size.width
    window_height = window_size.height

    display_scale = image_width / window_width if window_width > 0 else 1.0
    content_origin_x = content_bounds.x / display_scale
    content_origin_y = content_bounds.y / display_scale
    content_width = content_bounds.width / display_scale
    content_height = content_bounds.height / display_scale
    x_scale = window_width / max(content_width, 1.0)
    y_scale = window_height / max(content_height, 1.0)

    elements: List[RawTextElement] = []
    for obs in observations:
        if not obs.text:
            continue
        elements.append(
            RawTextElement(
                text=obs.text,
                tap_x=(obs.mid_x * window_width - content_origin_x) * x_scale,
                text_top_y=((1.0 - obs.max_y) * window_height - content_origin_y) * y_scale,
                text_bottom_y=((1.0 - obs.min_y) * window_height - content_origin_y) * y_scale,
                bbox_width=obs.width * window_width * x_scale,
                confidence=obs.confidence,
            )
        )
    return elements
