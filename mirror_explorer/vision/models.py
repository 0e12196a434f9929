"""Data models for recognized screen observations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TapPoint:
    """A recognized text item with its tap position in window points."""

    text: str
    tap_x: float
    tap_y: float
    confidence: float = 1.0


@dataclass(frozen=True, slots=True)
class RawTextElement:
    """Pre-classification OCR result with vertical extent, in window points."""

    text: str
    tap_x: float
    text_top_y: float
    text_bottom_y: float
    bbox_width: float
    confidence: float

    @property
    def tap_y(self) -> float:
        """Vertical midpoint of the text box."""
        return (self.text_top_y + self.text_bottom_y) / 2

    def to_tap_point(self) -> TapPoint:
        """Collapse the element to a tap point at its vertical midpoint."""
        return TapPoint(text=self.text, tap_x=self.tap_x, tap_y=self.tap_y, confidence=self.confidence)


@dataclass(frozen=True, slots=True)
class DetectedIcon:
    """A recognized glyph or icon with no text."""

    tap_x: float
    tap_y: float
    estimated_size: float


@dataclass(frozen=True, slots=True)
class ContentBounds:
    """Pixel-space rectangle occupied by mirrored content inside a capture."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class WindowSize:
    """Size of the target window in points."""

    width: float
    height: float
