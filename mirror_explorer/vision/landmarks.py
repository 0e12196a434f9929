"""Text and position filters shared by fingerprinting, classification and ranking."""

from __future__ import annotations

import re
import string
from typing import Iterable, List

from .models import TapPoint

# Elements above this Y (window points) sit in the device status bar.
STATUS_BAR_MAX_Y = 80.0

# Title bar band; modal dismiss buttons are looked for above its lower edge.
HEADER_ZONE_MAX_Y = 250.0

LANDMARK_MIN_LENGTH = 3
LANDMARK_MAX_LENGTH = 40
LANDMARK_MIN_CONFIDENCE = 0.5

# "9:41", "15:02" and the OCR artifact "15:011"
_TIME_PATTERN = re.compile(r"^\d{1,2}:\d{2}\d?$")
_BARE_NUMBER = re.compile(r"^\d+$")
_PUNCTUATION = set(string.punctuation) | {"•", "·", "…", "›", "‹", "❯", "❮", "—", "–"}


def is_time_pattern(text: str) -> bool:
    """Return True for clock-like text such as ``9:41``."""
    return bool(_TIME_PATTERN.match(text.strip()))


def is_bare_number(text: str) -> bool:
    """Return True for text made only of digits (badges, counters, battery %)."""
    return bool(_BARE_NUMBER.match(text.strip()))


def is_punctuation_only(text: str) -> bool:
    """Return True when every non-space character is punctuation."""
    stripped = [c for c in text if not c.isspace()]
    return bool(stripped) and all(c in _PUNCTUATION for c in stripped)


def filter_navigable_elements(elements: Iterable[TapPoint]) -> List[TapPoint]:
    """Keep elements likely to be navigation targets, sorted top to bottom.

    Excludes the status bar, very short or very long text, low-confidence
    observations, clock text and bare numbers.
    """
    navigable = [
        el
        for el in elements
        if LANDMARK_MIN_LENGTH <= len(el.text) <= LANDMARK_MAX_LENGTH
        and el.confidence >= LANDMARK_MIN_CONFIDENCE
        and el.tap_y >= STATUS_BAR_MAX_Y
        and not is_time_pattern(el.text)
        and not is_bare_number(el.text)
    ]
    return sorted(navigable, key=lambda el: el.tap_y)
