"""System alert detection (permission prompts, rating and tracking dialogs).

An unexpected alert blocks the screen underneath it. The detector recognizes
one from its OCR elements and picks the most conservative button to close it,
so "Don't Allow" always wins over "Allow".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Sequence, Tuple

from loguru import logger

from ..vision.models import TapPoint

PERMISSION_ALERT = "permission/tracking dialog"
SYSTEM_ALERT = "system alert"


@dataclass(frozen=True)
class DetectedAlert:
    """An alert on screen and the element to tap to close it."""

    dismiss_target: TapPoint
    alert_type: str


class AlertDetector:
    """Recognizes small modal dialogs from OCR elements. Stateless."""

    # Lower is more conservative
    dismiss_priority: Dict[str, int] = {
        "don't allow": 0,
        "ask app not to track": 1,
        "not now": 2,
        "cancel": 3,
        "dismiss": 4,
        "no thanks": 5,
        "later": 6,
        "close": 7,
        "ok": 8,
        "allow": 9,
    }

    title_patterns: Tuple[Pattern[str], ...] = tuple(
        re.compile(pattern)
        for pattern in (
            r"would like to",
            r"wants to access",
            r"would like to send",
            r"would like to use",
            r"allow tracking",
            r"rate",
            r"enjoying",
            r"allow.*to track",
        )
    )

    # Alerts are small overlays; a full screen has more elements than this
    max_alert_element_count = 10
    min_indicator_matches = 2

    # Give up after this many dismiss taps on the same alert
    max_dismiss_attempts = 3

    @classmethod
    def detect(cls, elements: Sequence[TapPoint]) -> Optional[DetectedAlert]:
        """Return the alert shown by ``elements``, or None.

        A screen counts as an alert when it has fewer than
        ``max_alert_element_count`` elements and either two known buttons, or
        one known button plus a title such as "... Would Like to Send You
        Notifications".
        """
        if not 2 <= len(elements) < cls.max_alert_element_count:
            return None

        buttons: List[Tuple[int, TapPoint]] = []
        for element in elements:
            # OCR reads the typographic apostrophe of "Don't Allow" as U+2019
            label = element.text.strip().lower().replace("\u2019", "'")
            priority = cls.dismiss_priority.get(label)
            if priority is not None:
                buttons.append((priority, element))

        has_title = any(cls._matches_title(element.text) for element in elements)
        if len(buttons) < cls.min_indicator_matches and not (has_title and buttons):
            return None

        # min() keeps the first of equal priorities
        _, target = min(buttons, key=lambda match: match[0])
        alert_type = PERMISSION_ALERT if has_title else SYSTEM_ALERT
        logger.debug(f"Detected {alert_type}, dismissing with {target.text!r}")
        return DetectedAlert(dismiss_target=target, alert_type=alert_type)

    @classmethod
    def _matches_title(cls, text: str) -> bool:
        lowered = text.lower()
        return any(pattern.search(lowered) for pattern in cls.title_patterns)

    @classmethod
    def can_retry_dismiss(cls, attempts: int) -> bool:
        """True while fewer than ``max_dismiss_attempts`` dismiss taps were made."""
        return attempts < cls.max_dismiss_attempts
