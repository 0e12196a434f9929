from __future__ import annotations

import pytest

from mirror_explorer.core.alert_detector import PERMISSION_ALERT, SYSTEM_ALERT, AlertDetector
from mirror_explorer.vision.models import TapPoint


def _notification_prompt() -> list[TapPoint]:
    return [
        TapPoint("“Weather” Would Like to Send You Notifications", 200, 330),
        TapPoint("Notifications may include alerts, sounds and icon badges.", 200, 380),
        TapPoint("Don’t Allow", 110, 450),
        TapPoint("Allow", 290, 450),
    ]


def test_permission_prompt_picks_most_conservative_button() -> None:
    alert = AlertDetector.detect(_notification_prompt())
    assert alert is not None
    assert alert.dismiss_target.text == "Don’t Allow"
    assert alert.alert_type == PERMISSION_ALERT


def test_tracking_prompt_matches_wildcard_title() -> None:
    elements = [
        TapPoint("Allow “News” to track your activity?", 200, 330),
        TapPoint("Ask App Not to Track", 200, 440),
        TapPoint("Allow", 200, 500),
    ]
    alert = AlertDetector.detect(elements)
    assert alert is not None
    assert alert.dismiss_target.text == "Ask App Not to Track"
    assert alert.alert_type == PERMISSION_ALERT


def test_two_buttons_without_title_is_system_alert() -> None:
    elements = [TapPoint("Cellular Data is Turned Off", 200, 330), TapPoint("OK", 110, 450), TapPoint("Settings", 290, 450)]
    assert AlertDetector.detect(elements) is None

    elements.append(TapPoint("Cancel", 200, 500))
    alert = AlertDetector.detect(elements)
    assert alert is not None
    assert alert.dismiss_target.text == "Cancel"
    assert alert.alert_type == SYSTEM_ALERT


def test_title_with_one_button_is_enough() -> None:
    elements = [TapPoint("Enjoying Photos?", 200, 330), TapPoint("Not Now", 200, 450)]
    alert = AlertDetector.detect(elements)
    assert alert is not None
    assert alert.dismiss_target.text == "Not Now"


def test_title_without_button_is_not_an_alert() -> None:
    assert AlertDetector.detect([TapPoint("Enjoying Photos?", 200, 330), TapPoint("Tap a star", 200, 380)]) is None


@pytest.mark.parametrize("count", [0, 1, 10, 14])
def test_element_count_bounds(count: int) -> None:
    elements = [TapPoint("Cancel", 100, 400), TapPoint("OK", 300, 400)]
    elements += [TapPoint(f"Row {i}", 100, 500 + i * 40) for i in range(max(0, count - 2))]
    assert AlertDetector.detect(elements[:count]) is None


def test_nine_elements_still_detected() -> None:
    elements = [TapPoint("Cancel", 100, 400), TapPoint("OK", 300, 400)]
    elements += [TapPoint(f"Row {i}", 100, 500 + i * 40) for i in range(7)]
    assert AlertDetector.detect(elements) is not None


def test_button_match_is_whole_label() -> None:
    elements = [TapPoint("Cancel Subscription", 200, 400), TapPoint("OK Google", 200, 460)]
    assert AlertDetector.detect(elements) is None


def test_dismiss_attempts_are_capped() -> None:
    assert AlertDetector.can_retry_dismiss(0)
    assert AlertDetector.can_retry_dismiss(2)
    assert not AlertDetector.can_retry_dismiss(3)
