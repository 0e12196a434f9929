from __future__ import annotations

from loguru import logger

from mirror_explorer.core.flow_detector import ExplorationAction, FlowDetector
from mirror_explorer.core.screen_tracker import ScreenTracker
from mirror_explorer.vision.models import TapPoint


def _home(clock: str = "9:41") -> list[TapPoint]:
    return [
        TapPoint(clock, 40, 20),
        TapPoint("Settings", 200, 120),
        TapPoint("General", 80, 300),
        TapPoint("Privacy", 80, 360),
        TapPoint("Battery", 80, 420),
    ]


def _general() -> list[TapPoint]:
    return [TapPoint("General", 200, 120), TapPoint("About", 80, 300), TapPoint("Software Update", 80, 360)]


def _action(duplicate: bool) -> ExplorationAction:
    return ExplorationAction(action_type="tap", arrived_via="General", was_duplicate=duplicate)


# ----------------------------------------------------------------------
# Back at start
# ----------------------------------------------------------------------
def test_back_at_start_needs_two_captures() -> None:
    assert not FlowDetector.is_back_at_start(_home(), _home(), screen_count=1)
    assert FlowDetector.is_back_at_start(_home("10:02"), _home(), screen_count=2)


def test_back_at_start_false_on_other_screen() -> None:
    assert not FlowDetector.is_back_at_start(_general(), _home(), screen_count=5)


def test_back_at_start_respects_threshold() -> None:
    partial = _home()[:3]  # Settings, General
    assert not FlowDetector.is_back_at_start(partial, _home(), screen_count=3, threshold=0.9)
    assert FlowDetector.is_back_at_start(partial, _home(), screen_count=3, threshold=0.5)


# ----------------------------------------------------------------------
# Stuck detection
# ----------------------------------------------------------------------
def test_consecutive_duplicates_counts_the_tail_only() -> None:
    log = [_action(True), _action(False), _action(True), _action(True)]
    assert FlowDetector.consecutive_duplicates(log) == 2
    assert FlowDetector.consecutive_duplicates([]) == 0
    assert FlowDetector.consecutive_duplicates([_action(True), _action(False)]) == 0


def test_is_stuck_at_threshold() -> None:
    assert not FlowDetector.is_stuck([_action(False), _action(True), _action(True)])
    assert FlowDetector.is_stuck([_action(False), _action(True), _action(True), _action(True)])


def test_is_stuck_logs_warning() -> None:
    messages: list[str] = []
    sink_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
    try:
        FlowDetector.is_stuck([_action(True)] * 4)
    finally:
        logger.remove(sink_id)
    assert any("4 consecutive duplicate captures" in m for m in messages)


def test_actions_from_tracker_visits() -> None:
    tracker = ScreenTracker()
    log = [ExplorationAction.from_visit(tracker.record(_home()), "launch")]
    for _ in range(3):
        log.append(ExplorationAction.from_visit(tracker.record(_home("10:02")), "tap", "Battery"))

    assert not log[0].was_duplicate
    assert log[-1].arrived_via == "Battery"
    assert FlowDetector.consecutive_duplicates(log) == 3
    assert FlowDetector.is_stuck(log)


# ----------------------------------------------------------------------
# Visit count
# ----------------------------------------------------------------------
def test_visit_count() -> None:
    captured = [_home(), _general(), _home("10:02"), _general()]
    assert FlowDetector.visit_count(_home(), captured) == 2
    assert FlowDetector.visit_count(_general(), captured) == 2
    assert FlowDetector.visit_count([TapPoint("Wallpaper", 80, 300)], captured) == 0
    assert FlowDetector.visit_count(_home(), []) == 0
