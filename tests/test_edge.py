"""Tests for edge detection"""

import pytest
from teleop.edge import EdgeDetector, detect
from teleop.types import EdgeKind


@pytest.mark.parametrize("current,previous,expected", [
    (True, False, EdgeKind.RISING),
    (False, True, EdgeKind.FALLING),
    (True, True, None),
    (False, False, None),
])
def test_detect(current, previous, expected):
    """Test pure edge comparison"""
    event = detect("a", current, previous)
    if expected is None:
        assert event is None
    else:
        assert event.kind is expected
        assert event.signal == "a"


def test_held_button_fires_once():
    """Test a held button produces one rising edge for the whole press"""
    detector = EdgeDetector()
    samples = [False, True, True, True, True, False]
    events = [detector.update("a", s) for s in samples]

    kinds = [e.kind for e in events if e is not None]
    assert kinds == [EdgeKind.RISING, EdgeKind.FALLING]


def test_event_count_matches_transitions():
    """Test one event per transition and none for repeats"""
    detector = EdgeDetector()
    samples = [True, False, False, True, True, False, True, True, True, False]
    events = [detector.update("b", s) for s in samples]

    rising = sum(1 for e in events if e and e.kind is EdgeKind.RISING)
    falling = sum(1 for e in events if e and e.kind is EdgeKind.FALLING)
    assert rising == 3
    assert falling == 3


def test_previous_updated_without_edge():
    """Test stored level is replaced even when no event fires"""
    detector = EdgeDetector()
    detector.update("x", True)
    assert detector.previous("x") is True
    assert detector.update("x", True) is None
    assert detector.previous("x") is True


def test_initial_state_released():
    """Test a button already held on the first sample counts as a press"""
    detector = EdgeDetector()
    assert detector.previous("a") is False
    event = detector.update("a", True)
    assert event.kind is EdgeKind.RISING


def test_signals_are_independent():
    """Test per-signal previous values"""
    detector = EdgeDetector()
    detector.update("a", True)
    event = detector.update("b", True)
    assert event is not None
    assert event.signal == "b"


def test_axis_threshold():
    """Test continuous axes are thresholded"""
    detector = EdgeDetector(threshold=0.05)
    assert detector.update("right_trigger", 0.03) is None
    event = detector.update("right_trigger", 0.6)
    assert event.kind is EdgeKind.RISING
    assert detector.update("right_trigger", 0.9) is None
    event = detector.update("right_trigger", 0.0)
    assert event.kind is EdgeKind.FALLING


def test_negative_axis_counts_as_pressed():
    """Test magnitude, not sign, decides the level"""
    detector = EdgeDetector(threshold=0.1)
    event = detector.update("left_stick_x", -0.8)
    assert event.kind is EdgeKind.RISING


def test_update_all():
    """Test batch update returns events in order"""
    detector = EdgeDetector()
    events = detector.update_all({"a": True, "b": False, "x": True})
    assert [e.signal for e in events] == ["a", "x"]

    events = detector.update_all({"a": False, "b": False, "x": True})
    assert [(e.signal, e.kind) for e in events] == [("a", EdgeKind.FALLING)]


def test_reset():
    """Test forgetting stored levels"""
    detector = EdgeDetector()
    detector.update("a", True)
    detector.update("b", True)

    detector.reset(["a"])
    assert detector.previous("a") is False
    assert detector.previous("b") is True

    detector.reset()
    assert detector.previous("b") is False
