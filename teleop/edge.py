"""
Edge detection - turns sampled button levels into press/release events.

A held button must produce exactly one event for the whole press, so the
detector remembers the previous sample of every signal and compares it
with the current one each tick.
"""

from typing import Dict, Iterable, List, Optional, Union
from .types import EdgeEvent, EdgeKind


def detect(signal: str, current: bool, previous: bool) -> Optional[EdgeEvent]:
    """
    Compare two consecutive samples of a boolean signal.

    Args:
        signal: Signal name carried into the event
        current: Sample from this tick
        previous: Sample from the previous tick

    Returns:
        RISING or FALLING event, or None if the level did not change
    """
    if current and not previous:
        return EdgeEvent(signal, EdgeKind.RISING)
    if previous and not current:
        return EdgeEvent(signal, EdgeKind.FALLING)
    return None


class EdgeDetector:
    """
    Stateful edge detector over any number of named signals.

    Continuous axes (triggers, sticks) are treated as pressed when their
    magnitude exceeds the threshold. Every signal starts released.
    """

    def __init__(self, threshold: float = 0.05) -> None:
        """
        Args:
            threshold: Axis magnitude above which a scalar counts as pressed
        """
        self.threshold = threshold
        self._previous: Dict[str, bool] = {}

    def update(self, signal: str, value: Union[bool, float]) -> Optional[EdgeEvent]:
        """
        Feed this tick's sample of one signal.

        Must be called once per signal per tick. The stored previous value
        is replaced whether or not an edge fired.
        """
        current = self._as_level(value)
        event = detect(signal, current, self._previous.get(signal, False))
        self._previous[signal] = current
        return event

    def update_all(self, samples: Dict[str, Union[bool, float]]) -> List[EdgeEvent]:
        """Feed one sample per signal, returning the events in input order"""
        events = []
        for signal, value in samples.items():
            event = self.update(signal, value)
            if event is not None:
                events.append(event)
        return events

    def previous(self, signal: str) -> bool:
        """Last stored level for a signal (False if never seen)"""
        return self._previous.get(signal, False)

    def reset(self, signals: Optional[Iterable[str]] = None) -> None:
        """Forget stored levels (all signals if none given)"""
        if signals is None:
            self._previous.clear()
            return
        for signal in signals:
            self._previous.pop(signal, None)

    def _as_level(self, value: Union[bool, float]) -> bool:
        if isinstance(value, bool):
            return value
        return abs(value) > self.threshold
