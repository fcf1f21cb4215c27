"""
Mock (test) input provider.

Replays scripted gamepad samples for testing without a controller.
"""

import logging
from typing import List, Optional
from teleop.types import GamepadState


logger = logging.getLogger(__name__)


class MockInput:
    """
    Scripted input provider.

    Returns one GamepadState per read, in order. After the script runs
    out it keeps returning the last state (or all-released if empty).
    """

    def __init__(self, states: Optional[List[GamepadState]] = None) -> None:
        """
        Initialize mock input.

        Args:
            states: Samples to return in sequence. If None, returns released state.
        """
        self._states = list(states or [])
        self._index = 0
        self._running = False

    async def start(self) -> None:
        """Start the input provider"""
        logger.info(f"[MOCK INPUT] Started - Script mode ({len(self._states)} states)")
        self._running = True
        self._index = 0

    async def stop(self) -> None:
        """Stop the input provider"""
        logger.info("[MOCK INPUT] Stopped")
        self._running = False

    def read_gamepad(self) -> Optional[GamepadState]:
        """Return next scripted state"""
        if not self._running:
            return None

        if not self._states:
            return GamepadState()

        if self._index >= len(self._states):
            return self._states[-1]

        state = self._states[self._index]
        self._index += 1
        return state

    def push(self, state: GamepadState) -> None:
        """Append a sample to the script"""
        self._states.append(state)

    def reset(self) -> None:
        """Reset to beginning of script"""
        self._index = 0

    @property
    def remaining(self) -> int:
        return max(0, len(self._states) - self._index)

    @property
    def is_running(self) -> bool:
        return self._running

    def load_script(self, script_name: str) -> None:
        """
        Load a predefined test script.

        Args:
            script_name: Name of script to load from TestScripts
        """
        script_map = {
            "intake": TestScripts.intake_cycle,
            "shooter": TestScripts.shooter_spinup,
            "aim": TestScripts.aim_sweep,
            "session": TestScripts.full_session,
            "competition": TestScripts.competition_match,
        }

        if script_name in script_map:
            self._states = script_map[script_name]()
            self._index = 0
            logger.info(f"Loaded script '{script_name}' with {len(self._states)} states")
        else:
            logger.warning(f"Unknown script '{script_name}'")


def hold(state: GamepadState, ticks: int) -> List[GamepadState]:
    """Repeat a sample for several ticks"""
    return [state] * ticks


class TestScripts:
    """Pre-defined test scripts"""

    __test__ = False  # not a pytest class

    @staticmethod
    def intake_cycle() -> List[GamepadState]:
        """Toggle intake on, reverse, forward again, toggle off"""
        idle = GamepadState()
        return (
            hold(idle, 2)
            # A press held for several ticks: one toggle
            + hold(GamepadState(a=True), 3)
            + hold(idle, 5)
            + hold(GamepadState(dpad_left=True), 2)
            + hold(idle, 5)
            + hold(GamepadState(dpad_right=True), 2)
            + hold(idle, 5)
            + hold(GamepadState(a=True), 2)
            + hold(idle, 2)
        )

    @staticmethod
    def shooter_spinup() -> List[GamepadState]:
        """Start shooter, step power up twice, fine step down, preset 75%, stop"""
        idle = GamepadState()
        return (
            hold(GamepadState(b=True), 2)
            + hold(idle, 3)
            + [GamepadState(dpad_up=True), idle, GamepadState(dpad_up=True), idle]
            + [GamepadState(right_bumper=True), GamepadState(right_bumper=True, dpad_down=True), idle]
            + hold(idle, 5)
            + hold(GamepadState(x=True), 2)
            + hold(idle, 5)
            + hold(GamepadState(b=True), 2)
            + hold(idle, 2)
        )

    @staticmethod
    def aim_sweep() -> List[GamepadState]:
        """Extend aim servo with the right trigger, retract with left, snap to limits"""
        idle = GamepadState()
        return (
            hold(GamepadState(right_trigger=1.0), 5)
            + hold(GamepadState(right_trigger=0.5), 5)
            + hold(GamepadState(left_trigger=1.0), 3)
            + hold(GamepadState(right_stick_button=True), 2)
            + hold(idle, 2)
            + hold(GamepadState(left_stick_button=True), 2)
            + hold(idle, 2)
        )

    @staticmethod
    def full_session() -> List[GamepadState]:
        """Drive forward while running intake and shooter, then stop everything"""
        drive = GamepadState(left_stick_y=0.6)
        return (
            TestScripts.intake_cycle()[:10]
            + hold(GamepadState(b=True, left_stick_y=0.6), 2)
            + hold(drive, 20)
            + hold(GamepadState(right_stick_x=0.5), 10)
            + hold(GamepadState(back=True), 2)
            + hold(GamepadState(), 5)
        )

    @staticmethod
    def competition_match() -> List[GamepadState]:
        """Match layout: spin up, aim, eject, load, then stop everything"""
        idle = GamepadState()
        return (
            hold(GamepadState(x=True), 2)
            + hold(idle, 3)
            + [GamepadState(right_bumper=True), idle, GamepadState(right_bumper=True), idle]
            + [GamepadState(dpad_up=True), idle, GamepadState(a=True), idle]
            + hold(GamepadState(b=True), 2)
            + hold(idle, 5)
            + hold(GamepadState(dpad_left=True), 2)
            + hold(GamepadState(left_stick_y=0.6), 20)
            + hold(GamepadState(dpad_right=True), 2)
            + hold(GamepadState(back=True), 2)
            + hold(idle, 5)
        )
