"""
Gamepad Input Provider

Reads every button, trigger and stick of a USB/wireless game controller.
Default indices follow the SDL Xbox layout (pygame 2 on Linux/Windows).
"""

import logging
from typing import Dict, Optional

import pygame

from teleop.types import GamepadState


logger = logging.getLogger(__name__)


# SDL button indices, Xbox layout
DEFAULT_BUTTONS: Dict[str, int] = {
    "a": 0,
    "b": 1,
    "x": 2,
    "y": 3,
    "left_bumper": 4,
    "right_bumper": 5,
    "back": 6,
    "start": 7,
    "left_stick_button": 9,
    "right_stick_button": 10,
}

# SDL axis indices, Xbox layout
DEFAULT_AXES: Dict[str, int] = {
    "left_stick_x": 0,
    "left_stick_y": 1,
    "left_trigger": 2,
    "right_stick_x": 3,
    "right_stick_y": 4,
    "right_trigger": 5,
}

TRIGGERS = ("left_trigger", "right_trigger")


class GamepadInput:
    """
    Game controller input provider.

    - Buttons map to boolean signals
    - D-pad is read from the first hat
    - Triggers are rescaled from -1..1 (released = -1) to 0..1
    - Stick Y axes are inverted so pushing up is positive
    """

    def __init__(
        self,
        index: int = 0,
        deadzone: float = 0.05,
        buttons: Optional[Dict[str, int]] = None,
        axes: Optional[Dict[str, int]] = None,
    ) -> None:
        """
        Initialize gamepad input.

        Args:
            index: Joystick index to open
            deadzone: Stick values below this magnitude read as 0
            buttons: Signal name -> button index (Xbox layout if None)
            axes: Signal name -> axis index (Xbox layout if None)
        """
        self._index = index
        self._deadzone = deadzone
        self._buttons = dict(DEFAULT_BUTTONS if buttons is None else buttons)
        self._axes = dict(DEFAULT_AXES if axes is None else axes)

        self._joystick: Optional[pygame.joystick.Joystick] = None
        self._running = False

    async def start(self) -> None:
        """Initialize pygame and connect to controller"""
        if self._running:
            return

        logger.info("Initializing gamepad input...")

        pygame.init()
        pygame.joystick.init()

        joystick_count = pygame.joystick.get_count()
        logger.info(f"Found {joystick_count} game controller(s)")

        if joystick_count <= self._index:
            raise RuntimeError(f"No game controller at index {self._index}")

        self._joystick = pygame.joystick.Joystick(self._index)
        self._joystick.init()
        logger.info(f"Selected: {self._joystick.get_name()}")
        logger.info(f"Axes: {self._joystick.get_numaxes()}")
        logger.info(f"Buttons: {self._joystick.get_numbuttons()}")
        logger.info(f"Hats: {self._joystick.get_numhats()}")

        self._running = True

    async def stop(self) -> None:
        """Disconnect from controller"""
        logger.info("Stopping gamepad input")
        self._running = False

        if self._joystick:
            self._joystick.quit()
            self._joystick = None

        pygame.joystick.quit()
        pygame.quit()

    def read_gamepad(self) -> Optional[GamepadState]:
        """Sample current controller state"""
        if not self._running or not self._joystick:
            return None

        # Process pygame events (required to update joystick state)
        pygame.event.pump()

        values = {}
        for signal, button in self._buttons.items():
            values[signal] = self._read_button(button)

        for signal, axis in self._axes.items():
            if signal in TRIGGERS:
                raw = self._read_axis(axis, default=-1.0)
                values[signal] = self._clamp((raw + 1.0) / 2.0, 0.0, 1.0)
                continue

            raw = self._read_axis(axis)
            if signal.endswith("_y"):
                values[signal] = -self._apply_deadzone(raw)
            else:
                values[signal] = self._apply_deadzone(raw)

        hat_x, hat_y = self._joystick.get_hat(0) if self._joystick.get_numhats() > 0 else (0, 0)
        values["dpad_up"] = hat_y > 0
        values["dpad_down"] = hat_y < 0
        values["dpad_left"] = hat_x < 0
        values["dpad_right"] = hat_x > 0

        state = GamepadState(**values)
        logger.debug(
            f"Buttons: [{', '.join(state.pressed) or 'none'}] | "
            f"LS=({state.left_stick_x:+.2f},{state.left_stick_y:+.2f}) "
            f"RS=({state.right_stick_x:+.2f},{state.right_stick_y:+.2f}) "
            f"LT={state.left_trigger:.2f} RT={state.right_trigger:.2f}"
        )
        return state

    def _read_button(self, index: int) -> bool:
        if index >= self._joystick.get_numbuttons():
            return False
        return bool(self._joystick.get_button(index))

    def _read_axis(self, index: int, default: float = 0.0) -> float:
        if index >= self._joystick.get_numaxes():
            return default
        return float(self._joystick.get_axis(index))

    def _apply_deadzone(self, value: float) -> float:
        if abs(value) < self._deadzone:
            return 0.0
        return self._clamp(value, -1.0, 1.0)

    @staticmethod
    def _clamp(value: float, min_val: float, max_val: float) -> float:
        return max(min_val, min(max_val, value))
