"""
MecanumMapper - Transforms stick input into mecanum wheel powers.

Robot-centric driver control:
- Left stick Y: forward/backward
- Left stick X: strafe left/right
- Right stick X: turn

The mapper applies deadzones to prevent drift, an optional response
curve for finer low-speed control, mecanum kinematics, normalization so
no wheel exceeds full power, and the configured power limit.
"""

import math
from .types import DriveConfig, GamepadState, WheelPowers


class MecanumMapper:
    """Converts GamepadState into WheelPowers"""

    def __init__(self, config: DriveConfig) -> None:
        """
        Initialize mapper with configuration.

        Args:
            config: Drive configuration (deadzone, curve, limit, output names)
        """
        self.config = config
        self._last_powers = WheelPowers.stop()

    def map(self, state: GamepadState) -> WheelPowers:
        """
        Convert stick input into wheel powers.

        Args:
            state: Gamepad sample

        Returns:
            Wheel powers, each within [-max_power, max_power]
        """
        forward = self._shape(state.left_stick_y)
        strafe = self._shape(state.left_stick_x)
        turn = self._shape(state.right_stick_x)

        front_left = forward + strafe + turn
        front_right = forward - strafe - turn
        back_left = forward - strafe + turn
        back_right = forward + strafe - turn

        # Normalize if any wheel exceeds 1.0, keeping the ratios
        max_magnitude = max(abs(front_left), abs(front_right), abs(back_left), abs(back_right))
        if max_magnitude > 1.0:
            front_left /= max_magnitude
            front_right /= max_magnitude
            back_left /= max_magnitude
            back_right /= max_magnitude

        limit = self.config.max_power
        self._last_powers = WheelPowers(
            front_left=self._clamp(front_left * limit, -limit, limit),
            front_right=self._clamp(front_right * limit, -limit, limit),
            back_left=self._clamp(back_left * limit, -limit, limit),
            back_right=self._clamp(back_right * limit, -limit, limit),
        )
        return self._last_powers

    def reset(self) -> None:
        """Forget the last output (e.g. when input is lost)"""
        self._last_powers = WheelPowers.stop()

    @property
    def last_powers(self) -> WheelPowers:
        return self._last_powers

    def _shape(self, value: float) -> float:
        return self._apply_curve(self._apply_deadzone(self._clamp(value, -1.0, 1.0)))

    def _apply_deadzone(self, value: float) -> float:
        """
        Apply deadzone to eliminate drift and small movements.

        Input below deadzone threshold returns 0.
        Input above deadzone is rescaled to maintain full range.
        """
        if abs(value) < self.config.deadzone:
            return 0.0

        # Rescale so deadzone maps to 0, and 1.0 stays 1.0
        sign = 1.0 if value > 0 else -1.0
        magnitude = abs(value)
        scaled = (magnitude - self.config.deadzone) / (1.0 - self.config.deadzone)
        return sign * scaled

    def _apply_curve(self, value: float) -> float:
        """
        Apply exponential curve for smoother control.

        Curve > 1.0 makes the response more gradual at low inputs.
        """
        if value == 0.0:
            return 0.0

        sign = 1.0 if value > 0 else -1.0
        return sign * math.pow(abs(value), self.config.curve)

    def _clamp(self, value: float, min_val: float, max_val: float) -> float:
        """Clamp value to range [min_val, max_val]"""
        return max(min_val, min(max_val, value))
