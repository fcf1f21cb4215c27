"""
Actuator channels - bounded setpoints plus run/direction flags.

Operator input can never push a setpoint out of range: every write is
saturated to the channel bounds instead of being rejected.
"""

import logging
from typing import Optional, Tuple
from .types import (
    ActuatorSpec,
    ActuatorStatus,
    ChannelKind,
    Direction,
    POWER_RANGE,
)


logger = logging.getLogger(__name__)

POSITION_TOLERANCE = 0.01


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp value to range [min_val, max_val]"""
    return max(min_val, min(max_val, value))


class ClampedChannel:
    """
    A setpoint that always stays inside [minimum, maximum].

    Used for motor power (-1.0 to 1.0) and servo position (0.0 to 1.0).
    """

    def __init__(
        self,
        name: str,
        kind: ChannelKind = ChannelKind.POWER,
        minimum: Optional[float] = None,
        maximum: Optional[float] = None,
        initial: float = 0.0,
        step: float = 0.0,
    ) -> None:
        """
        Initialize channel.

        Args:
            name: Channel name (for logs and display)
            kind: POWER or POSITION
            minimum: Lower bound (defaults to the kind's full range)
            maximum: Upper bound (defaults to the kind's full range)
            initial: Starting setpoint, clamped into bounds
            step: Size of one relative nudge

        Raises:
            ValueError: If minimum > maximum
        """
        low, high = kind.default_range
        self.name = name
        self.kind = kind
        self._min = low if minimum is None else minimum
        self._max = high if maximum is None else maximum
        if self._min > self._max:
            raise ValueError(
                f"Channel '{name}' bounds out of order: min={self._min} > max={self._max}"
            )
        self.step = step
        self._value = clamp(initial, self._min, self._max)

    @property
    def value(self) -> float:
        return self._value

    @property
    def minimum(self) -> float:
        return self._min

    @property
    def maximum(self) -> float:
        return self._max

    @property
    def bounds(self) -> Tuple[float, float]:
        return self._min, self._max

    def get(self) -> float:
        """Current setpoint"""
        return self._value

    def set_absolute(self, value: float) -> float:
        """Set the setpoint, saturating to bounds. Returns the stored value."""
        self._value = clamp(value, self._min, self._max)
        return self._value

    def adjust_relative(self, delta: float) -> float:
        """Move the setpoint by delta, saturating to bounds. Returns the stored value."""
        return self.set_absolute(self._value + delta)

    def __repr__(self) -> str:
        return (
            f"ClampedChannel({self.name!r}, {self.kind.value}, "
            f"value={self._value:.3f}, bounds=({self._min}, {self._max}))"
        )


class Actuator:
    """
    A logical actuator: one clamped channel plus its mode flags.

    - Toggled actuators are driven only while ``running`` is set;
      otherwise the command is 0.
    - Directional actuators apply FORWARD/REVERSE to their magnitude.
    - Untoggled actuators (positional servos) command the setpoint directly.
    """

    def __init__(self, spec: ActuatorSpec) -> None:
        low, high = spec.bounds
        self.spec = spec
        self.name = spec.name
        self.channel = ClampedChannel(
            spec.name,
            kind=spec.kind,
            minimum=low,
            maximum=high,
            initial=spec.initial,
            step=spec.step,
        )
        self.running = False
        self.fine = False
        self.direction: Optional[Direction] = Direction.FORWARD if spec.directional else None

    @property
    def kind(self) -> ChannelKind:
        return self.spec.kind

    @property
    def toggled(self) -> bool:
        return self.spec.toggled

    @property
    def directional(self) -> bool:
        return self.spec.directional

    def toggle(self) -> bool:
        """Flip the running flag. Returns the new value."""
        self.running = not self.running
        logger.info(f"{self.name}: {'RUNNING' if self.running else 'STOPPED'}")
        return self.running

    def set_running(self, running: bool) -> None:
        if running != self.running:
            self.toggle()

    def set_direction(self, direction: Direction) -> None:
        if direction != self.direction:
            logger.info(f"{self.name}: direction {direction.value}")
        self.direction = direction

    def command(self, preset: Optional[float] = None) -> float:
        """
        Effective command for an output driven by this actuator.

        Args:
            preset: Fixed power used instead of the setpoint while running

        Returns:
            Value to write to the hardware output
        """
        if not self.toggled:
            return self.channel.value

        if not self.running:
            return 0.0

        magnitude = self.channel.value if preset is None else preset
        if self.direction is not None:
            magnitude = self.direction.sign * abs(magnitude)
        return clamp(magnitude, *POWER_RANGE)

    @property
    def neutral(self) -> float:
        """Command written on shutdown (motors off, servos retracted)"""
        if self.kind is ChannelKind.POSITION:
            return self.channel.minimum
        return 0.0

    def position_name(self) -> str:
        """Name of the configured position the setpoint sits on, or 'Custom'"""
        for name, position in self.spec.named_positions.items():
            if abs(self.channel.value - position) < POSITION_TOLERANCE:
                return name
        return "Custom"

    def status(self, present: bool = True) -> ActuatorStatus:
        return ActuatorStatus(
            name=self.name,
            kind=self.kind,
            setpoint=self.channel.value,
            running=self.running,
            direction=self.direction,
            fine=self.fine,
            present=present,
            toggled=self.toggled,
        )
