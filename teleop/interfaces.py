"""
Core interfaces (protocols) for pluggable components.

These define the contracts the ControlLoop relies on. Python Protocols
describe which methods a class must have without forcing inheritance,
so the pygame gamepad, the scripted mock input and any hardware layer
plug in the same way.
"""

from typing import Optional, Protocol
from .types import GamepadState


class InputProvider(Protocol):
    """
    Interface for input sources (gamepad, scripted, keyboard, etc.).
    """

    async def start(self) -> None:
        """
        Initialize and start the input provider.

        Called once before the first tick. May open devices.
        """
        ...

    async def stop(self) -> None:
        """
        Stop and cleanup the input provider.

        Called once after the loop has written its neutral commands.
        """
        ...

    def read_gamepad(self) -> Optional[GamepadState]:
        """
        Sample every input signal.

        Called once per tick; must not block. Returns None if no input
        is available this tick.
        """
        ...


class HardwareInterface(Protocol):
    """
    Interface for motor/servo/encoder access.

    Writes are fire-and-forget. Reads and writes may raise on a transient
    fault; the ControlLoop logs the fault and keeps running.
    """

    async def start(self) -> None:
        """Open hardware access. Called once before the first tick."""
        ...

    async def stop(self) -> None:
        """Release hardware access. Called once after the neutral writes."""
        ...

    def is_present(self, name: str) -> bool:
        """
        Check whether an output exists in the hardware configuration.

        Queried once per output when the loop is constructed.
        """
        ...

    def write(self, name: str, value: float) -> None:
        """
        Command an output.

        Args:
            name: Output name from the hardware configuration
            value: Power (-1.0 to 1.0) or position (0.0 to 1.0)
        """
        ...

    def read_velocity(self, name: str) -> float:
        """
        Read encoder velocity of a motor output.

        Returns:
            Velocity in encoder ticks per second
        """
        ...
