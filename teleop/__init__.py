"""
teleop - Manual-drive control loop for a competition robot.

This package contains the core logic of the driver-controlled period:
- Types: Gamepad samples, edge events, actuator/output specs, snapshots
- Edge: Press/release detection on sampled button levels
- Channel: Clamped setpoints with run/direction flags
- Stats: Session max/mean of measured motor speed
- Bindings: Signal -> action table interpreted each tick
- Drive: Mecanum wheel mixing
- ControlLoop: The per-tick orchestration and safe shutdown
"""

from .types import (
    GamepadState,
    EdgeEvent,
    EdgeKind,
    Direction,
    ChannelKind,
    LoopState,
    LoopConfig,
    DriveConfig,
    StatusSnapshot,
)
from .interfaces import (
    InputProvider,
    HardwareInterface,
)

__all__ = [
    "GamepadState",
    "EdgeEvent",
    "EdgeKind",
    "Direction",
    "ChannelKind",
    "LoopState",
    "LoopConfig",
    "DriveConfig",
    "StatusSnapshot",
    "InputProvider",
    "HardwareInterface",
]
