"""
Core data types for the tele-op control loop.

All the data structures that flow through one tick: gamepad samples,
edge events, actuator/output descriptions and the status snapshot
handed to the display.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union
import time


POWER_RANGE: Tuple[float, float] = (-1.0, 1.0)
POSITION_RANGE: Tuple[float, float] = (0.0, 1.0)


class EdgeKind(Enum):
    """Transition detected on a boolean signal"""
    RISING = "rising"     # false -> true
    FALLING = "falling"   # true -> false


class Direction(Enum):
    """Persistent run direction for directional actuators"""
    FORWARD = "forward"
    REVERSE = "reverse"

    @property
    def sign(self) -> float:
        """Multiplier applied to the actuator magnitude"""
        return 1.0 if self is Direction.FORWARD else -1.0


class ChannelKind(Enum):
    """What the channel setpoint means to the hardware"""
    POWER = "power"         # motor / CR servo power, -1.0 to 1.0
    POSITION = "position"   # positional servo, 0.0 to 1.0

    @property
    def default_range(self) -> Tuple[float, float]:
        """Full hardware range for this kind of channel"""
        return POWER_RANGE if self is ChannelKind.POWER else POSITION_RANGE


class LoopState(Enum):
    """Control loop lifecycle"""
    INIT = "init"          # Constructed, outputs not yet driven
    RUNNING = "running"    # Ticking
    STOPPED = "stopped"    # Neutral commands written, loop exited


@dataclass
class GamepadState:
    """
    One sample of every gamepad signal.

    Produced once per tick by an InputProvider. Field names are the
    signal names used by the binding table. Buttons are booleans,
    triggers are 0.0 to 1.0 and stick axes are -1.0 to 1.0 (up/right
    positive).
    """
    a: bool = False
    b: bool = False
    x: bool = False
    y: bool = False
    dpad_up: bool = False
    dpad_down: bool = False
    dpad_left: bool = False
    dpad_right: bool = False
    left_bumper: bool = False
    right_bumper: bool = False
    left_stick_button: bool = False
    right_stick_button: bool = False
    back: bool = False
    start: bool = False
    left_trigger: float = 0.0
    right_trigger: float = 0.0
    left_stick_x: float = 0.0
    left_stick_y: float = 0.0
    right_stick_x: float = 0.0
    right_stick_y: float = 0.0
    timestamp: float = field(default_factory=time.time)

    @classmethod
    def signals(cls) -> List[str]:
        """Names of every input signal (all fields except timestamp)"""
        return [f.name for f in fields(cls) if f.name != "timestamp"]

    def value(self, signal: str) -> Union[bool, float]:
        """Current value of a named signal"""
        if signal not in self.signals():
            raise KeyError(f"Unknown gamepad signal: {signal}")
        return getattr(self, signal)

    @property
    def pressed(self) -> List[str]:
        """Names of all buttons currently held"""
        return [
            name for name in self.signals()
            if isinstance(getattr(self, name), bool) and getattr(self, name)
        ]


@dataclass(frozen=True)
class EdgeEvent:
    """A signal changed state since the previous tick"""
    signal: str
    kind: EdgeKind


@dataclass
class ActuatorSpec:
    """
    Declarative description of one logical actuator channel.

    A toggled actuator only drives its outputs while its running flag
    is set; a directional one additionally carries a FORWARD/REVERSE
    flag. Bounds default to the full range for the channel kind.
    """
    name: str
    kind: ChannelKind = ChannelKind.POWER
    initial: float = 0.0
    step: float = 0.0
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    toggled: bool = False
    directional: bool = False
    named_positions: Dict[str, float] = field(default_factory=dict)

    @property
    def bounds(self) -> Tuple[float, float]:
        """(min, max) with kind defaults filled in"""
        low, high = self.kind.default_range
        return (
            low if self.minimum is None else self.minimum,
            high if self.maximum is None else self.maximum,
        )


@dataclass
class OutputSpec:
    """
    A hardware output driven by an actuator.

    If preset is set the output runs at that fixed power whenever its
    actuator is running (e.g. a conveyor tied to the shooter toggle),
    otherwise it follows the actuator's own setpoint. Outputs with
    counts_per_rev report encoder velocity for statistics.
    """
    name: str
    actuator: str
    preset: Optional[float] = None
    counts_per_rev: Optional[int] = None
    free_run_rpm: Optional[float] = None

    @property
    def reports_velocity(self) -> bool:
        return self.counts_per_rev is not None and self.counts_per_rev > 0


@dataclass
class WheelPowers:
    """Mecanum wheel powers, each -1.0 to 1.0"""
    front_left: float = 0.0
    front_right: float = 0.0
    back_left: float = 0.0
    back_right: float = 0.0

    @property
    def is_stop(self) -> bool:
        return all(power == 0.0 for power in self.as_dict().values())

    def as_dict(self) -> Dict[str, float]:
        return {
            "front_left": self.front_left,
            "front_right": self.front_right,
            "back_left": self.back_left,
            "back_right": self.back_right,
        }

    @classmethod
    def stop(cls) -> "WheelPowers":
        """All wheels stopped"""
        return cls()


@dataclass
class ActuatorStatus:
    """Display view of one actuator"""
    name: str
    kind: ChannelKind
    setpoint: float
    running: bool
    direction: Optional[Direction]
    fine: bool
    present: bool
    toggled: bool = False


@dataclass
class OutputStatus:
    """Display view of one hardware output and its session statistics"""
    name: str
    actuator: str
    command: float
    running: bool
    direction: Optional[Direction]
    present: bool
    rpm: float = 0.0
    max_rpm: float = 0.0
    mean_rpm: float = 0.0
    samples: int = 0
    expected_rpm: Optional[float] = None
    has_encoder: bool = False


@dataclass
class StatusSnapshot:
    """
    Everything the display needs after one tick.

    Emitted by the ControlLoop at the end of every tick.
    """
    tick: int
    runtime: float
    state: LoopState
    actuators: Dict[str, ActuatorStatus] = field(default_factory=dict)
    outputs: Dict[str, OutputStatus] = field(default_factory=dict)
    wheels: Optional[WheelPowers] = None
    timestamp: float = field(default_factory=time.time)

    @property
    def running_actuators(self) -> List[str]:
        """Names of toggled actuators that are currently running"""
        return [name for name, status in self.actuators.items() if status.running]


@dataclass
class LoopConfig:
    """Configuration for the ControlLoop"""
    loop_interval: float = 0.02        # Delay between ticks (50Hz)
    trigger_threshold: float = 0.05    # Axis magnitude that counts as pressed
    fine_step_scale: float = 0.5       # Step multiplier in fine mode (5% -> 2.5%)


@dataclass
class DriveConfig:
    """Configuration for the MecanumMapper"""
    deadzone: float = 0.05             # Ignore stick inputs below this threshold
    curve: float = 1.0                 # Exponential curve (1.0 = linear)
    max_power: float = 1.0             # Wheel power limit
    front_left: str = "frontLeft"      # Hardware output names
    front_right: str = "frontRight"
    back_left: str = "backLeft"
    back_right: str = "backRight"

    @property
    def output_names(self) -> Dict[str, str]:
        """Wheel position -> hardware output name"""
        return {
            "front_left": self.front_left,
            "front_right": self.front_right,
            "back_left": self.back_left,
            "back_right": self.back_right,
        }
