"""
Binding table - which gamepad signal does what to which actuator.

Every binding pairs a signal and a trigger with one action from a closed
set. The ControlLoop interprets the table uniformly each tick, so every
mapped action can be tested on its own.

Triggers:
- RISING / FALLING: fire once on the matching edge
- HELD: fire every tick the button is down
- AXIS: fire every tick the axis magnitude is above the threshold,
  scaling relative adjustments by that magnitude

Layouts: default_bindings() for the test bench, competition_bindings()
for matches.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Union
from .channel import Actuator
from .types import Direction, GamepadState


logger = logging.getLogger(__name__)


class Trigger(Enum):
    RISING = "rising"
    FALLING = "falling"
    HELD = "held"
    AXIS = "axis"

    @property
    def is_edge(self) -> bool:
        return self in (Trigger.RISING, Trigger.FALLING)


@dataclass(frozen=True)
class SetAbsolute:
    """Jump the setpoint to a value"""
    value: float


@dataclass(frozen=True)
class AdjustRelative:
    """
    Nudge the setpoint by a number of channel steps.

    ceiling/floor limit travel in this direction more tightly than the
    channel bounds (e.g. a servo that may not extend past 0.17).
    """
    steps: float = 1.0
    ceiling: Optional[float] = None
    floor: Optional[float] = None


@dataclass(frozen=True)
class ToggleRunning:
    """Flip the actuator on/off"""


@dataclass(frozen=True)
class SetRunning:
    """Start or stop the actuator explicitly"""
    running: bool


@dataclass(frozen=True)
class SetDirection:
    """Select a persistent run direction"""
    direction: Direction


@dataclass(frozen=True)
class SetFineMode:
    """Select fine (smaller) or normal step size"""
    enabled: bool


@dataclass(frozen=True)
class StopAll:
    """Stop every toggled actuator"""


Action = Union[
    SetAbsolute, AdjustRelative, ToggleRunning, SetRunning, SetDirection, SetFineMode, StopAll
]


@dataclass(frozen=True)
class Binding:
    """One row of the binding table"""
    signal: str
    trigger: Trigger
    actuator: str
    action: Action

    def __post_init__(self) -> None:
        if self.signal not in GamepadState.signals():
            raise ValueError(f"Unknown gamepad signal '{self.signal}'")


def validate_bindings(bindings: Sequence[Binding], actuators: Mapping[str, Actuator]) -> None:
    """
    Check the table against the actuators it drives.

    Raises:
        ValueError: Unknown actuator, or an action the actuator cannot take
    """
    for binding in bindings:
        actuator = actuators.get(binding.actuator)
        if actuator is None:
            raise ValueError(
                f"Binding {binding.signal} -> unknown actuator '{binding.actuator}'"
            )
        if isinstance(binding.action, (ToggleRunning, SetRunning)) and not actuator.toggled:
            raise ValueError(f"Actuator '{actuator.name}' has no running flag")
        if isinstance(binding.action, SetDirection) and not actuator.directional:
            raise ValueError(f"Actuator '{actuator.name}' has no direction")


def apply_action(
    action: Action,
    actuator: Actuator,
    actuators: Mapping[str, Actuator],
    magnitude: float = 1.0,
    fine_step_scale: float = 0.5,
) -> None:
    """
    Apply one action to its actuator.

    Args:
        action: Action to interpret
        actuator: Target actuator
        actuators: All actuators (StopAll reaches every one of them)
        magnitude: Axis magnitude for AXIS bindings, 1.0 otherwise
        fine_step_scale: Step multiplier while the actuator is in fine mode
    """
    if isinstance(action, SetAbsolute):
        actuator.channel.set_absolute(action.value)

    elif isinstance(action, AdjustRelative):
        scale = fine_step_scale if actuator.fine else 1.0
        delta = action.steps * actuator.channel.step * scale * magnitude
        target = actuator.channel.value + delta
        if action.ceiling is not None:
            target = min(action.ceiling, target)
        if action.floor is not None:
            target = max(action.floor, target)
        actuator.channel.set_absolute(target)

    elif isinstance(action, ToggleRunning):
        actuator.toggle()

    elif isinstance(action, SetRunning):
        actuator.set_running(action.running)

    elif isinstance(action, SetDirection):
        actuator.set_direction(action.direction)

    elif isinstance(action, SetFineMode):
        actuator.fine = action.enabled

    elif isinstance(action, StopAll):
        for other in actuators.values():
            if other.toggled:
                other.set_running(False)

    else:
        raise TypeError(f"Unknown action: {action!r}")


def default_bindings(
    intake: str = "intake",
    shooter: str = "shooter",
    aim: str = "aim",
    shooter_presets: Sequence[float] = (0.75, 1.0),
    aim_retracted: float = 0.0,
    aim_extended: float = 0.17,
) -> List[Binding]:
    """
    Test-bench single-gamepad layout.

    Intake:  A toggle, D-pad left/right reverse/forward
    Shooter: B toggle, D-pad up/down +/- one step, bumpers normal/fine,
             X/Y presets, BACK stops everything
    Aim:     right/left trigger extend/retract, stick buttons retracted/extended

    Rows are applied in order, so presets listed after the step buttons
    win when both are pressed on the same tick.
    """
    low_preset, high_preset = shooter_presets
    return [
        Binding("a", Trigger.RISING, intake, ToggleRunning()),
        Binding("dpad_left", Trigger.RISING, intake, SetDirection(Direction.REVERSE)),
        Binding("dpad_right", Trigger.RISING, intake, SetDirection(Direction.FORWARD)),

        Binding("b", Trigger.RISING, shooter, ToggleRunning()),
        Binding("left_bumper", Trigger.HELD, shooter, SetFineMode(False)),
        Binding("right_bumper", Trigger.HELD, shooter, SetFineMode(True)),
        Binding("dpad_up", Trigger.RISING, shooter, AdjustRelative(+1.0)),
        Binding("dpad_down", Trigger.RISING, shooter, AdjustRelative(-1.0)),
        Binding("y", Trigger.HELD, shooter, SetAbsolute(high_preset)),
        Binding("x", Trigger.HELD, shooter, SetAbsolute(low_preset)),
        Binding("back", Trigger.RISING, shooter, StopAll()),

        Binding("right_trigger", Trigger.AXIS, aim, AdjustRelative(+1.0, ceiling=aim_extended)),
        Binding("left_trigger", Trigger.AXIS, aim, AdjustRelative(-1.0, floor=aim_retracted)),
        Binding("left_stick_button", Trigger.HELD, aim, SetAbsolute(aim_retracted)),
        Binding("right_stick_button", Trigger.HELD, aim, SetAbsolute(aim_extended)),
    ]


def competition_bindings(
    intake: str = "intake",
    shooter: str = "shooter",
    aim: str = "aim",
    loader: str = "loader",
    aim_positions: Sequence[float] = (0.0, 0.33, 0.67, 1.0),
) -> List[Binding]:
    """
    Match layout for the operator gamepad.

    Shooter: X start/stop, bumpers -/+ one power step
    Aim:     A up, Y down one step; stick buttons and D-pad up/down
             jump to the four named positions
    Intake:  B runs it in reverse (eject)
    Loader:  D-pad left runs the ball loader backward, D-pad right stops it
    BACK stops everything.
    """
    lowest, low, high, highest = aim_positions
    return [
        Binding("x", Trigger.RISING, shooter, ToggleRunning()),
        Binding("left_bumper", Trigger.RISING, shooter, AdjustRelative(-1.0)),
        Binding("right_bumper", Trigger.RISING, shooter, AdjustRelative(+1.0)),

        Binding("a", Trigger.RISING, aim, AdjustRelative(+1.0)),
        Binding("y", Trigger.RISING, aim, AdjustRelative(-1.0)),
        Binding("left_stick_button", Trigger.RISING, aim, SetAbsolute(lowest)),
        Binding("dpad_down", Trigger.RISING, aim, SetAbsolute(low)),
        Binding("dpad_up", Trigger.RISING, aim, SetAbsolute(high)),
        Binding("right_stick_button", Trigger.RISING, aim, SetAbsolute(highest)),

        Binding("b", Trigger.RISING, intake, SetDirection(Direction.REVERSE)),
        Binding("b", Trigger.RISING, intake, SetRunning(True)),

        Binding("dpad_left", Trigger.RISING, loader, SetDirection(Direction.REVERSE)),
        Binding("dpad_left", Trigger.RISING, loader, SetRunning(True)),
        Binding("dpad_right", Trigger.RISING, loader, SetRunning(False)),

        Binding("back", Trigger.RISING, shooter, StopAll()),
    ]


def describe(bindings: Sequence[Binding]) -> Dict[str, List[str]]:
    """Human readable controls help, grouped by actuator"""
    help_lines: Dict[str, List[str]] = {}
    for binding in bindings:
        help_lines.setdefault(binding.actuator, []).append(
            f"{binding.signal} ({binding.trigger.value}): {_describe_action(binding.action)}"
        )
    return help_lines


def _describe_action(action: Action) -> str:
    if isinstance(action, SetAbsolute):
        return f"set {action.value:.2f}"
    if isinstance(action, AdjustRelative):
        return f"{'+' if action.steps >= 0 else '-'}{abs(action.steps):g} step"
    if isinstance(action, ToggleRunning):
        return "toggle on/off"
    if isinstance(action, SetRunning):
        return "start" if action.running else "stop"
    if isinstance(action, SetDirection):
        return f"direction {action.direction.value}"
    if isinstance(action, SetFineMode):
        return "fine control" if action.enabled else "normal control"
    return "stop all"
