"""
Robot assembly - builds the actuators, outputs and binding table.

The host constructs everything here once and hands it to the ControlLoop,
so no subsystem is a global.

Default robot:
- intake:  one motor, toggled, FORWARD/REVERSE, fixed power
- shooter: two flywheel motors at a variable power plus a conveyor belt
           motor at a fixed power, all toggled together
- aim:     optional positional servo

The "competition" layout adds a continuous-rotation ball loader servo and
gives the aim servo four named positions instead of a limited extension.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
from .bindings import Binding, competition_bindings, default_bindings
from .channel import Actuator
from .types import ActuatorSpec, ChannelKind, OutputSpec


LAYOUTS = ("bench", "competition")


@dataclass
class RobotSettings:
    """Tunable numbers for the default robot"""
    layout: str = "bench"              # "bench" or "competition"
    counts_per_rev: int = 537          # Encoder counts per output revolution
    free_run_rpm: float = 5800.0       # Output shaft speed at 12V, 100%
    intake_power: float = 0.9          # Fixed intake power
    shooter_power: float = 0.5         # Initial flywheel power
    shooter_step: float = 0.05         # Power change per D-pad press (normal mode)
    shooter_presets: tuple = (0.75, 1.0)
    conveyor_power: float = 0.75       # Conveyor power while shooter runs
    aim_step: float = 0.02             # Servo travel per tick at full trigger
    aim_retracted: float = 0.0
    aim_extended: float = 0.17         # Servo travel limit (bench)
    aim_nudge: float = 0.05            # Servo travel per A/Y press (competition)
    aim_positions: tuple = (0.0, 0.33, 0.67, 1.0)
    aim_max_angle: float = 180.0       # Degrees at position 1.0
    loader_power: float = 1.0          # Ball loader CR servo speed

    intake_motor: str = "intakeMotor"
    shooter_motors: tuple = ("sm1", "sm2")
    conveyor_motor: str = "cbMotor"
    aim_servo: str = "sm_servo"
    loader_servo: str = "ld_servo"

    @property
    def competition(self) -> bool:
        return self.layout == "competition"


@dataclass
class Robot:
    """Everything the ControlLoop drives"""
    actuators: Dict[str, Actuator]
    outputs: List[OutputSpec]
    bindings: List[Binding]
    settings: RobotSettings = field(default_factory=RobotSettings)

    def actuator(self, name: str) -> Actuator:
        return self.actuators[name]

    def output(self, name: str) -> Optional[OutputSpec]:
        for spec in self.outputs:
            if spec.name == name:
                return spec
        return None


def _aim_spec(settings: RobotSettings) -> ActuatorSpec:
    if settings.competition:
        lowest, low, high, highest = settings.aim_positions
        return ActuatorSpec(
            name="aim",
            kind=ChannelKind.POSITION,
            initial=lowest,
            step=settings.aim_nudge,
            named_positions={"Min": lowest, "Pos 1": low, "Pos 2": high, "Max": highest},
        )

    return ActuatorSpec(
        name="aim",
        kind=ChannelKind.POSITION,
        initial=settings.aim_retracted,
        step=settings.aim_step,
        named_positions={
            "Retracted": settings.aim_retracted,
            "Extended": settings.aim_extended,
        },
    )


def default_actuator_specs(settings: RobotSettings) -> List[ActuatorSpec]:
    specs = [
        ActuatorSpec(
            name="intake",
            kind=ChannelKind.POWER,
            initial=settings.intake_power,
            toggled=True,
            directional=True,
        ),
        ActuatorSpec(
            name="shooter",
            kind=ChannelKind.POWER,
            initial=settings.shooter_power,
            step=settings.shooter_step,
            minimum=0.0,
            maximum=1.0,
            toggled=True,
        ),
        _aim_spec(settings),
    ]
    if settings.competition:
        specs.append(ActuatorSpec(
            name="loader",
            kind=ChannelKind.POWER,
            initial=settings.loader_power,
            toggled=True,
            directional=True,
        ))
    return specs


def default_output_specs(settings: RobotSettings) -> List[OutputSpec]:
    motor = dict(counts_per_rev=settings.counts_per_rev, free_run_rpm=settings.free_run_rpm)
    outputs = [OutputSpec(settings.intake_motor, "intake", **motor)]
    outputs += [OutputSpec(name, "shooter", **motor) for name in settings.shooter_motors]
    outputs.append(
        OutputSpec(settings.conveyor_motor, "shooter", preset=settings.conveyor_power, **motor)
    )
    outputs.append(OutputSpec(settings.aim_servo, "aim"))
    if settings.competition:
        # CR servo, no encoder
        outputs.append(OutputSpec(settings.loader_servo, "loader"))
    return outputs


def build_robot(settings: Optional[RobotSettings] = None) -> Robot:
    """
    Construct the default robot.

    Args:
        settings: Tunables (defaults if None)

    Returns:
        Robot with fresh actuators, output specs and bindings

    Raises:
        ValueError: If settings.layout is not a known layout
    """
    settings = settings or RobotSettings()
    if settings.layout not in LAYOUTS:
        raise ValueError(f"Unknown layout '{settings.layout}' (expected one of {', '.join(LAYOUTS)})")

    actuators = {spec.name: Actuator(spec) for spec in default_actuator_specs(settings)}
    if settings.competition:
        bindings = competition_bindings(aim_positions=settings.aim_positions)
    else:
        bindings = default_bindings(
            shooter_presets=settings.shooter_presets,
            aim_retracted=settings.aim_retracted,
            aim_extended=settings.aim_extended,
        )
    return Robot(
        actuators=actuators,
        outputs=default_output_specs(settings),
        bindings=bindings,
        settings=settings,
    )
