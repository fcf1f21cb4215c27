"""
Status display - renders snapshots as text lines.

The real driver-station screen is out of scope; LogDisplay writes the
same lines to the log every few ticks.
"""

import logging
from typing import List, Optional
from .types import ChannelKind, StatusSnapshot


logger = logging.getLogger(__name__)


def format_snapshot(
    snapshot: StatusSnapshot,
    position_names: Optional[dict] = None,
    max_angle: float = 180.0,
) -> List[str]:
    """
    Render one snapshot.

    Args:
        snapshot: Snapshot from the ControlLoop
        position_names: Actuator name -> current named position (e.g. "Extended")
        max_angle: Servo angle in degrees at position 1.0

    Returns:
        Display lines, one per entry
    """
    position_names = position_names or {}
    lines = [f"=== TELE-OP  tick {snapshot.tick}  {snapshot.runtime:.1f}s  [{snapshot.state.value}] ==="]

    for output in snapshot.outputs.values():
        actuator = snapshot.actuators[output.actuator]
        if actuator.kind is ChannelKind.POSITION:
            continue

        lines.append(f"--- {output.name} ({output.actuator}) ---")
        if not output.present:
            lines.append("  not found")
            continue

        lines.append(f"  State: {'RUNNING' if output.running else 'STOPPED'}")
        if output.direction is not None:
            lines.append(f"  Direction: {output.direction.value.upper()}")
        lines.append(f"  Power: {actuator.setpoint * 100:.1f}%  command {output.command:+.3f}")
        lines.append(f"  Control Mode: {'FINE' if actuator.fine else 'NORMAL'}")
        if not output.has_encoder:
            lines.append(f"  CR Status: {_rotation(output.command)}")
            continue

        lines.append(f"  Current RPM: {output.rpm:.1f}")
        if output.expected_rpm is not None:
            lines.append(f"  Expected RPM @ Power: {output.expected_rpm:.1f}")
        lines.append(f"  Max RPM: {output.max_rpm:.1f}  Avg RPM: {output.mean_rpm:.1f}  (n={output.samples})")

    for actuator in snapshot.actuators.values():
        if actuator.kind is not ChannelKind.POSITION:
            continue
        lines.append(f"--- {actuator.name} servo ---")
        if not actuator.present:
            lines.append("  not found")
            continue
        name = position_names.get(actuator.name, "Custom")
        lines.append(
            f"  Position: {actuator.setpoint:.2f} ({name})  Angle: {actuator.setpoint * max_angle:.1f} deg"
        )

    if snapshot.wheels is not None:
        wheels = "  ".join(f"{wheel}={power:+.2f}" for wheel, power in snapshot.wheels.as_dict().items())
        lines.append(f"--- drive --- {wheels}")

    lines.append(f"System: {system_summary(snapshot)}")
    return lines


def system_summary(snapshot: StatusSnapshot) -> str:
    """One-line summary of which toggled actuators are running"""
    toggled = [status for status in snapshot.actuators.values() if status.toggled]
    running = [status for status in toggled if status.running]
    if toggled and len(running) == len(toggled):
        return "ALL MOTORS RUNNING"
    if running:
        return f"Running: {', '.join(status.name for status in running)}"
    return "All motors stopped"


def _rotation(command: float) -> str:
    if command > 0:
        return "Forward"
    if command < 0:
        return "Backward"
    return "Stopped"


class LogDisplay:
    """Snapshot callback that logs the display every N ticks"""

    def __init__(self, robot, interval: int = 50, level: int = logging.INFO) -> None:
        """
        Args:
            robot: Robot whose actuators provide named positions
            interval: Log every N-th tick (50 = once a second at 50Hz)
            level: Logging level for the display lines
        """
        self._robot = robot
        self._interval = max(1, interval)
        self._level = level

    def __call__(self, snapshot: StatusSnapshot) -> None:
        if snapshot.tick % self._interval != 0:
            return

        position_names = {
            name: actuator.position_name()
            for name, actuator in self._robot.actuators.items()
            if actuator.kind is ChannelKind.POSITION
        }
        for line in format_snapshot(
            snapshot,
            position_names=position_names,
            max_angle=self._robot.settings.aim_max_angle,
        ):
            logger.log(self._level, line)
