#!/usr/bin/env python3
"""
Tele-op Environment Configuration Helper

Provides easy access to .env configuration for the tele-op tools.
Loads the .env file and provides defaults for every tunable.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from teleop.robot import LAYOUTS, RobotSettings
from teleop.types import DriveConfig, LoopConfig


class TeleopConfig:
    """Configuration manager for the tele-op tools"""

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration

        Args:
            env_file: Path to .env file (default: .env in current directory)
        """
        self._loaded = False

        env_path = Path(".env") if env_file is None else Path(env_file)
        if env_path.exists():
            load_dotenv(env_path)
            self._loaded = True

    @staticmethod
    def _float(name: str, default: float) -> float:
        return float(os.getenv(name, str(default)))

    @staticmethod
    def _int(name: str, default: int) -> int:
        return int(os.getenv(name, str(default)))

    @property
    def is_loaded(self) -> bool:
        """Whether a .env file was found and loaded"""
        return self._loaded

    @property
    def layout(self) -> str:
        """Binding layout, "bench" or "competition" (default: bench)"""
        return os.getenv("TELEOP_LAYOUT", "bench").strip().lower()

    @property
    def loop_interval(self) -> float:
        """Delay between ticks in seconds (default: 0.02)"""
        return self._float("TELEOP_LOOP_INTERVAL", 0.02)

    @property
    def trigger_threshold(self) -> float:
        """Trigger magnitude that counts as pressed (default: 0.05)"""
        return self._float("TELEOP_TRIGGER_THRESHOLD", 0.05)

    @property
    def fine_step_scale(self) -> float:
        """Step multiplier in fine mode (default: 0.5)"""
        return self._float("TELEOP_FINE_STEP_SCALE", 0.5)

    @property
    def gamepad_index(self) -> int:
        """Joystick index to open (default: 0)"""
        return self._int("TELEOP_GAMEPAD_INDEX", 0)

    @property
    def counts_per_rev(self) -> int:
        """Encoder counts per revolution (default: 537)"""
        return self._int("TELEOP_ENCODER_CPR", 537)

    @property
    def free_run_rpm(self) -> float:
        """Output shaft RPM at full power (default: 5800)"""
        return self._float("TELEOP_FREE_RUN_RPM", 5800.0)

    @property
    def intake_power(self) -> float:
        """Fixed intake power (default: 0.9)"""
        return self._float("TELEOP_INTAKE_POWER", 0.9)

    @property
    def shooter_power(self) -> float:
        """Initial shooter power (default: 0.5)"""
        return self._float("TELEOP_SHOOTER_POWER", 0.5)

    @property
    def shooter_step(self) -> float:
        """Shooter power step per press (default: 0.05)"""
        return self._float("TELEOP_SHOOTER_STEP", 0.05)

    @property
    def conveyor_power(self) -> float:
        """Conveyor power while the shooter runs (default: 0.75)"""
        return self._float("TELEOP_CONVEYOR_POWER", 0.75)

    @property
    def aim_step(self) -> float:
        """Aim servo travel per tick at full trigger (default: 0.02)"""
        return self._float("TELEOP_AIM_STEP", 0.02)

    @property
    def aim_extended(self) -> float:
        """Aim servo extension limit (default: 0.17)"""
        return self._float("TELEOP_AIM_EXTENDED", 0.17)

    @property
    def drive_deadzone(self) -> float:
        """Drive stick deadzone (default: 0.05)"""
        return self._float("TELEOP_DRIVE_DEADZONE", 0.05)

    @property
    def drive_curve(self) -> float:
        """Drive response curve exponent (default: 1.0)"""
        return self._float("TELEOP_DRIVE_CURVE", 1.0)

    @property
    def display_interval(self) -> int:
        """Log the status display every N ticks (default: 50)"""
        return self._int("TELEOP_DISPLAY_INTERVAL", 50)

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate configuration

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []

        try:
            if self.layout not in LAYOUTS:
                errors.append(f"TELEOP_LAYOUT must be one of: {', '.join(LAYOUTS)}")
            if self.loop_interval <= 0:
                errors.append("TELEOP_LOOP_INTERVAL must be positive")
            if not 0.0 <= self.trigger_threshold < 1.0:
                errors.append("TELEOP_TRIGGER_THRESHOLD must be in [0, 1)")
            if not 0.0 < self.fine_step_scale <= 1.0:
                errors.append("TELEOP_FINE_STEP_SCALE must be in (0, 1]")
            if self.counts_per_rev <= 0:
                errors.append("TELEOP_ENCODER_CPR must be positive")
            if self.gamepad_index < 0:
                errors.append("TELEOP_GAMEPAD_INDEX must not be negative")
            if self.shooter_step <= 0:
                errors.append("TELEOP_SHOOTER_STEP must be positive")
            if self.aim_step <= 0:
                errors.append("TELEOP_AIM_STEP must be positive")
            if self.display_interval < 1:
                errors.append("TELEOP_DISPLAY_INTERVAL must be at least 1")
            if not 0.0 <= self.aim_extended <= 1.0:
                errors.append("TELEOP_AIM_EXTENDED must be in [0, 1]")
            if not 0.0 <= self.drive_deadzone < 1.0:
                errors.append("TELEOP_DRIVE_DEADZONE must be in [0, 1)")
            if self.drive_curve <= 0:
                errors.append("TELEOP_DRIVE_CURVE must be positive")
            for name, value in [
                ("TELEOP_INTAKE_POWER", self.intake_power),
                ("TELEOP_SHOOTER_POWER", self.shooter_power),
                ("TELEOP_CONVEYOR_POWER", self.conveyor_power),
            ]:
                if not 0.0 <= value <= 1.0:
                    errors.append(f"{name} must be in [0, 1]")
        except ValueError as e:
            errors.append(f"Malformed number in environment: {e}")

        return len(errors) == 0, errors

    def loop_config(self) -> LoopConfig:
        return LoopConfig(
            loop_interval=self.loop_interval,
            trigger_threshold=self.trigger_threshold,
            fine_step_scale=self.fine_step_scale,
        )

    def drive_config(self) -> DriveConfig:
        return DriveConfig(deadzone=self.drive_deadzone, curve=self.drive_curve)

    def robot_settings(self) -> RobotSettings:
        return RobotSettings(
            layout=self.layout,
            counts_per_rev=self.counts_per_rev,
            free_run_rpm=self.free_run_rpm,
            intake_power=self.intake_power,
            shooter_power=self.shooter_power,
            shooter_step=self.shooter_step,
            conveyor_power=self.conveyor_power,
            aim_step=self.aim_step,
            aim_extended=self.aim_extended,
        )

    def print_status(self):
        """Print configuration status"""
        print("Tele-op Configuration Status:")
        print(f"  .env loaded:     {'Yes' if self._loaded else 'No'}")

        is_valid, errors = self.validate()
        if not is_valid:
            print("\n  Status: Configuration has errors:")
            for error in errors:
                print(f"    - {error}")
            return

        print(f"  Layout:          {self.layout}")
        print(f"  Loop interval:   {self.loop_interval * 1000:.0f} ms")
        print(f"  Gamepad index:   {self.gamepad_index}")
        print(f"  Encoder CPR:     {self.counts_per_rev}")
        print(f"  Intake power:    {self.intake_power:.2f}")
        print(f"  Shooter power:   {self.shooter_power:.2f} (step {self.shooter_step:.3f})")
        print(f"  Conveyor power:  {self.conveyor_power:.2f}")
        print(f"  Aim step/limit:  {self.aim_step:.3f} / {self.aim_extended:.2f}")
        print(f"  Drive deadzone:  {self.drive_deadzone:.2f} (curve {self.drive_curve:.1f})")
        print("\n  Status: Configuration is valid")


def main():
    """Command-line utility to check configuration"""
    import argparse

    parser = argparse.ArgumentParser(
        description="Tele-op Configuration Utility",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Check current configuration:
    python teleop_config.py

  Validate configuration:
    python teleop_config.py --validate

  Use custom .env file:
    python teleop_config.py --env-file /path/to/.env
        """
    )

    parser.add_argument("--env-file", help="Path to .env file")
    parser.add_argument("--validate", action="store_true",
                        help="Validate configuration and exit with error if invalid")

    args = parser.parse_args()

    config = TeleopConfig(args.env_file)
    config.print_status()

    if args.validate:
        is_valid, _ = config.validate()
        if not is_valid:
            print("\nValidation failed!")
            import sys
            sys.exit(1)
        else:
            print("\nValidation passed!")


if __name__ == "__main__":
    main()
