#!/usr/bin/env python3
"""
Tele-op Launcher - Easy start for manual-drive control

Usage:
    python launch.py                   # Gamepad control on simulated hardware
    python launch.py --demo            # Scripted demo session
    python launch.py --duration 30     # Stop automatically after 30 s
"""

import sys
import argparse
import asyncio
import logging
from typing import Optional


def setup_logging(level: str = "INFO") -> None:
    """Configure logging"""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )


def launch_gamepad(env_file: Optional[str] = None, duration: Optional[float] = None) -> None:
    """Launch gamepad control with the configured robot"""
    print("Starting gamepad control mode...")

    from teleop_config import TeleopConfig
    from teleop.control_loop import ControlLoop
    from teleop.bindings import describe
    from teleop.display import LogDisplay
    from teleop.drive import MecanumMapper
    from teleop.hardware import MockHardware
    from teleop.robot import build_robot
    from gamepads import GamepadInput

    config = TeleopConfig(env_file)
    is_valid, errors = config.validate()
    if not is_valid:
        print("ERROR: invalid configuration")
        for error in errors:
            print(f"  - {error}")
        sys.exit(1)

    # TODO: swap in a real hardware layer once a motor controller bridge exists
    print("Using MOCK hardware (no actual motors)")
    hardware = MockHardware(
        counts_per_rev=config.counts_per_rev,
        free_run_rpm=config.free_run_rpm,
    )

    robot = build_robot(config.robot_settings())
    print(f"Layout: {robot.settings.layout}")
    for actuator, lines in describe(robot.bindings).items():
        print(f"  {actuator}:")
        for line in lines:
            print(f"    {line}")

    control_loop = ControlLoop(
        input_provider=GamepadInput(index=config.gamepad_index),
        hardware=hardware,
        robot=robot,
        config=config.loop_config(),
        drive=MecanumMapper(config.drive_config()),
    )
    control_loop.add_snapshot_callback(LogDisplay(robot, interval=config.display_interval))

    async def run():
        loop_task = asyncio.create_task(control_loop.run())
        try:
            if duration is None:
                await loop_task
            else:
                await asyncio.sleep(duration)
                control_loop.stop()
                await loop_task
        finally:
            if not loop_task.done():
                control_loop.stop()
                await loop_task

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        print("\nShutting down...")
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


def launch_demo(competition: bool = False) -> None:
    """Launch scripted demo"""
    print("Starting scripted demo...")
    from demo_teleop import run_demo
    if competition:
        asyncio.run(run_demo(script="competition", layout="competition"))
    else:
        asyncio.run(run_demo())


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="Tele-op - Manual-drive control loop",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python launch.py                  Drive with a gamepad (mock hardware)
  python launch.py --demo           Run scripted demo
  python launch.py --demo --competition   Demo with the match layout
  python launch.py --env-file robot.env --duration 60
        """
    )

    parser.add_argument(
        "--demo",
        action="store_true",
        help="Run scripted demo session"
    )
    parser.add_argument(
        "--competition",
        action="store_true",
        help="Use the match layout in the demo (gamepad mode reads TELEOP_LAYOUT)"
    )
    parser.add_argument(
        "--env-file",
        help="Path to .env file with TELEOP_* settings"
    )
    parser.add_argument(
        "--duration",
        type=float,
        help="Stop the session after this many seconds"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level"
    )

    args = parser.parse_args()

    setup_logging(args.log_level)

    if args.demo:
        launch_demo(competition=args.competition)
    else:
        launch_gamepad(env_file=args.env_file, duration=args.duration)


if __name__ == "__main__":
    main()
