#!/usr/bin/env python3
"""
Tele-op Demo - Scripted session on simulated hardware.

Replays a canned gamepad session through the full control loop and logs
the status display once per second.
"""

import asyncio
import logging
import sys

from teleop.control_loop import ControlLoop
from teleop.display import LogDisplay
from teleop.drive import MecanumMapper
from teleop.hardware import MockHardware
from teleop.robot import RobotSettings, build_robot
from teleop.types import DriveConfig, LoopConfig
from gamepads import MockInput


logger = logging.getLogger(__name__)


async def run_demo(script: str = "session", ticks: int = 120, layout: str = "bench") -> None:
    """Run a scripted session with mock components"""

    logger.info("=" * 60)
    logger.info("Tele-op Control Loop Demo")
    logger.info("=" * 60)

    input_provider = MockInput()
    input_provider.load_script(script)

    # The aim servo is left out to show optional hardware handling
    hardware = MockHardware(absent=["sm_servo"])

    robot = build_robot(RobotSettings(layout=layout))
    loop_config = LoopConfig(loop_interval=0.02)
    control_loop = ControlLoop(
        input_provider=input_provider,
        hardware=hardware,
        robot=robot,
        config=loop_config,
        drive=MecanumMapper(DriveConfig()),
    )
    control_loop.add_snapshot_callback(LogDisplay(robot, interval=25))

    loop_task = asyncio.create_task(control_loop.run())

    await asyncio.sleep(ticks * loop_config.loop_interval)

    logger.info("-" * 60)
    logger.info("Demo complete. Shutting down...")
    control_loop.stop()
    await loop_task

    for name in ("intakeMotor", "sm1", "sm2", "cbMotor"):
        stat = control_loop.stat(name)
        logger.info(f"{name}: max {stat.max_value:.1f} RPM, avg {stat.mean:.1f} RPM over {stat.count} samples")

    logger.info("=" * 60)
    logger.info(f"Demo finished after {control_loop.tick_count} ticks")
    logger.info("=" * 60)


def main():
    """Main entry point"""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    try:
        asyncio.run(run_demo())
    except KeyboardInterrupt:
        logger.info("\nDemo interrupted by user")
    except Exception as e:
        logger.error(f"Demo failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
