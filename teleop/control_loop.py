"""
ControlLoop - the tele-op tick.

Each tick runs synchronously, in order:
1. Sample the gamepad
2. Derive edge events for every tracked signal
3. Apply edge-triggered bindings
4. Apply held and axis bindings, mix the drive
5. Write every present output
6. Read encoder feedback
7. Fold feedback into session statistics
8. Emit a status snapshot

Hardware faults on one output are logged and skipped; they never end
the session. On stop, every present output receives its neutral command
exactly once before the loop returns.
"""

import asyncio
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple
from .bindings import Binding, StopAll, Trigger, apply_action, validate_bindings
from .drive import MecanumMapper
from .edge import EdgeDetector
from .interfaces import HardwareInterface, InputProvider
from .robot import Robot
from .stats import RunningStat, ticks_to_rpm
from .types import (
    EdgeEvent,
    EdgeKind,
    GamepadState,
    LoopConfig,
    LoopState,
    OutputSpec,
    OutputStatus,
    StatusSnapshot,
    WheelPowers,
)


logger = logging.getLogger(__name__)


class ControlLoop:
    """
    Owns the actuators, detectors and statistics for one session.
    """

    def __init__(
        self,
        input_provider: InputProvider,
        hardware: HardwareInterface,
        robot: Robot,
        config: LoopConfig,
        drive: Optional[MecanumMapper] = None,
    ) -> None:
        """
        Initialize control loop.

        Args:
            input_provider: Source of gamepad samples
            hardware: Motor/servo/encoder access
            robot: Actuators, outputs and binding table (built by the host)
            config: Loop configuration
            drive: Optional mecanum drive mixer

        Raises:
            ValueError: If the binding table or outputs reference unknown actuators
        """
        self.input = input_provider
        self.hardware = hardware
        self.robot = robot
        self.config = config
        self.drive = drive

        self.actuators = robot.actuators
        self.bindings: List[Binding] = list(robot.bindings)
        validate_bindings(self.bindings, self.actuators)

        self.outputs: List[OutputSpec] = list(robot.outputs)
        for output in self.outputs:
            if output.actuator not in self.actuators:
                raise ValueError(
                    f"Output '{output.name}' driven by unknown actuator '{output.actuator}'"
                )

        # Optional hardware is detected once, here
        self._present: Dict[str, bool] = {
            output.name: self._probe(output.name) for output in self.outputs
        }
        if self.drive is not None:
            for name in self.drive.config.output_names.values():
                self._present[name] = self._probe(name)

        self._edges = EdgeDetector(threshold=config.trigger_threshold)
        self._edge_signals: List[str] = []
        for binding in self.bindings:
            if binding.trigger.is_edge and binding.signal not in self._edge_signals:
                self._edge_signals.append(binding.signal)

        self._stats: Dict[str, RunningStat] = {
            output.name: RunningStat() for output in self.outputs if output.reports_velocity
        }
        self._rpm: Dict[str, float] = {name: 0.0 for name in self._stats}
        self._wheels = WheelPowers.stop()

        self.state = LoopState.INIT
        self._stop_requested = False
        self._shutdown_done = False
        self._tick_count = 0
        self._start_time: Optional[float] = None
        self._last_snapshot: Optional[StatusSnapshot] = None

        self._snapshot_callbacks: List[Callable[[StatusSnapshot], Any]] = []

    def add_snapshot_callback(self, callback: Callable[[StatusSnapshot], Any]) -> None:
        """
        Register a display sink.

        Callback signature: callback(snapshot). Called at the end of every tick.
        """
        self._snapshot_callbacks.append(callback)

    async def run(self) -> None:
        """
        Main control loop - runs until stop() is called.

        Call this from an async context. The neutral write happens in the
        finally block, so cancellation and errors also stop the motors.
        """
        logger.info("Control loop starting")

        try:
            await self.hardware.start()
            await self.input.start()
            self._enter_running()

            while not self._stop_requested:
                try:
                    self.tick()
                except Exception as e:
                    logger.error(f"Error in control loop tick: {e}", exc_info=True)
                await asyncio.sleep(self.config.loop_interval)

        finally:
            logger.info("Control loop stopping")
            await self._cleanup()

    def stop(self) -> None:
        """Request session stop (takes effect before the next hardware write)"""
        if not self._stop_requested:
            logger.info("Stop requested")
        self._stop_requested = True

    def tick(self) -> Optional[StatusSnapshot]:
        """
        Run one synchronous iteration.

        Returns:
            The snapshot emitted this tick, or None if a stop was pending
        """
        if self.state is LoopState.INIT:
            self._enter_running()

        # 1. Sample inputs
        gamepad = self._read_input()

        if gamepad is not None:
            # 2. Edge events
            events = self._detect_edges(gamepad)
            # 3./4. Bindings in table order, then drive
            self._apply_bindings(gamepad, events)
            if self.drive is not None:
                self._wheels = self.drive.map(gamepad)
        else:
            self._wheels = WheelPowers.stop()

        # Stop is checked once per tick, before any output is driven
        if self._stop_requested:
            return None

        # 5. Hardware writes
        self._write_outputs()

        # 6./7. Feedback and statistics
        self._read_feedback()

        # 8. Snapshot
        self._tick_count += 1
        snapshot = self.snapshot()
        self._emit(snapshot)
        return snapshot

    def shutdown(self) -> None:
        """
        Write the neutral command to every present output, once.

        Safe to call more than once; only the first call writes.
        """
        if self._shutdown_done:
            return
        self._shutdown_done = True
        self._stop_requested = True

        for output in self.outputs:
            if self._present[output.name]:
                neutral = self.actuators[output.actuator].neutral
                self._safe_write(output.name, neutral)

        if self.drive is not None:
            for name in self.drive.config.output_names.values():
                if self._present[name]:
                    self._safe_write(name, 0.0)
            self.drive.reset()
        self._wheels = WheelPowers.stop()

        self.state = LoopState.STOPPED
        logger.info("All outputs set to neutral")

    def snapshot(self) -> StatusSnapshot:
        """Build a snapshot of the current state (also available between ticks)"""
        outputs: Dict[str, OutputStatus] = {}
        for output in self.outputs:
            actuator = self.actuators[output.actuator]
            command = actuator.command(output.preset)
            stat = self._stats.get(output.name)
            expected = None
            if output.free_run_rpm is not None:
                expected = output.free_run_rpm * abs(command)
            outputs[output.name] = OutputStatus(
                name=output.name,
                actuator=actuator.name,
                command=command,
                running=actuator.running,
                direction=actuator.direction,
                present=self._present[output.name],
                rpm=self._rpm.get(output.name, 0.0),
                max_rpm=stat.max_value if stat else 0.0,
                mean_rpm=stat.mean if stat else 0.0,
                samples=stat.count if stat else 0,
                expected_rpm=expected,
                has_encoder=output.reports_velocity,
            )

        actuators = {
            name: actuator.status(present=self._actuator_present(name))
            for name, actuator in self.actuators.items()
        }

        runtime = 0.0 if self._start_time is None else time.time() - self._start_time
        self._last_snapshot = StatusSnapshot(
            tick=self._tick_count,
            runtime=runtime,
            state=self.state,
            actuators=actuators,
            outputs=outputs,
            wheels=self._wheels if self.drive is not None else None,
        )
        return self._last_snapshot

    def _enter_running(self) -> None:
        if self.state is LoopState.INIT:
            self._start_time = time.time()
            logger.info("State transition: init -> running")
            self.state = LoopState.RUNNING

    def _read_input(self) -> Optional[GamepadState]:
        try:
            return self.input.read_gamepad()
        except Exception as e:
            logger.warning(f"Input read failed, holding last state: {e}")
            return None

    def _detect_edges(self, gamepad: GamepadState) -> Dict[str, EdgeEvent]:
        """Update every tracked signal exactly once"""
        events: Dict[str, EdgeEvent] = {}
        for signal in self._edge_signals:
            event = self._edges.update(signal, gamepad.value(signal))
            if event is not None:
                events[signal] = event
        return events

    def _apply_bindings(self, gamepad: GamepadState, events: Dict[str, EdgeEvent]) -> None:
        for binding in self.bindings:
            # StopAll reaches the whole robot, whatever actuator it is filed under
            robot_wide = isinstance(binding.action, StopAll)
            if not robot_wide and not self._actuator_present(binding.actuator):
                continue

            fired, magnitude = self._fires(binding, gamepad, events)
            if not fired:
                continue

            apply_action(
                binding.action,
                self.actuators[binding.actuator],
                self.actuators,
                magnitude=magnitude,
                fine_step_scale=self.config.fine_step_scale,
            )

    def _fires(
        self,
        binding: Binding,
        gamepad: GamepadState,
        events: Dict[str, EdgeEvent],
    ) -> Tuple[bool, float]:
        """Whether a binding fires this tick, and the magnitude to apply"""
        if binding.trigger is Trigger.RISING:
            event = events.get(binding.signal)
            return event is not None and event.kind is EdgeKind.RISING, 1.0

        if binding.trigger is Trigger.FALLING:
            event = events.get(binding.signal)
            return event is not None and event.kind is EdgeKind.FALLING, 1.0

        value = gamepad.value(binding.signal)
        if binding.trigger is Trigger.HELD:
            return bool(value), 1.0

        # AXIS
        magnitude = abs(float(value))
        return magnitude > self.config.trigger_threshold, magnitude

    def _write_outputs(self) -> None:
        for output in self.outputs:
            if not self._present[output.name]:
                continue
            command = self.actuators[output.actuator].command(output.preset)
            self._safe_write(output.name, command)

        if self.drive is not None:
            names = self.drive.config.output_names
            for wheel, power in self._wheels.as_dict().items():
                if self._present[names[wheel]]:
                    self._safe_write(names[wheel], power)

    def _read_feedback(self) -> None:
        for output in self.outputs:
            if not output.reports_velocity or not self._present[output.name]:
                continue

            try:
                velocity = self.hardware.read_velocity(output.name)
            except Exception as e:
                logger.warning(f"Velocity read failed on {output.name}, keeping last value: {e}")
                continue

            rpm = ticks_to_rpm(velocity, output.counts_per_rev)
            self._rpm[output.name] = rpm
            self._stats[output.name].fold(rpm, self.actuators[output.actuator].running)

    def _safe_write(self, name: str, value: float) -> bool:
        try:
            self.hardware.write(name, value)
            return True
        except Exception as e:
            logger.warning(f"Write to {name} failed: {e}")
            return False

    def _emit(self, snapshot: StatusSnapshot) -> None:
        for callback in self._snapshot_callbacks:
            try:
                callback(snapshot)
            except Exception as e:
                logger.error(f"Error in snapshot callback: {e}", exc_info=True)

    def _probe(self, name: str) -> bool:
        try:
            present = bool(self.hardware.is_present(name))
        except Exception as e:
            logger.warning(f"Could not probe {name}, treating as absent: {e}")
            present = False
        if not present:
            logger.info(f"Output {name} not found, skipping")
        return present

    def _actuator_present(self, name: str) -> bool:
        """An actuator is present if any of its outputs is"""
        return any(
            self._present[output.name] for output in self.outputs if output.actuator == name
        )

    async def _cleanup(self) -> None:
        """Neutral write, then release devices"""
        try:
            self.shutdown()
        except Exception as e:
            logger.error(f"Error during shutdown write: {e}", exc_info=True)

        try:
            await self.input.stop()
            await self.hardware.stop()
        except Exception as e:
            logger.error(f"Error during cleanup: {e}", exc_info=True)

    # Public properties for display/monitoring

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def last_snapshot(self) -> Optional[StatusSnapshot]:
        return self._last_snapshot

    @property
    def is_running(self) -> bool:
        return self.state is LoopState.RUNNING

    def is_present(self, name: str) -> bool:
        return self._present.get(name, False)

    def stat(self, output: str) -> Optional[RunningStat]:
        """Session statistics for one output (None if it has no encoder)"""
        return self._stats.get(output)
