"""
Mock Hardware - For testing without a robot.

Simulates motors, servos and encoders. Commands are recorded instead of
driving anything, and encoder velocity follows the last commanded power.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple
from teleop.stats import rpm_to_ticks


logger = logging.getLogger(__name__)

DEFAULT_COUNTS_PER_REV = 537
DEFAULT_FREE_RUN_RPM = 5800.0


class MockHardware:
    """
    Mock hardware layer for testing.

    Logs and records every write, returns simulated encoder velocity.
    """

    def __init__(
        self,
        absent: Iterable[str] = (),
        counts_per_rev: int = DEFAULT_COUNTS_PER_REV,
        free_run_rpm: float = DEFAULT_FREE_RUN_RPM,
        fail_writes: Iterable[str] = (),
        fail_reads: Iterable[str] = (),
    ) -> None:
        """
        Initialize mock hardware.

        Args:
            absent: Output names missing from the simulated configuration
            counts_per_rev: Encoder counts per revolution used for velocity
            free_run_rpm: Simulated speed at full power
            fail_writes: Output names whose writes raise OSError
            fail_reads: Output names whose velocity reads raise OSError
        """
        self._absent = set(absent)
        self._counts_per_rev = counts_per_rev
        self._free_run_rpm = free_run_rpm
        self.fail_writes = set(fail_writes)
        self.fail_reads = set(fail_reads)

        self._started = False
        self._commands: Dict[str, float] = {}
        self._writes: List[Tuple[str, float]] = []
        self._velocity_overrides: Dict[str, float] = {}

    async def start(self) -> None:
        """Simulate hardware init"""
        logger.info(f"[MOCK] Hardware started ({len(self._absent)} absent outputs)")
        self._started = True

    async def stop(self) -> None:
        """Simulate hardware release"""
        logger.info(f"[MOCK] Hardware stopped after {len(self._writes)} writes")
        self._started = False

    def is_present(self, name: str) -> bool:
        return name not in self._absent

    def write(self, name: str, value: float) -> None:
        """Record command instead of sending"""
        if name in self._absent:
            raise KeyError(f"[MOCK] No output named '{name}'")
        if name in self.fail_writes:
            raise OSError(f"[MOCK] Simulated write fault on '{name}'")

        self._commands[name] = value
        self._writes.append((name, value))
        logger.debug(f"[MOCK] {name} <- {value:+.3f}")

    def read_velocity(self, name: str) -> float:
        """Return simulated encoder velocity in ticks/s"""
        if name in self._absent:
            raise KeyError(f"[MOCK] No output named '{name}'")
        if name in self.fail_reads:
            raise OSError(f"[MOCK] Simulated read fault on '{name}'")

        if name in self._velocity_overrides:
            return self._velocity_overrides[name]
        power = self._commands.get(name, 0.0)
        return rpm_to_ticks(power * self._free_run_rpm, self._counts_per_rev)

    def set_velocity(self, name: str, ticks_per_second: Optional[float]) -> None:
        """Pin the reported velocity of an output (None returns to simulation)"""
        if ticks_per_second is None:
            self._velocity_overrides.pop(name, None)
        else:
            self._velocity_overrides[name] = ticks_per_second

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def commands(self) -> Dict[str, float]:
        """Last value written to each output (for testing)"""
        return dict(self._commands)

    @property
    def writes(self) -> List[Tuple[str, float]]:
        """Every write in order (for testing)"""
        return list(self._writes)

    def writes_for(self, name: str) -> List[float]:
        """Every value written to one output, in order (for testing)"""
        return [value for output, value in self._writes if output == name]
