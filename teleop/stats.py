"""
Session statistics for measured motor speed.

Only samples taken while the actuator is actually driven count; idle
zero readings would otherwise drag the mean down.
"""

SECONDS_PER_MINUTE = 60.0


def ticks_to_rpm(ticks_per_second: float, counts_per_rev: int) -> float:
    """
    Convert encoder velocity to shaft speed.

    Args:
        ticks_per_second: Encoder velocity (sign ignored)
        counts_per_rev: Encoder counts per output shaft revolution

    Returns:
        Speed in revolutions per minute
    """
    return abs(ticks_per_second) * SECONDS_PER_MINUTE / counts_per_rev


def rpm_to_ticks(rpm: float, counts_per_rev: int) -> float:
    """Inverse of ticks_to_rpm"""
    return rpm * counts_per_rev / SECONDS_PER_MINUTE


class RunningStat:
    """Max and cumulative mean of a positive sample stream, without history"""

    def __init__(self) -> None:
        self.max_value = 0.0
        self.mean = 0.0
        self.count = 0

    def fold(self, sample: float, active: bool = True) -> bool:
        """
        Fold one sample in.

        Args:
            sample: Measured value
            active: Whether the measured actuator is currently driven

        Returns:
            True if the sample was counted
        """
        if not active or sample <= 0:
            return False

        if self.count == 0:
            self.mean = sample
        else:
            self.mean = (self.mean * self.count + sample) / (self.count + 1)
        self.count += 1
        self.max_value = max(self.max_value, sample)
        return True

    def __repr__(self) -> str:
        return f"RunningStat(max={self.max_value:.1f}, mean={self.mean:.1f}, n={self.count})"
