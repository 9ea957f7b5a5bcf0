"""Hand rotation angles from a time sample."""

from __future__ import annotations

from enum import Enum

from .models import HandAngles, TimeSample


class MinutePolicy(str, Enum):
    # SWEEP creeps the minute hand with the seconds, STEP jumps on the minute mark.
    SWEEP = "sweep"
    STEP = "step"


class RotationCalculator:
    """Degrees clockwise from 12 o'clock, each in [0, 360).

    360 / 60 = 6 degrees per minute or second, 360 / 12 = 30 degrees per hour.
    """

    def __init__(self, minute_policy: MinutePolicy = MinutePolicy.SWEEP) -> None:
        self.minute_policy = MinutePolicy(minute_policy)

    @staticmethod
    def second_angle(sample: TimeSample) -> float:
        return (sample.second + sample.millisecond / 1000.0) * 6.0

    def minute_angle(self, sample: TimeSample) -> float:
        if self.minute_policy is MinutePolicy.STEP:
            return sample.minute * 6.0
        return sample.minute * 6.0 + sample.second / 10.0

    @staticmethod
    def hour_angle(sample: TimeSample) -> float:
        return (sample.hour % 12) * 30.0 + sample.minute * 0.5

    def angles(self, sample: TimeSample) -> HandAngles:
        return HandAngles(
            hour=self.hour_angle(sample),
            minute=self.minute_angle(sample),
            second=self.second_angle(sample),
        )
