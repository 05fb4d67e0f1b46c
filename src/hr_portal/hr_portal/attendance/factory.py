from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import HALF_DAY_THRESHOLD_HOURS
from .strategies.base import AttendanceStrategy
from .strategies.full_day_strategy import FullDayStrategy
from .strategies.half_day_strategy import HalfDayStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    half_day_threshold_hours: float = HALF_DAY_THRESHOLD_HOURS

    def for_punch_out(self, *, worked_hours: float) -> AttendanceStrategy:
        if worked_hours >= self.half_day_threshold_hours:
            return FullDayStrategy()
        return HalfDayStrategy()
