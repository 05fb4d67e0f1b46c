from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class HalfDayStrategy(AttendanceStrategy):
    """Worked less than the threshold: counts as half a day."""

    def decide_punch_out(self, *, worked_hours: float, threshold_hours: float) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.HALF_DAY,
            note=f"Worked {worked_hours:.2f}h (< {threshold_hours:g}h)",
        )
