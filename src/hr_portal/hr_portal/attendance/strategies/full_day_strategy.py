from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class FullDayStrategy(AttendanceStrategy):
    """Worked at least the half-day threshold."""

    def decide_punch_out(self, *, worked_hours: float, threshold_hours: float) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
