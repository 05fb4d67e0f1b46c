from __future__ import annotations

from .base import WorkedHoursCalculator
from ...attendance.model import AttendanceReportRow


class StandardHoursCalculator(WorkedHoursCalculator):
    """Standard rule: recorded hours minus idle hours, not below 0."""

    def worked_hours(self, row: AttendanceReportRow) -> float:
        if not row.punch_out:
            return 0.0
        return round(max(row.total_hours - row.idle_hours, 0.0), 2)
