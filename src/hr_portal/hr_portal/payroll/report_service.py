from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..core.exceptions import ValidationError
from ..users.model import SessionUser
from ..users.service import TeamAccess
from .calculator.base import WorkedHoursCalculator
from .calculator.standard_calculator import StandardHoursCalculator


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


class PayrollReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        access: TeamAccess,
        *,
        calculator: Optional[WorkedHoursCalculator] = None,
    ):
        self._attendance = attendance
        self._access = access
        self._calculator = calculator or StandardHoursCalculator()

    def build_attendance_report(self, actor: SessionUser, *, start: date, end: date) -> ReportData:
        if start > end:
            raise ValidationError("Invalid date range")

        query_rows = self._attendance.get_report_rows(
            start_date=start,
            end_date=end,
            employee_ids=self._access.visible_ids(actor),
        )

        summary_map: dict[int, dict] = {}
        out_rows: list[dict] = []

        for r in query_rows:
            worked = self._calculator.worked_hours(r)

            out_rows.append(
                {
                    "employeeId": r.employee_id,
                    "employeeCode": r.employee_code,
                    "fullName": r.full_name,
                    "deptName": r.dept_name or "-",
                    "date": r.work_date.strftime("%Y-%m-%d"),
                    "punchIn": r.punch_in.strftime("%H:%M") if r.punch_in else "-",
                    "punchOut": r.punch_out.strftime("%H:%M") if r.punch_out else "-",
                    "totalHours": r.total_hours,
                    "idleHours": r.idle_hours,
                    "workedHours": worked,
                    "status": r.status.value,
                }
            )

            s = summary_map.get(r.employee_id)
            if not s:
                s = {
                    "employeeId": r.employee_id,
                    "employeeCode": r.employee_code,
                    "fullName": r.full_name,
                    "days": 0,
                    "workedHours": 0.0,
                    "idleHours": 0.0,
                }
                summary_map[r.employee_id] = s
            s["days"] += 1
            s["workedHours"] += worked
            s["idleHours"] += r.idle_hours

        summary = []
        for s in summary_map.values():
            s["workedHours"] = round(s["workedHours"], 2)
            s["idleHours"] = round(s["idleHours"], 2)
            summary.append(s)

        summary.sort(key=lambda x: x["workedHours"], reverse=True)
        return ReportData(rows=out_rows, summary=summary)
