from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

from ..common.datetime_utils import is_weekend
from ..core.enums import AttendanceStatus
from ..holidays.repository import HolidayRepository
from ..users.repository import EmployeeRepository
from .cascade import WeekendCascade
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass
class DailyReport:
    work_date: date
    processed: int = 0
    marked_absent: int = 0
    marked_weekend: int = 0
    marked_holiday: int = 0
    already_exists: int = 0
    cascaded: int = 0
    errors: list[dict] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "date": self.work_date.isoformat(),
            "processed": self.processed,
            "markedAbsent": self.marked_absent,
            "markedWeekend": self.marked_weekend,
            "markedHoliday": self.marked_holiday,
            "alreadyExists": self.already_exists,
            "cascaded": self.cascaded,
            "errors": self.errors,
        }


class DailyAttendanceService:
    """Closes a calendar day: everyone without a record gets WEEKEND, HOLIDAY or ABSENT."""

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        holidays: HolidayRepository,
        *,
        cascade: WeekendCascade | None = None,
    ):
        self._employees = employees
        self._attendance = attendance
        self._holidays = holidays
        self._cascade = cascade or WeekendCascade(attendance)

    def status_for_missing_day(self, day: date) -> AttendanceStatus:
        if is_weekend(day):
            return AttendanceStatus.WEEKEND
        if self._holidays.get_by_date(day):
            return AttendanceStatus.HOLIDAY
        return AttendanceStatus.ABSENT

    def run(self, day: date) -> DailyReport:
        report = DailyReport(work_date=day)
        status = self.status_for_missing_day(day)

        for employee in self._employees.list_all(active_only=True):
            if employee.date_of_joining > day:
                continue
            report.processed += 1
            try:
                if self._attendance.get_for_employee_and_date(employee.employee_id, day):
                    report.already_exists += 1
                    continue

                self._attendance.create_record(
                    employee_id=employee.employee_id,
                    work_date=day,
                    status=status,
                    note="Marked by daily attendance job",
                )
                if status == AttendanceStatus.WEEKEND:
                    report.marked_weekend += 1
                elif status == AttendanceStatus.HOLIDAY:
                    report.marked_holiday += 1
                else:
                    report.marked_absent += 1
                    if self._cascade.apply(employee.employee_id, day):
                        report.cascaded += 1
            except Exception as e:
                # one bad row must not stop the rest of the day
                logger.exception("[daily-attendance] employee %s on %s failed", employee.employee_id, day)
                report.errors.append({"employeeId": employee.employee_id, "error": str(e)})

        logger.info(
            "[daily-attendance] %s: processed=%d absent=%d weekend=%d holiday=%d existing=%d errors=%d",
            day,
            report.processed,
            report.marked_absent,
            report.marked_weekend,
            report.marked_holiday,
            report.already_exists,
            len(report.errors),
        )
        return report
