from __future__ import annotations

from datetime import date, timedelta
from typing import Mapping

from ...attendance.model import AttendanceRecord
from ...common.datetime_utils import is_saturday, is_weekend, iter_days
from ...core.constants import PAYROLL_DAYS_PER_MONTH, PROFESSIONAL_TAX
from ...core.enums import AttendanceStatus
from ..model import PayrollFigures
from .base import PayrollCalculator

_FULL_DAY = (
    AttendanceStatus.PRESENT,
    AttendanceStatus.LEAVE,
    AttendanceStatus.WEEKEND,
    AttendanceStatus.HOLIDAY,
)


class FixedSalaryCalculator(PayrollCalculator):
    """Pro-rata fixed salary: monthly / 30 per present day, minus professional tax."""

    def __init__(self, *, professional_tax: float = PROFESSIONAL_TAX, days_per_month: int = PAYROLL_DAYS_PER_MONTH):
        self._professional_tax = float(professional_tax)
        self._days_per_month = int(days_per_month)

    def present_days(self, records: Mapping[date, AttendanceRecord], *, start: date, end: date) -> float:
        """`records` should also cover the day before `start` and after `end` for the weekend rule."""

        present = 0.0
        for day in iter_days(start, end):
            record = records.get(day)
            if record is not None:
                if record.status in _FULL_DAY:
                    present += 1
                elif record.status == AttendanceStatus.HALF_DAY:
                    present += 0.5
            elif is_weekend(day):
                # Saturday follows Friday, Sunday precedes Monday.
                neighbour = day - timedelta(days=1) if is_saturday(day) else day + timedelta(days=1)
                linked = records.get(neighbour)
                if linked is None or linked.status != AttendanceStatus.ABSENT:
                    present += 1
        return present

    def compute(self, *, monthly_salary: float, present_days: float, working_days: int) -> PayrollFigures:
        gross = round(monthly_salary / self._days_per_month * present_days, 2)
        deductions = self._professional_tax
        return PayrollFigures(
            working_days=int(working_days),
            days_present=round(present_days, 1),
            days_absent=round(max(0.0, working_days - present_days), 1),
            basic_salary=round(monthly_salary, 2),
            gross_salary=gross,
            professional_tax=self._professional_tax,
            total_deductions=deductions,
            net_salary=round(gross - deductions, 2),
        )
