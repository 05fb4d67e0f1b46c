from datetime import date

import pytest

from src.hr_portal.hr_portal.attendance.model import AttendanceRecord
from src.hr_portal.hr_portal.core.enums import AttendanceStatus
from src.hr_portal.hr_portal.payroll.calculator.fixed_salary_calculator import FixedSalaryCalculator


def _records(**statuses):
    # keys like d2026_03_06="ABSENT"
    out = {}
    for i, (key, status) in enumerate(statuses.items(), start=1):
        y, m, d = (int(p) for p in key[1:].split("_"))
        day = date(y, m, d)
        out[day] = AttendanceRecord(attendance_id=i, employee_id=1, work_date=day, status=AttendanceStatus(status))
    return out


def test_half_day_counts_as_half():
    records = _records(d2026_03_04="PRESENT", d2026_03_05="HALF_DAY")

    present = FixedSalaryCalculator().present_days(records, start=date(2026, 3, 4), end=date(2026, 3, 5))

    assert present == 1.5


def test_leave_holiday_and_weekend_records_count_as_present():
    records = _records(d2026_03_02="LEAVE", d2026_03_03="HOLIDAY", d2026_03_07="WEEKEND", d2026_03_04="ABSENT")

    present = FixedSalaryCalculator().present_days(records, start=date(2026, 3, 2), end=date(2026, 3, 4))

    assert present == 2


def test_unrecorded_weekend_counts_unless_linked_day_absent():
    # Fri 2026-03-06 absent -> Sat 03-07 unpaid; Mon 03-09 present -> Sun 03-08 paid
    records = _records(d2026_03_06="ABSENT", d2026_03_09="PRESENT")

    present = FixedSalaryCalculator().present_days(records, start=date(2026, 3, 6), end=date(2026, 3, 9))

    assert present == 2


def test_unrecorded_weekday_is_not_paid():
    present = FixedSalaryCalculator().present_days({}, start=date(2026, 3, 4), end=date(2026, 3, 4))

    assert present == 0


def test_compute_figures():
    figures = FixedSalaryCalculator().compute(monthly_salary=30000, present_days=20.5, working_days=22)

    assert figures.gross_salary == pytest.approx(20500.0)
    assert figures.professional_tax == 200
    assert figures.total_deductions == 200
    assert figures.net_salary == pytest.approx(20300.0)
    assert figures.days_absent == 1.5


def test_compute_absent_days_floor_at_zero():
    figures = FixedSalaryCalculator(professional_tax=0).compute(monthly_salary=3000, present_days=31, working_days=31)

    assert figures.days_absent == 0
    assert figures.net_salary == pytest.approx(3100.0)
