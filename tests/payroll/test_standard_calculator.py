from datetime import date, datetime

from src.hr_portal.hr_portal.attendance.model import AttendanceReportRow
from src.hr_portal.hr_portal.core.enums import AttendanceStatus
from src.hr_portal.hr_portal.payroll.calculator.standard_calculator import StandardHoursCalculator


def _row(**overrides):
    fields = dict(
        employee_id=1,
        full_name="A",
        employee_code="EMP001",
        dept_name=None,
        work_date=date(2026, 1, 5),
        punch_in=datetime(2026, 1, 5, 9, 0),
        punch_out=datetime(2026, 1, 5, 18, 0),
        status=AttendanceStatus.PRESENT,
        total_hours=8.0,
        idle_hours=0.75,
        break_hours=1.0,
    )
    fields.update(overrides)
    return AttendanceReportRow(**fields)


def test_standard_calculator_subtracts_idle():
    assert StandardHoursCalculator().worked_hours(_row()) == 7.25


def test_standard_calculator_never_negative():
    assert StandardHoursCalculator().worked_hours(_row(total_hours=0.5, idle_hours=2.0)) == 0.0


def test_open_session_counts_nothing():
    assert StandardHoursCalculator().worked_hours(_row(punch_out=None)) == 0.0
