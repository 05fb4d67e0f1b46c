from __future__ import annotations

from datetime import date, datetime

import pytest

from src.hr_portal.hr_portal.core.enums import AttendanceStatus, Role
from src.hr_portal.hr_portal.core.exceptions import ValidationError
from src.hr_portal.hr_portal.payroll.report_service import PayrollReportService
from tests.fakes import actor_for, make_container, make_employee


@pytest.fixture
def container():
    c = make_container(
        [
            make_employee(1, role=Role.MANAGER, name="Manager"),
            make_employee(2, reporting_head_id=1, name="Report"),
            make_employee(3, name="Outsider"),
        ]
    )
    repo = c.attendance_repo
    for employee_id in (1, 2, 3):
        repo.add(
            employee_id=employee_id,
            work_date=date(2026, 1, 30),
            status=AttendanceStatus.PRESENT,
            punch_in=datetime(2026, 1, 30, 9, 0),
            punch_out=datetime(2026, 1, 30, 18, 0),
            total_hours=8.0,
            idle_hours=0.5,
            break_hours=1.0,
        )
    repo.add(
        employee_id=2,
        work_date=date(2026, 1, 31),
        status=AttendanceStatus.HALF_DAY,
        punch_in=datetime(2026, 1, 31, 9, 0),
        punch_out=datetime(2026, 1, 31, 13, 0),
        total_hours=4.0,
        idle_hours=0.25,
    )
    return c


def test_report_totals_subtract_idle(container):
    manager = actor_for(container.employees_repo.get_by_id(1))

    report = container.payroll_report_service.build_attendance_report(
        manager, start=date(2026, 1, 30), end=date(2026, 1, 31)
    )

    by_employee = {s["employeeId"]: s for s in report.summary}
    assert set(by_employee) == {1, 2}
    assert by_employee[2]["days"] == 2
    assert by_employee[2]["workedHours"] == 11.25
    assert by_employee[2]["idleHours"] == 0.75
    assert report.summary[0]["employeeId"] == 2

    row = next(r for r in report.rows if r["employeeId"] == 1)
    assert row["punchIn"] == "09:00"
    assert row["workedHours"] == 7.5


def test_report_rejects_inverted_range(container):
    svc = PayrollReportService(container.attendance_repo, container.team_access)
    admin = actor_for(make_employee(9, role=Role.ADMIN))

    with pytest.raises(ValidationError):
        svc.build_attendance_report(admin, start=date(2026, 2, 1), end=date(2026, 1, 1))
