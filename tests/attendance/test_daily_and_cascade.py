from datetime import date

import pytest

from src.hr_portal.hr_portal.attendance.cascade import CASCADE_NOTE, cascade_target
from src.hr_portal.hr_portal.core.enums import AttendanceStatus, Role
from src.hr_portal.hr_portal.holidays.model import Holiday
from tests.fakes import actor_for, make_container, make_employee

FRIDAY = date(2026, 3, 6)
SATURDAY = date(2026, 3, 7)
SUNDAY = date(2026, 3, 8)
MONDAY = date(2026, 3, 9)


@pytest.fixture
def container():
    return make_container(
        [
            make_employee(1, role=Role.ADMIN),
            make_employee(2),
            make_employee(3, joined=date(2026, 4, 1)),
        ],
        holidays=[Holiday(1, "Founders Day", date(2026, 3, 4))],
    )


def test_cascade_targets():
    assert cascade_target(FRIDAY) == SATURDAY
    assert cascade_target(MONDAY) == SUNDAY
    assert cascade_target(date(2026, 3, 4)) is None


def test_friday_absence_marks_saturday(container):
    container.attendance_repo.add(employee_id=1, work_date=FRIDAY, status=AttendanceStatus.PRESENT)

    report = container.daily_attendance_service.run(FRIDAY)

    assert report.processed == 2
    assert report.marked_absent == 1
    assert report.already_exists == 1
    assert report.cascaded == 1
    saturday = container.attendance_repo.get_for_employee_and_date(2, SATURDAY)
    assert saturday.status == AttendanceStatus.ABSENT
    assert saturday.note == CASCADE_NOTE
    assert container.attendance_repo.get_for_employee_and_date(3, FRIDAY) is None


def test_weekend_and_holiday_days(container):
    weekend = container.daily_attendance_service.run(SATURDAY)
    holiday = container.daily_attendance_service.run(date(2026, 3, 4))

    assert weekend.marked_weekend == 2
    assert holiday.marked_holiday == 2
    assert holiday.marked_absent == 0
    assert container.attendance_repo.get_for_employee_and_date(2, SATURDAY).status == AttendanceStatus.WEEKEND


def test_monday_absence_overrides_sunday_weekend(container):
    container.daily_attendance_service.run(SUNDAY)

    report = container.daily_attendance_service.run(MONDAY)

    assert report.cascaded == 2
    assert container.attendance_repo.get_for_employee_and_date(2, SUNDAY).status == AttendanceStatus.ABSENT


def test_cascade_only_overrides_unworked_days(container):
    container.attendance_repo.add(
        employee_id=2,
        work_date=SATURDAY,
        status=AttendanceStatus.PRESENT,
        punch_in=None,
    )
    container.attendance_repo.add(
        employee_id=1,
        work_date=SATURDAY,
        status=AttendanceStatus.LEAVE,
    )

    report = container.daily_attendance_service.run(FRIDAY)

    assert report.cascaded == 1
    assert container.attendance_repo.get_for_employee_and_date(2, SATURDAY).status == AttendanceStatus.ABSENT
    assert container.attendance_repo.get_for_employee_and_date(1, SATURDAY).status == AttendanceStatus.LEAVE


def test_one_failure_does_not_stop_the_run(container, monkeypatch):
    repo = container.attendance_repo
    original = repo.create_record

    def flaky(**kwargs):
        if kwargs["employee_id"] == 1:
            raise RuntimeError("lock wait timeout")
        return original(**kwargs)

    monkeypatch.setattr(repo, "create_record", flaky)

    report = container.daily_attendance_service.run(date(2026, 3, 5))

    assert report.errors == [{"employeeId": 1, "error": "lock wait timeout"}]
    assert report.marked_absent == 1
    assert report.as_dict()["markedAbsent"] == 1


def test_manual_absence_and_correction_cascade(container):
    admin = actor_for(container.employees_repo.get_by_id(1))
    svc = container.attendance_service

    svc.create_manual(admin, employee_id=2, work_date=FRIDAY, status=AttendanceStatus.ABSENT)
    assert container.attendance_repo.get_for_employee_and_date(2, SATURDAY).status == AttendanceStatus.ABSENT

    monday = svc.create_manual(admin, employee_id=1, work_date=MONDAY, status=AttendanceStatus.PRESENT)
    svc.update_record(admin, attendance_id=monday.attendance_id, status=AttendanceStatus.ABSENT)
    assert container.attendance_repo.get_for_employee_and_date(1, SUNDAY).status == AttendanceStatus.ABSENT
