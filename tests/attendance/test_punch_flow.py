from datetime import timedelta

import pytest

from src.hr_portal.hr_portal.core.enums import AttendanceStatus, Role
from src.hr_portal.hr_portal.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from tests.fakes import actor_for, make_container, make_employee


@pytest.fixture
def container():
    return make_container(
        [
            make_employee(1, role=Role.MANAGER),
            make_employee(2, reporting_head_id=1),
            make_employee(3),
        ]
    )


def test_short_day_is_half_day(container, fixed_now):
    svc = container.attendance_service
    svc.punch_in(2, ip="10.0.0.1", now=fixed_now)

    record = svc.punch_out(2, ip="10.0.0.2", now=fixed_now + timedelta(hours=4))

    assert record.status == AttendanceStatus.HALF_DAY
    assert record.total_hours == 4.0
    assert record.note == "Worked 4.00h (< 6h)"
    assert record.punch_in_ip == "10.0.0.1"
    assert record.punch_out_ip == "10.0.0.2"


def test_breaks_accumulate_and_are_excluded(container, fixed_now):
    svc = container.attendance_service
    svc.punch_in(2, now=fixed_now)
    svc.start_break(2, now=fixed_now + timedelta(hours=3))
    svc.end_break(2, now=fixed_now + timedelta(hours=3, minutes=30))
    svc.start_break(2, now=fixed_now + timedelta(hours=5))
    record = svc.end_break(2, now=fixed_now + timedelta(hours=5, minutes=15))
    assert record.break_hours == 0.75

    record = svc.punch_out(2, now=fixed_now + timedelta(hours=9))

    assert record.total_hours == 8.25
    assert record.status == AttendanceStatus.PRESENT
    assert record.note is None


def test_punch_out_closes_running_break(container, fixed_now):
    svc = container.attendance_service
    svc.punch_in(2, now=fixed_now)
    svc.start_break(2, now=fixed_now + timedelta(hours=7))

    record = svc.punch_out(2, now=fixed_now + timedelta(hours=8))

    assert record.break_end == fixed_now + timedelta(hours=8)
    assert record.break_hours == 1.0
    assert record.total_hours == 7.0


def test_punch_out_stores_idle_from_heartbeats(container, fixed_now):
    container.attendance_service.punch_in(2, now=fixed_now)
    for minute in (0, 20):
        container.heartbeat_service.record_heartbeat(2, now=fixed_now + timedelta(minutes=minute))

    record = container.attendance_service.punch_out(2, now=fixed_now + timedelta(hours=7))

    assert record.idle_hours == 0.25


def test_double_punch_in_is_rejected(container, fixed_now):
    container.attendance_service.punch_in(2, now=fixed_now)

    with pytest.raises(ValidationError, match="Already punched in for today"):
        container.attendance_service.punch_in(2, now=fixed_now + timedelta(minutes=5))


def test_punch_out_without_punch_in(container, fixed_now):
    with pytest.raises(ValidationError, match="Please punch in first"):
        container.attendance_service.punch_out(2, now=fixed_now)


def test_break_rules(container, fixed_now):
    svc = container.attendance_service
    with pytest.raises(ValidationError):
        svc.start_break(2, now=fixed_now)

    svc.punch_in(2, now=fixed_now)
    with pytest.raises(ValidationError, match="No break started"):
        svc.end_break(2, now=fixed_now)

    svc.start_break(2, now=fixed_now + timedelta(hours=1))
    with pytest.raises(ValidationError, match="Break already started"):
        svc.start_break(2, now=fixed_now + timedelta(hours=1, minutes=1))

    svc.punch_out(2, now=fixed_now + timedelta(hours=2))
    with pytest.raises(ValidationError, match="Already punched out"):
        svc.start_break(2, now=fixed_now + timedelta(hours=3))


def test_force_punch_out(container, fixed_now):
    svc = container.attendance_service
    with pytest.raises(NotFoundError, match="No active session found"):
        svc.force_punch_out(2, now=fixed_now)

    svc.punch_in(2, now=fixed_now)
    record = svc.force_punch_out(2, now=fixed_now + timedelta(hours=6))

    assert record.punch_out_ip == "admin-force"
    assert record.status == AttendanceStatus.PRESENT


def test_open_sessions_lists_only_unfinished(container, fixed_now):
    svc = container.attendance_service
    svc.punch_in(2, now=fixed_now)
    svc.punch_in(3, now=fixed_now)
    svc.punch_out(3, now=fixed_now + timedelta(hours=1))

    sessions = svc.open_sessions(now=fixed_now + timedelta(hours=2))

    assert [s.employee_id for s in sessions] == [2]


def test_manager_scoping_on_records(container, fixed_now):
    svc = container.attendance_service
    for employee_id in (1, 2, 3):
        svc.punch_in(employee_id, now=fixed_now)
    manager = actor_for(container.employees_repo.get_by_id(1))

    visible = svc.list_records(manager, today=fixed_now.date())

    assert sorted(r.employee_id for r in visible) == [1, 2]
    with pytest.raises(AuthorizationError):
        svc.list_records(manager, employee_id=3, today=fixed_now.date())


def test_manual_record_rejects_duplicates(container, fixed_now):
    manager = actor_for(container.employees_repo.get_by_id(1))
    day = fixed_now.date() - timedelta(days=1)
    container.attendance_service.create_manual(
        manager,
        employee_id=2,
        work_date=day,
        status=AttendanceStatus.PRESENT,
        punch_in=fixed_now - timedelta(days=1),
        punch_out=fixed_now - timedelta(days=1) + timedelta(hours=8),
    )

    with pytest.raises(ValidationError, match="already exists"):
        container.attendance_service.create_manual(
            manager, employee_id=2, work_date=day, status=AttendanceStatus.ABSENT
        )

    record = container.attendance_repo.get_for_employee_and_date(2, day)
    assert record.total_hours == 8.0
