from datetime import timedelta

import pytest

from src.hr_portal.hr_portal.core.exceptions import ValidationError
from tests.fakes import make_container, make_employee


@pytest.fixture
def container(fixed_now):
    c = make_container([make_employee(1, name="Alice"), make_employee(2, name="Bob")])
    for employee_id in (1, 2):
        c.attendance_service.punch_in(employee_id, now=fixed_now)
    return c


def _bot(container, employee_id, when, ip="10.0.0.9"):
    container.heartbeat_service.record_heartbeat(
        employee_id,
        suspicious=True,
        pattern_type="MOUSE_JIGGLER",
        pattern_details="perfectly periodic movement",
        ip=ip,
        now=when,
    )


def test_groups_by_employee_and_day(container, fixed_now):
    _bot(container, 1, fixed_now + timedelta(minutes=1))
    _bot(container, 2, fixed_now + timedelta(minutes=2), ip="10.0.0.1")
    _bot(container, 2, fixed_now + timedelta(minutes=4), ip="10.0.0.2")
    _bot(container, 2, fixed_now + timedelta(minutes=6), ip="10.0.0.2")
    container.heartbeat_service.record_heartbeat(1, now=fixed_now + timedelta(minutes=7))

    report = container.suspicious_activity_service.build_report(now=fixed_now + timedelta(hours=1))

    assert len(report.logs) == 4
    first, second = report.summary
    assert first["employee"]["name"] == "Bob"
    assert first["count"] == 3
    assert first["uniqueIps"] == ["10.0.0.2", "10.0.0.1"]
    assert first["patterns"][0]["type"] == "MOUSE_JIGGLER"
    assert first["date"] == fixed_now.date().isoformat()
    assert second["count"] == 1


def test_filters_by_employee(container, fixed_now):
    _bot(container, 1, fixed_now + timedelta(minutes=1))
    _bot(container, 2, fixed_now + timedelta(minutes=2))

    report = container.suspicious_activity_service.build_report(employee_id=1, now=fixed_now + timedelta(hours=1))

    assert [row.employee_id for row in report.logs] == [1]


def test_window_excludes_old_logs(container, fixed_now):
    _bot(container, 1, fixed_now + timedelta(minutes=1))

    report = container.suspicious_activity_service.build_report(now=fixed_now + timedelta(days=31))

    assert report.summary == []


def test_invalid_window(container, fixed_now):
    with pytest.raises(ValidationError):
        container.suspicious_activity_service.build_report(start=fixed_now, end=fixed_now - timedelta(days=1))
