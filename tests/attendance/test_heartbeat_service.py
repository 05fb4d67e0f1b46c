from datetime import timedelta

import pytest

from src.hr_portal.hr_portal.core.enums import AttendanceStatus
from src.hr_portal.hr_portal.core.exceptions import ValidationError
from tests.fakes import make_container, make_employee


@pytest.fixture
def container():
    return make_container([make_employee(1)])


def test_heartbeat_without_record_is_rejected(container, fixed_now):
    with pytest.raises(ValidationError, match="No attendance record for today"):
        container.heartbeat_service.record_heartbeat(1, now=fixed_now)


def test_heartbeat_on_record_without_punch_in(container, fixed_now):
    container.attendance_repo.create_record(employee_id=1, work_date=fixed_now.date(), status=AttendanceStatus.LEAVE)

    with pytest.raises(ValidationError, match="Not punched in yet"):
        container.heartbeat_service.record_heartbeat(1, now=fixed_now)


def test_heartbeat_after_punch_out_is_rejected(container, fixed_now):
    container.attendance_service.punch_in(1, now=fixed_now)
    container.attendance_service.punch_out(1, now=fixed_now + timedelta(hours=8))

    with pytest.raises(ValidationError, match="Already punched out"):
        container.heartbeat_service.record_heartbeat(1, now=fixed_now + timedelta(hours=8, minutes=1))


def test_heartbeats_accumulate_idle_on_record(container, fixed_now):
    container.attendance_service.punch_in(1, now=fixed_now)

    result = None
    for minute in (0, 3, 9, 12, 42):
        result = container.heartbeat_service.record_heartbeat(1, now=fixed_now + timedelta(minutes=minute))

    # 1 minute from the 6 minute gap, 25 from the 30 minute gap
    assert result.idle_hours == round(26 / 60, 2)
    assert result.last_heartbeat == fixed_now + timedelta(minutes=42)
    record = container.attendance_repo.get_for_employee_and_date(1, fixed_now.date())
    assert record.idle_hours == result.idle_hours


def test_suspicious_heartbeat_is_never_effectively_active(container, fixed_now):
    container.attendance_service.punch_in(1, now=fixed_now)
    container.heartbeat_service.record_heartbeat(1, now=fixed_now)

    result = container.heartbeat_service.record_heartbeat(
        1,
        active=True,
        suspicious=True,
        pattern_type="AUTO_CLICKER",
        pattern_details="identical click interval",
        now=fixed_now + timedelta(minutes=2),
    )

    assert result.bot_detected is True
    assert result.effective_active is False
    assert result.idle_hours == round(2 / 60, 2)

    stored = container.activity_repo.list_for_attendance(1)[-1]
    assert stored.active is False
    assert stored.suspicious is True
    assert stored.pattern_type == "AUTO_CLICKER"


def test_plain_heartbeat_is_effectively_active(container, fixed_now):
    container.attendance_service.punch_in(1, now=fixed_now)

    result = container.heartbeat_service.record_heartbeat(1, ip="10.0.0.5", user_agent="pytest", now=fixed_now)

    assert result.effective_active is True
    assert result.bot_detected is False
    assert result.idle_hours == 0
    assert container.activity_repo.list_for_attendance(1)[0].ip_address == "10.0.0.5"
