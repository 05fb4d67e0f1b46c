from datetime import timedelta

import pytest

from src.hr_portal.hr_portal.core.enums import HeartbeatAction
from tests.fakes import make_container, make_employee


@pytest.fixture
def container():
    return make_container([make_employee(1, name="Recent"), make_employee(2, name="Stale")])


def test_only_stale_sessions_get_an_inactive_heartbeat(container, fixed_now):
    container.attendance_service.punch_in(1, now=fixed_now)
    container.attendance_service.punch_in(2, now=fixed_now)
    container.heartbeat_service.record_heartbeat(1, now=fixed_now + timedelta(minutes=8))
    container.heartbeat_service.record_heartbeat(2, now=fixed_now + timedelta(minutes=6))

    report = container.heartbeat_service.run_auto_heartbeat(now=fixed_now + timedelta(minutes=10))

    assert report.processed == 2
    assert report.heartbeats_created == 1
    by_name = {r.employee_name: r for r in report.results}
    assert by_name["Recent"].action == HeartbeatAction.SKIPPED
    assert by_name["Recent"].minutes_since == 2
    assert by_name["Stale"].action == HeartbeatAction.CREATED
    assert by_name["Stale"].minutes_since == 4

    stale_logs = container.activity_repo.list_for_attendance(2)
    assert len(stale_logs) == 2
    assert stale_logs[-1].active is False
    assert len(container.activity_repo.list_for_attendance(1)) == 1


def test_backfill_recomputes_idle(container, fixed_now):
    container.attendance_service.punch_in(2, now=fixed_now)
    container.heartbeat_service.record_heartbeat(2, now=fixed_now)

    container.heartbeat_service.run_auto_heartbeat(now=fixed_now + timedelta(minutes=30))

    record = container.attendance_repo.get_for_employee_and_date(2, fixed_now.date())
    # 30 minute gap, 5 of them within the threshold
    assert record.idle_hours == round(25 / 60, 2)


def test_session_without_heartbeats_uses_punch_in(container, fixed_now):
    container.attendance_service.punch_in(1, now=fixed_now)

    report = container.heartbeat_service.run_auto_heartbeat(now=fixed_now + timedelta(minutes=3, seconds=30))

    assert report.results[0].last_heartbeat == fixed_now
    assert report.results[0].action == HeartbeatAction.CREATED


def test_closed_sessions_are_ignored(container, fixed_now):
    container.attendance_service.punch_in(1, now=fixed_now)
    container.attendance_service.punch_out(1, now=fixed_now + timedelta(hours=7))

    report = container.heartbeat_service.run_auto_heartbeat(now=fixed_now + timedelta(hours=8))

    assert report.processed == 0
    assert report.heartbeats_created == 0


def test_failure_aborts_the_sweep(container, fixed_now):
    container.attendance_service.punch_in(1, now=fixed_now)
    container.activity_repo.fail_on_add = True

    with pytest.raises(RuntimeError):
        container.heartbeat_service.run_auto_heartbeat(now=fixed_now + timedelta(minutes=5))
