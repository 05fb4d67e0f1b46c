from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.hr_portal.hr_portal.core.enums import AttendanceStatus, Role
from src.hr_portal.hr_portal.main import create_app
from tests.fakes import make_container, make_employee

CRON = {"Authorization": "Bearer test-cron-secret"}


@pytest.fixture
def container():
    return make_container(
        [
            make_employee(1, role=Role.ADMIN, name="Admin"),
            make_employee(2, role=Role.MANAGER, name="Manager"),
            make_employee(3, reporting_head_id=2, name="Worker"),
        ]
    )


@pytest.fixture
def client(container):
    app = create_app("config.testing", container=container)
    return app.test_client()


def login_as(client, container, employee_id):
    employee = container.employees_repo.get_by_id(employee_id)
    with client.session_transaction() as sess:
        sess["employee_id"] = employee.employee_id
        sess["name"] = employee.full_name
        sess["role"] = employee.role.value
        sess["dept_id"] = employee.dept_id


def test_health(client):
    resp = client.get("/api/health")

    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"


def test_login_and_me(client):
    resp = client.post("/api/auth/login", json={"email": "user3@example.com", "password": "secret123"})
    assert resp.status_code == 200
    assert resp.get_json()["user"]["role"] == "EMPLOYEE"

    me = client.get("/api/auth/me")
    assert me.get_json()["user"]["email"] == "user3@example.com"


def test_login_failure_is_401(client):
    resp = client.post("/api/auth/login", json={"email": "user3@example.com", "password": "nope"})

    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "Invalid email or password"}


def test_requires_session(client):
    assert client.get("/api/attendance").status_code == 401
    assert client.post("/api/attendance/heartbeat", json={}).status_code == 401


def test_heartbeat_without_punch_in(client, container):
    login_as(client, container, 3)

    resp = client.post("/api/attendance/heartbeat", json={"active": True})

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "No attendance record for today"


def test_punch_in_then_heartbeats(client, container):
    login_as(client, container, 3)

    punched = client.post("/api/attendance", json={"action": "punch-in"}, headers={"X-Forwarded-For": "1.2.3.4, 5.6.7.8"})
    assert punched.status_code == 200
    assert punched.get_json()["attendance"]["punchInIp"] == "1.2.3.4"

    beat = client.post("/api/attendance/heartbeat", json={"active": True}).get_json()
    assert beat["success"] is True
    assert beat["effectiveActive"] is True
    assert beat["botDetected"] is False

    bot = client.post(
        "/api/attendance/heartbeat",
        json={"active": True, "suspicious": True, "patternType": "AUTO_CLICKER", "patternDetails": "fixed interval"},
    ).get_json()
    assert bot["botDetected"] is True
    assert bot["effectiveActive"] is False

    again = client.post("/api/attendance", json={"action": "punch-in"})
    assert again.status_code == 400
    assert again.get_json()["message"] == "Already punched in for today"


def test_invalid_action(client, container):
    login_as(client, container, 3)

    resp = client.post("/api/attendance", json={"action": "teleport"})

    assert resp.status_code == 400


def test_auto_heartbeat_requires_bearer_secret(client):
    assert client.post("/api/attendance/auto-heartbeat").status_code == 401
    assert client.post("/api/attendance/auto-heartbeat", headers={"Authorization": "Bearer wrong"}).status_code == 401

    resp = client.post("/api/attendance/auto-heartbeat", headers=CRON)
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["processed"] == 0
    assert body["heartbeatsCreated"] == 0


def test_auto_heartbeat_info_is_public(client):
    resp = client.get("/api/attendance/auto-heartbeat")

    assert resp.status_code == 200
    assert "Bearer" in resp.get_json()["usage"]


def test_auto_heartbeat_skips_fresh_sessions(client, container):
    login_as(client, container, 3)
    client.post("/api/attendance", json={"action": "punch-in"})

    resp = client.post("/api/attendance/auto-heartbeat", headers=CRON)

    # punched in moments ago
    assert resp.status_code == 200
    assert resp.get_json()["results"][0]["action"] == "no_action_needed"


def test_heartbeat_rejects_non_boolean_flags(client, container):
    login_as(client, container, 3)
    client.post("/api/attendance", json={"action": "punch-in"})

    stringly = client.post("/api/attendance/heartbeat", json={"active": "false"})
    assert stringly.status_code == 400
    assert stringly.get_json()["message"] == "active must be true or false"

    nulled = client.post("/api/attendance/heartbeat", json={"active": True, "suspicious": None})
    assert nulled.status_code == 400
    assert nulled.get_json()["message"] == "suspicious must be true or false"
    assert container.activity_repo.logs == []


def test_auto_heartbeat_failure_is_500_without_details(client, container):
    container.attendance_repo.add(
        employee_id=3,
        work_date=date.today(),
        status=AttendanceStatus.PRESENT,
        punch_in=datetime.now() - timedelta(minutes=10),
    )
    container.activity_repo.fail_on_add = True

    resp = client.post("/api/attendance/auto-heartbeat", headers=CRON)

    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "message": "Internal server error"}
    assert container.activity_repo.logs == []


def test_daily_attendance_cron(client, container):
    assert client.post("/api/cron/daily-attendance", json={"date": "2026-03-06"}).status_code == 401

    resp = client.post("/api/cron/daily-attendance", json={"date": "2026-03-06"}, headers=CRON)

    body = resp.get_json()
    assert body["markedAbsent"] == 3
    assert body["cascaded"] == 3
    record = container.attendance_repo.get_for_employee_and_date(3, date(2026, 3, 7))
    assert record.status == AttendanceStatus.ABSENT


def test_daily_attendance_cron_rejects_bad_date(client):
    resp = client.post("/api/cron/daily-attendance", json={"date": "06/03/2026"}, headers=CRON)

    assert resp.status_code == 400
    assert resp.get_json()["message"].startswith("Invalid date")


def test_suspicious_activity_is_admin_only(client, container):
    login_as(client, container, 2)
    assert client.get("/api/admin/suspicious-activity").status_code == 401

    login_as(client, container, 1)
    resp = client.get("/api/admin/suspicious-activity")
    assert resp.status_code == 200
    assert resp.get_json()["totalLogs"] == 0


def test_force_punchout(client, container):
    login_as(client, container, 3)
    client.post("/api/attendance", json={"action": "punch-in"})
    assert client.post("/api/admin/force-punchout", json={"employeeId": 3}).status_code == 403

    login_as(client, container, 1)
    sessions = client.get("/api/admin/force-punchout").get_json()
    assert sessions["count"] == 1

    resp = client.post("/api/admin/force-punchout", json={"employeeId": 3})
    assert resp.status_code == 200
    assert resp.get_json()["attendance"]["punchOutIp"] == "admin-force"

    missing = client.post("/api/admin/force-punchout", json={"employeeId": 2})
    assert missing.status_code == 404


def test_leave_apply_and_decide(client, container):
    login_as(client, container, 3)
    created = client.post(
        "/api/leaves",
        json={"leaveType": "SICK", "startDate": "2026-01-05", "endDate": "2026-01-06", "reason": "flu"},
    )
    assert created.status_code == 201
    request_id = created.get_json()["id"]

    login_as(client, container, 2)
    decided = client.put("/api/leaves", json={"id": request_id, "status": "APPROVED"})
    assert decided.status_code == 200
    assert decided.get_json()["leave"]["status"] == "APPROVED"


def test_employee_cannot_create_manual_records(client, container):
    login_as(client, container, 3)

    resp = client.post("/api/attendance", json={"employeeId": 3, "date": "2026-03-01", "status": "PRESENT"})

    assert resp.status_code == 403


def test_holiday_optional_flag_must_be_boolean(client, container):
    login_as(client, container, 1)

    resp = client.post("/api/holidays", json={"name": "Founders Day", "date": "2026-05-04", "isOptional": "no"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "isOptional must be true or false"

    created = client.post("/api/holidays", json={"name": "Founders Day", "date": "2026-05-04", "isOptional": True})
    assert created.status_code == 201
