from datetime import date

import pytest

from src.hr_portal.hr_portal.core.enums import AttendanceStatus, LeaveStatus, Role
from src.hr_portal.hr_portal.core.exceptions import AuthorizationError, ValidationError
from tests.fakes import actor_for, make_container, make_employee

TODAY = date(2026, 3, 4)


@pytest.fixture
def container():
    return make_container(
        [
            make_employee(1, role=Role.ADMIN),
            make_employee(2, role=Role.MANAGER),
            make_employee(3, reporting_head_id=2),
            make_employee(4),
        ]
    )


def actor(container, employee_id):
    return actor_for(container.employees_repo.get_by_id(employee_id))


def apply(container, employee_id, start, end, /, leave_type="CASUAL", **kwargs):
    return container.leave_service.apply(
        actor(container, employee_id),
        leave_type=leave_type,
        start_date=start,
        end_date=end,
        reason="family event",
        today=TODAY,
        **kwargs,
    )


def test_apply_validations(container):
    svc = container.leave_service
    me = actor(container, 3)

    with pytest.raises(ValidationError, match="Missing required fields"):
        svc.apply(me, leave_type="CASUAL", start_date=TODAY, end_date=TODAY, reason=" ", today=TODAY)
    with pytest.raises(ValidationError, match="Invalid leave type"):
        apply(container, 3, TODAY, TODAY, leave_type="SABBATICAL")
    with pytest.raises(ValidationError, match="Invalid date range"):
        apply(container, 3, date(2026, 3, 10), date(2026, 3, 9))
    with pytest.raises(ValidationError, match="Only sick leaves"):
        apply(container, 3, date(2026, 3, 2), date(2026, 3, 2))


def test_sick_leave_may_be_backdated(container):
    request_id = apply(container, 3, date(2026, 3, 2), date(2026, 3, 3), leave_type="sick")

    leave = container.leaves_repo.get_by_id(request_id)
    assert leave.days == 2
    assert leave.status == LeaveStatus.PENDING


def test_overlapping_request_rejected(container):
    apply(container, 3, date(2026, 3, 10), date(2026, 3, 12))

    with pytest.raises(ValidationError, match="already have a leave request"):
        apply(container, 3, date(2026, 3, 12), date(2026, 3, 13))


def test_employee_cannot_apply_for_someone_else(container):
    request_id = apply(container, 3, date(2026, 3, 10), date(2026, 3, 10), employee_id=4)

    assert container.leaves_repo.get_by_id(request_id).employee_id == 3


def test_approval_marks_attendance_as_leave(container):
    container.attendance_repo.add(employee_id=3, work_date=date(2026, 3, 10), status=AttendanceStatus.ABSENT)
    request_id = apply(container, 3, date(2026, 3, 10), date(2026, 3, 11))

    leave = container.leave_service.decide(actor(container, 2), request_id=request_id, status=LeaveStatus.APPROVED)

    assert leave.status == LeaveStatus.APPROVED
    assert leave.decided_by == 2
    for day in (date(2026, 3, 10), date(2026, 3, 11)):
        assert container.attendance_repo.get_for_employee_and_date(3, day).status == AttendanceStatus.LEAVE


def test_cancelling_approved_leave_reverts_days(container):
    request_id = apply(container, 3, date(2026, 3, 13), date(2026, 3, 14))
    container.leave_service.decide(actor(container, 1), request_id=request_id, status=LeaveStatus.APPROVED)

    container.leave_service.decide(actor(container, 3), request_id=request_id, status=LeaveStatus.CANCELLED)

    assert container.attendance_repo.get_for_employee_and_date(3, date(2026, 3, 13)).status == AttendanceStatus.ABSENT
    assert container.attendance_repo.get_for_employee_and_date(3, date(2026, 3, 14)).status == AttendanceStatus.WEEKEND


def test_decision_permissions(container):
    request_id = apply(container, 4, date(2026, 3, 10), date(2026, 3, 10))
    svc = container.leave_service

    with pytest.raises(AuthorizationError):
        svc.decide(actor(container, 4), request_id=request_id, status=LeaveStatus.APPROVED)
    with pytest.raises(AuthorizationError, match="your team members"):
        svc.decide(actor(container, 2), request_id=request_id, status=LeaveStatus.REJECTED)
    with pytest.raises(AuthorizationError, match="your own leave"):
        svc.decide(actor(container, 3), request_id=request_id, status=LeaveStatus.CANCELLED)
    with pytest.raises(ValidationError, match="Invalid status"):
        svc.decide(actor(container, 1), request_id=request_id, status=LeaveStatus.PENDING)

    held = svc.decide(actor(container, 1), request_id=request_id, status=LeaveStatus.HOLD, admin_comment="need docs")
    assert held.status == LeaveStatus.HOLD
    assert held.admin_comment == "need docs"


def test_list_is_scoped_to_team(container):
    apply(container, 3, date(2026, 3, 10), date(2026, 3, 10))
    apply(container, 4, date(2026, 3, 10), date(2026, 3, 10))

    manager_view = container.leave_service.list_for(actor(container, 2))
    admin_view = container.leave_service.list_for(actor(container, 1))

    assert [lv.employee_id for lv in manager_view] == [3]
    assert len(admin_view) == 2
