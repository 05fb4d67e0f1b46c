from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import is_weekend, iter_days, now_local
from ..core.enums import AttendanceStatus, LeaveStatus, LeaveType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import SessionUser
from ..users.service import TeamAccess
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

_BLOCKING_STATUSES = (LeaveStatus.PENDING, LeaveStatus.APPROVED)
_MANAGER_DECISIONS = (LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.HOLD)


class LeaveService:
    """Use cases: apply for leave, decide on it, and keep attendance in sync."""

    def __init__(self, leaves: LeaveRepository, attendance: AttendanceRepository, access: TeamAccess):
        self._leaves = leaves
        self._attendance = attendance
        self._access = access

    def apply(
        self,
        actor: SessionUser,
        *,
        leave_type: Optional[str],
        start_date: Optional[date],
        end_date: Optional[date],
        reason: Optional[str],
        employee_id: Optional[int] = None,
        today: Optional[date] = None,
    ) -> int:
        if not leave_type or not start_date or not end_date or not (reason or "").strip():
            raise ValidationError("Missing required fields")
        try:
            kind = LeaveType(str(leave_type).upper())
        except ValueError:
            raise ValidationError("Invalid leave type")

        days = (end_date - start_date).days + 1
        if days <= 0:
            raise ValidationError("Invalid date range")

        today = today or now_local().date()
        if start_date < today and kind != LeaveType.SICK:
            raise ValidationError("Only sick leaves can be applied for past dates")

        target = self._access.resolve_target(actor, employee_id)
        if self._leaves.find_overlapping(
            employee_id=target,
            start_date=start_date,
            end_date=end_date,
            statuses=_BLOCKING_STATUSES,
        ):
            raise ValidationError("You already have a leave request for these dates")

        request_id = self._leaves.create(
            employee_id=target,
            leave_type=kind,
            start_date=start_date,
            end_date=end_date,
            days=days,
            reason=reason.strip(),
        )
        logger.info("[leaves] employee %s applied %s leave %s..%s", target, kind.value, start_date, end_date)
        return request_id

    def decide(
        self,
        actor: SessionUser,
        *,
        request_id: int,
        status: LeaveStatus,
        admin_comment: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        leave = self._leaves.get_by_id(request_id)
        if not leave:
            raise NotFoundError("Leave not found")

        if status == LeaveStatus.CANCELLED:
            if actor.role == Role.EMPLOYEE and leave.employee_id != actor.employee_id:
                raise AuthorizationError("You can only cancel your own leave")
        elif status in _MANAGER_DECISIONS:
            if actor.role == Role.EMPLOYEE:
                raise AuthorizationError("Forbidden")
            if (
                actor.role == Role.MANAGER
                and leave.employee_id != actor.employee_id
                and not self._access.is_direct_report(actor.employee_id, leave.employee_id)
            ):
                raise AuthorizationError("You can only approve leaves for your team members")
        else:
            raise ValidationError("Invalid status")

        self._leaves.update_decision(
            request_id=request_id,
            status=status,
            decided_by=actor.employee_id,
            decided_at=now or now_local(),
            admin_comment=admin_comment,
        )

        if status == LeaveStatus.APPROVED:
            self._mark_leave_days(leave)
        elif status in (LeaveStatus.REJECTED, LeaveStatus.CANCELLED) and leave.status == LeaveStatus.APPROVED:
            self._revert_leave_days(leave)

        logger.info(
            "[leaves] request %s %s -> %s by %s",
            request_id,
            leave.status.value,
            status.value,
            actor.employee_id,
        )
        updated = self._leaves.get_by_id(request_id)
        if not updated:
            raise NotFoundError("Leave not found")
        return updated

    def list_for(self, actor: SessionUser, *, employee_id: Optional[int] = None, status: Optional[LeaveStatus] = None) -> Sequence[LeaveRequest]:
        if employee_id is not None:
            self._access.ensure_can_view(actor, employee_id)
            employee_ids: Optional[list[int]] = [employee_id]
        else:
            employee_ids = self._access.visible_ids(actor)
        return self._leaves.list_requests(employee_ids=employee_ids, status=status)

    def _existing_by_day(self, leave: LeaveRequest) -> dict:
        records = self._attendance.list_records(
            start_date=leave.start_date,
            end_date=leave.end_date,
            employee_ids=[leave.employee_id],
        )
        return {r.work_date: r for r in records}

    def _mark_leave_days(self, leave: LeaveRequest) -> None:
        existing = self._existing_by_day(leave)
        for day in iter_days(leave.start_date, leave.end_date):
            record = existing.get(day)
            if record:
                self._attendance.update_status(record.attendance_id, AttendanceStatus.LEAVE)
            else:
                self._attendance.create_record(
                    employee_id=leave.employee_id,
                    work_date=day,
                    status=AttendanceStatus.LEAVE,
                    note=f"{leave.leave_type.value} leave",
                )

    def _revert_leave_days(self, leave: LeaveRequest) -> None:
        for day, record in self._existing_by_day(leave).items():
            if record.status != AttendanceStatus.LEAVE:
                continue
            status = AttendanceStatus.WEEKEND if is_weekend(day) else AttendanceStatus.ABSENT
            self._attendance.update_status(record.attendance_id, status)
