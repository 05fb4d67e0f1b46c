from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import hours_between, now_local
from ..core.constants import DEFAULT_ATTENDANCE_DAYS, IDLE_THRESHOLD_MINUTES
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import SessionUser
from ..users.repository import EmployeeRepository
from ..users.service import TeamAccess
from .activity_repository import ActivityLogRepository
from .cascade import WeekendCascade
from .factory import AttendanceStrategyFactory
from .idle import idle_hours
from .model import AttendanceRecord, OpenSession
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Punch in/out, breaks and manual corrections of attendance records."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        activity: ActivityLogRepository,
        employees: EmployeeRepository,
        access: TeamAccess,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        cascade: WeekendCascade | None = None,
        idle_threshold_minutes: float = IDLE_THRESHOLD_MINUTES,
    ):
        self._attendance = attendance
        self._activity = activity
        self._employees = employees
        self._access = access
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._cascade = cascade or WeekendCascade(attendance)
        self._idle_threshold = float(idle_threshold_minutes)

    def punch_in(self, employee_id: int, *, ip: Optional[str] = None, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")

        existing = self._attendance.get_for_employee_and_date(employee_id, today)
        if existing and existing.punch_in:
            raise ValidationError("Already punched in for today")
        if existing:
            raise ValidationError("Attendance already recorded for today")

        attendance_id = self._attendance.create_record(
            employee_id=employee_id,
            work_date=today,
            status=AttendanceStatus.PRESENT,
            punch_in=now,
            punch_in_ip=ip,
        )
        logger.info("[attendance] employee %s punched in at %s", employee_id, now.isoformat())
        return self._reload(attendance_id)

    def punch_out(self, employee_id: int, *, ip: Optional[str] = None, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()

        record = self._attendance.get_for_employee_and_date(employee_id, now.date())
        if not record or not record.punch_in:
            raise ValidationError("No attendance record found for today. Please punch in first.")
        if record.punch_out is not None:
            raise ValidationError("Already punched out")

        return self._close_session(record, now=now, ip=ip)

    def force_punch_out(self, employee_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        """Admin override for a session the employee never closed."""

        now = now or now_local()

        record = self._attendance.get_for_employee_and_date(employee_id, now.date())
        if not record or not record.punch_in:
            raise NotFoundError("No active session found for this employee today")
        if record.punch_out is not None:
            raise ValidationError("Already punched out")

        closed = self._close_session(record, now=now, ip="admin-force")
        logger.warning("[attendance] forced punch-out for employee %s", employee_id)
        return closed

    def start_break(self, employee_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        record = self._require_open(employee_id, now.date())
        if record.on_break:
            raise ValidationError("Break already started")

        # A completed break is already folded into break_hours.
        self._attendance.update_break(
            attendance_id=record.attendance_id,
            break_start=now,
            break_end=None,
            break_hours=record.break_hours,
        )
        return self._reload(record.attendance_id)

    def end_break(self, employee_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()
        record = self._require_open(employee_id, now.date())
        if not record.break_start:
            raise ValidationError("No break started")
        if record.break_end is not None:
            raise ValidationError("Break already ended")

        break_hours = record.break_hours + hours_between(record.break_start, now)
        self._attendance.update_break(
            attendance_id=record.attendance_id,
            break_start=record.break_start,
            break_end=now,
            break_hours=round(break_hours, 2),
        )
        return self._reload(record.attendance_id)

    def open_sessions(self, *, now: datetime | None = None) -> Sequence[OpenSession]:
        now = now or now_local()
        return self._attendance.list_open_sessions(now.date())

    def get_for_day(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(employee_id, work_date)

    def create_manual(
        self,
        actor: SessionUser,
        *,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
        punch_in: Optional[datetime] = None,
        punch_out: Optional[datetime] = None,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        self._access.ensure_can_view(actor, employee_id)
        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")
        if self._attendance.get_for_employee_and_date(employee_id, work_date):
            raise ValidationError("Attendance record already exists for this date")
        if punch_in and punch_out and punch_out < punch_in:
            raise ValidationError("Punch out must be after punch in")

        total = round(hours_between(punch_in, punch_out), 2) if punch_in and punch_out else 0.0
        attendance_id = self._attendance.create_record(
            employee_id=employee_id,
            work_date=work_date,
            status=status,
            punch_in=punch_in,
            punch_out=punch_out,
            total_hours=total,
            note=note,
        )
        if status == AttendanceStatus.ABSENT:
            self._cascade.apply(employee_id, work_date)

        logger.info(
            "[attendance] manual %s record for employee %s on %s by %s",
            status.value,
            employee_id,
            work_date,
            actor.employee_id,
        )
        return self._reload(attendance_id)

    def update_record(
        self,
        actor: SessionUser,
        *,
        attendance_id: int,
        status: Optional[AttendanceStatus] = None,
        punch_in: Optional[datetime] = None,
        punch_out: Optional[datetime] = None,
        total_hours: Optional[float] = None,
        idle_hours: Optional[float] = None,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        self._access.ensure_can_view(actor, record.employee_id)

        new_status = status or record.status
        new_in = punch_in or record.punch_in
        new_out = punch_out or record.punch_out
        if new_in and new_out and new_out < new_in:
            raise ValidationError("Punch out must be after punch in")

        if total_hours is None:
            if (punch_in or punch_out) and new_in and new_out:
                total_hours = round(max(hours_between(new_in, new_out) - record.break_hours, 0.0), 2)
            else:
                total_hours = record.total_hours

        self._attendance.admin_update_record(
            attendance_id=attendance_id,
            status=new_status,
            punch_in=new_in,
            punch_out=new_out,
            total_hours=float(total_hours),
            idle_hours=float(record.idle_hours if idle_hours is None else idle_hours),
            note=note if note is not None else record.note,
        )

        if new_status == AttendanceStatus.ABSENT and record.status != AttendanceStatus.ABSENT:
            self._cascade.apply(record.employee_id, record.work_date)

        return self._reload(attendance_id)

    def list_records(
        self,
        actor: SessionUser,
        *,
        employee_id: Optional[int] = None,
        day: Optional[date] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        today: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        today = today or now_local().date()
        if day:
            start = end = day
        else:
            end = end or today
            start = start or (end - timedelta(days=DEFAULT_ATTENDANCE_DAYS))
        if start > end:
            raise ValidationError("Invalid date range")

        if employee_id is not None:
            self._access.ensure_can_view(actor, employee_id)
            employee_ids = [employee_id]
        else:
            employee_ids = self._access.visible_ids(actor)

        return self._attendance.list_records(start_date=start, end_date=end, employee_ids=employee_ids)

    def _require_open(self, employee_id: int, today: date) -> AttendanceRecord:
        record = self._attendance.get_for_employee_and_date(employee_id, today)
        if not record or not record.punch_in:
            raise ValidationError("No attendance record found for today. Please punch in first.")
        if record.punch_out is not None:
            raise ValidationError("Already punched out")
        return record

    def _close_session(self, record: AttendanceRecord, *, now: datetime, ip: Optional[str]) -> AttendanceRecord:
        break_hours = record.break_hours
        break_end = record.break_end
        if record.on_break:
            break_hours += hours_between(record.break_start, now)
            break_end = now

        elapsed = hours_between(record.punch_in, now)
        total = round(max(elapsed - break_hours, 0.0), 2)
        idle = idle_hours(self._activity.list_for_attendance(record.attendance_id), threshold_minutes=self._idle_threshold)

        strategy = self._factory.for_punch_out(worked_hours=total)
        decision = strategy.decide_punch_out(worked_hours=total, threshold_hours=self._factory.half_day_threshold_hours)

        self._attendance.update_punch_out(
            attendance_id=record.attendance_id,
            punch_out=now,
            punch_out_ip=ip,
            break_end=break_end,
            break_hours=round(break_hours, 2),
            total_hours=total,
            idle_hours=idle,
            status=decision.status,
            note=decision.note or record.note,
        )
        logger.info(
            "[attendance] employee %s punched out: total=%.2fh break=%.2fh idle=%.2fh status=%s",
            record.employee_id,
            total,
            break_hours,
            idle,
            decision.status.value,
        )
        return self._reload(record.attendance_id)

    def _reload(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record
