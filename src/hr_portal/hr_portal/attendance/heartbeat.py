from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import minutes_between, now_local
from ..core.constants import AUTO_HEARTBEAT_STALE_MINUTES, IDLE_THRESHOLD_MINUTES
from ..core.enums import HeartbeatAction
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import SessionUser
from ..users.service import TeamAccess
from .activity_repository import ActivityLogRepository
from .idle import idle_hours
from .model import ActivityLog, AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

AUTO_HEARTBEAT_USER_AGENT = "auto-heartbeat"


@dataclass(frozen=True)
class HeartbeatResult:
    idle_hours: float
    last_heartbeat: datetime
    bot_detected: bool
    effective_active: bool


@dataclass(frozen=True)
class SweepEntry:
    employee_id: int
    employee_name: str
    last_heartbeat: datetime
    minutes_since: float
    action: HeartbeatAction


@dataclass(frozen=True)
class SweepReport:
    timestamp: datetime
    results: list[SweepEntry] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.results)

    @property
    def heartbeats_created(self) -> int:
        return sum(1 for r in self.results if r.action == HeartbeatAction.CREATED)


class HeartbeatService:
    """Heartbeat intake, idle recomputation and the stale-session backfill."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        activity: ActivityLogRepository,
        access: TeamAccess,
        *,
        idle_threshold_minutes: float = IDLE_THRESHOLD_MINUTES,
        stale_minutes: float = AUTO_HEARTBEAT_STALE_MINUTES,
    ):
        self._attendance = attendance
        self._activity = activity
        self._access = access
        self._idle_threshold = float(idle_threshold_minutes)
        self._stale_minutes = float(stale_minutes)

    def record_heartbeat(
        self,
        employee_id: int,
        *,
        active: bool = True,
        suspicious: bool = False,
        pattern_type: Optional[str] = None,
        pattern_details: Optional[str] = None,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
        now: datetime | None = None,
    ) -> HeartbeatResult:
        now = now or now_local()

        record = self._attendance.get_for_employee_and_date(employee_id, now.date())
        if not record:
            raise ValidationError("No attendance record for today")
        if not record.punch_in:
            raise ValidationError("Not punched in yet")
        if record.punch_out is not None:
            raise ValidationError("Already punched out")

        effective_active = bool(active) and not suspicious
        self._activity.add_log(
            attendance_id=record.attendance_id,
            logged_at=now,
            active=effective_active,
            suspicious=bool(suspicious),
            pattern_type=pattern_type if suspicious else None,
            pattern_details=pattern_details if suspicious else None,
            ip_address=ip,
            user_agent=user_agent,
        )
        if suspicious:
            logger.warning(
                "[heartbeat] suspicious activity for employee %s: %s %s",
                employee_id,
                pattern_type or "-",
                pattern_details or "",
            )

        idle = self._recompute_idle(record)
        return HeartbeatResult(
            idle_hours=idle,
            last_heartbeat=now,
            bot_detected=bool(suspicious),
            effective_active=effective_active,
        )

    def run_auto_heartbeat(self, *, now: datetime | None = None) -> SweepReport:
        """Backfill one inactive heartbeat for every open session that went quiet.

        Single pass; any failure aborts the whole sweep.
        """

        now = now or now_local()
        report = SweepReport(timestamp=now)

        try:
            for session in self._attendance.list_open_sessions(now.date()):
                last = session.last_heartbeat or session.punch_in
                minutes_since = minutes_between(last, now)

                if minutes_since >= self._stale_minutes:
                    self._activity.add_log(
                        attendance_id=session.attendance_id,
                        logged_at=now,
                        active=False,
                        user_agent=AUTO_HEARTBEAT_USER_AGENT,
                    )
                    record = self._attendance.get_by_id(session.attendance_id)
                    if record:
                        self._recompute_idle(record)
                    action = HeartbeatAction.CREATED
                else:
                    action = HeartbeatAction.SKIPPED

                report.results.append(
                    SweepEntry(
                        employee_id=session.employee_id,
                        employee_name=session.employee_name,
                        last_heartbeat=last,
                        minutes_since=round(minutes_since, 2),
                        action=action,
                    )
                )
        except Exception:
            logger.exception("[auto-heartbeat] sweep aborted after %d sessions", report.processed)
            raise

        logger.info(
            "[auto-heartbeat] processed=%d created=%d",
            report.processed,
            report.heartbeats_created,
        )
        return report

    def activity_timeline(self, actor: SessionUser, attendance_id: int) -> tuple[AttendanceRecord, Sequence[ActivityLog]]:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        self._access.ensure_can_view(actor, record.employee_id)
        return record, self._activity.list_for_attendance(attendance_id)

    def _recompute_idle(self, record: AttendanceRecord) -> float:
        logs = self._activity.list_for_attendance(record.attendance_id)
        idle = idle_hours(logs, threshold_minutes=self._idle_threshold)
        self._attendance.update_idle(record.attendance_id, idle)
        return idle
