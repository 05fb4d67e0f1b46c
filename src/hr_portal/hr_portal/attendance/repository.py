from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceReportRow, OpenSession


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_record(
        self,
        *,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
        punch_in: Optional[datetime] = None,
        punch_out: Optional[datetime] = None,
        punch_in_ip: Optional[str] = None,
        total_hours: float = 0.0,
        note: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_punch_out(
        self,
        *,
        attendance_id: int,
        punch_out: datetime,
        punch_out_ip: Optional[str],
        break_end: Optional[datetime],
        break_hours: float,
        total_hours: float,
        idle_hours: float,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def update_break(
        self,
        *,
        attendance_id: int,
        break_start: Optional[datetime],
        break_end: Optional[datetime],
        break_hours: float,
    ) -> bool:
        raise NotImplementedError

    def update_idle(self, attendance_id: int, idle_hours: float) -> bool:
        raise NotImplementedError

    def update_status(self, attendance_id: int, status: AttendanceStatus, note: Optional[str] = None) -> bool:
        raise NotImplementedError

    def admin_update_record(
        self,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        punch_in: Optional[datetime],
        punch_out: Optional[datetime],
        total_hours: float,
        idle_hours: float,
        note: Optional[str] = None,
    ) -> bool:
        """Manual override by an admin or manager."""

        raise NotImplementedError

    def list_records(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_open_sessions(self, work_date: date) -> Sequence[OpenSession]:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
