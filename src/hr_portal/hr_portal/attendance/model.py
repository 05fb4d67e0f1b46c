from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day."""

    attendance_id: int
    employee_id: int
    work_date: date
    status: AttendanceStatus
    punch_in: Optional[datetime] = None
    punch_out: Optional[datetime] = None
    break_start: Optional[datetime] = None
    break_end: Optional[datetime] = None
    break_hours: float = 0.0
    total_hours: float = 0.0
    idle_hours: float = 0.0
    punch_in_ip: Optional[str] = None
    punch_out_ip: Optional[str] = None
    note: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.punch_in is not None and self.punch_out is None

    @property
    def on_break(self) -> bool:
        return self.break_start is not None and self.break_end is None


@dataclass(frozen=True)
class ActivityLog:
    """One heartbeat. Append-only; owned by its attendance record."""

    log_id: int
    attendance_id: int
    logged_at: datetime
    active: bool = True
    suspicious: bool = False
    pattern_type: Optional[str] = None
    pattern_details: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


@dataclass(frozen=True)
class OpenSession:
    """Read-model: a punched-in, not yet punched-out attendance of today."""

    attendance_id: int
    employee_id: int
    employee_name: str
    punch_in: datetime
    last_heartbeat: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports (joined with employee and department)."""

    employee_id: int
    full_name: str
    employee_code: str
    dept_name: Optional[str]
    work_date: date
    punch_in: Optional[datetime]
    punch_out: Optional[datetime]
    status: AttendanceStatus
    total_hours: float = 0.0
    idle_hours: float = 0.0
    break_hours: float = 0.0


@dataclass(frozen=True)
class SuspiciousLogRow:
    """Read-model: a suspicious heartbeat with its employee."""

    log_id: int
    employee_id: int
    full_name: str
    employee_code: str
    dept_name: Optional[str]
    work_date: date
    logged_at: datetime
    pattern_type: Optional[str] = None
    pattern_details: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
