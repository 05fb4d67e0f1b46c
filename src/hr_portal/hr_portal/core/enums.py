from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for access control."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"


class AttendanceStatus(str, Enum):
    """Normalized attendance status stored in the database."""

    PRESENT = "PRESENT"
    HALF_DAY = "HALF_DAY"
    ABSENT = "ABSENT"
    LEAVE = "LEAVE"
    WEEKEND = "WEEKEND"
    HOLIDAY = "HOLIDAY"


class LeaveType(str, Enum):
    CASUAL = "CASUAL"
    SICK = "SICK"
    EARNED = "EARNED"
    UNPAID = "UNPAID"


class LeaveStatus(str, Enum):
    """Leave approval workflow states."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    HOLD = "HOLD"
    CANCELLED = "CANCELLED"


class PayrollStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSED = "PROCESSED"
    PAID = "PAID"


class HeartbeatAction(str, Enum):
    """Outcome of one auto-heartbeat sweep entry."""

    CREATED = "created_inactive_heartbeat"
    SKIPPED = "no_action_needed"
