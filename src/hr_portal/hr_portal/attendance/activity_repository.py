from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import ActivityLog, SuspiciousLogRow


class ActivityLogRepository(Protocol):
    def add_log(
        self,
        *,
        attendance_id: int,
        logged_at: datetime,
        active: bool,
        suspicious: bool = False,
        pattern_type: Optional[str] = None,
        pattern_details: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def list_for_attendance(self, attendance_id: int) -> Sequence[ActivityLog]:
        """Ordered by timestamp, oldest first."""

        raise NotImplementedError

    def list_suspicious(
        self,
        *,
        start: datetime,
        end: datetime,
        employee_id: Optional[int] = None,
        limit: int = 500,
    ) -> Sequence[SuspiciousLogRow]:
        """Most recent first."""

        raise NotImplementedError
