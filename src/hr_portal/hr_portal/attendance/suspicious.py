from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import SUSPICIOUS_LOG_LIMIT, SUSPICIOUS_LOOKBACK_DAYS
from ..core.exceptions import ValidationError
from .activity_repository import ActivityLogRepository
from .model import SuspiciousLogRow


@dataclass(frozen=True)
class SuspiciousReport:
    logs: Sequence[SuspiciousLogRow]
    summary: list[dict]


class SuspiciousActivityService:
    """Admin view over heartbeats flagged as bot-like, grouped per employee and day."""

    def __init__(self, activity: ActivityLogRepository, *, limit: int = SUSPICIOUS_LOG_LIMIT):
        self._activity = activity
        self._limit = int(limit)

    def build_report(
        self,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        employee_id: Optional[int] = None,
        now: datetime | None = None,
    ) -> SuspiciousReport:
        now = now or now_local()
        if not (start and end):
            start, end = now - timedelta(days=SUSPICIOUS_LOOKBACK_DAYS), now
        if start > end:
            raise ValidationError("Invalid date range")

        logs = self._activity.list_suspicious(start=start, end=end, employee_id=employee_id, limit=self._limit)

        groups: dict[tuple[int, str], dict] = {}
        for log in logs:
            day = log.work_date.isoformat()
            g = groups.get((log.employee_id, day))
            if not g:
                g = {
                    "employee": {
                        "employeeId": log.employee_id,
                        "employeeCode": log.employee_code,
                        "name": log.full_name,
                        "department": log.dept_name,
                    },
                    "date": day,
                    "count": 0,
                    "timestamps": [],
                    "patterns": [],
                    "uniqueIps": [],
                }
                groups[(log.employee_id, day)] = g

            g["count"] += 1
            g["timestamps"].append(log.logged_at.isoformat())
            if log.ip_address and log.ip_address not in g["uniqueIps"]:
                g["uniqueIps"].append(log.ip_address)
            if log.pattern_type and log.pattern_details:
                g["patterns"].append(
                    {
                        "type": log.pattern_type,
                        "details": log.pattern_details,
                        "timestamp": log.logged_at.isoformat(),
                    }
                )

        summary = sorted(groups.values(), key=lambda g: g["count"], reverse=True)
        return SuspiciousReport(logs=logs, summary=summary)
