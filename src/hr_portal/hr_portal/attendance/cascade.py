from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from ..common.datetime_utils import is_friday, is_monday
from ..core.enums import AttendanceStatus
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

CASCADE_NOTE = "Absent: adjacent to weekday absence"


def cascade_target(day: date) -> Optional[date]:
    """Weekend day tied to an absence: Friday -> Saturday, Monday -> Sunday."""

    if is_friday(day):
        return day + timedelta(days=1)
    if is_monday(day):
        return day - timedelta(days=1)
    return None


class WeekendCascade:
    """An absence on Friday or Monday also makes the adjacent weekend day absent."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def apply(self, employee_id: int, absent_day: date) -> Optional[date]:
        target = cascade_target(absent_day)
        if target is None:
            return None

        existing = self._attendance.get_for_employee_and_date(employee_id, target)
        if existing is None:
            self._attendance.create_record(
                employee_id=employee_id,
                work_date=target,
                status=AttendanceStatus.ABSENT,
                note=CASCADE_NOTE,
            )
        elif existing.punch_in is None and existing.status in (AttendanceStatus.WEEKEND, AttendanceStatus.PRESENT):
            self._attendance.update_status(existing.attendance_id, AttendanceStatus.ABSENT, CASCADE_NOTE)
        else:
            return None

        logger.info("[cascade] employee %s absent on %s, marked %s absent", employee_id, absent_day, target)
        return target
