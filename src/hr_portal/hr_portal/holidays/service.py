from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import month_bounds
from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import Holiday
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


class HolidayService:
    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def list_holidays(self, *, year: int, month: Optional[int] = None) -> Sequence[Holiday]:
        if month is not None:
            if not 1 <= month <= 12:
                raise ValidationError("Month must be between 1 and 12")
            start, end = month_bounds(year, month)
        else:
            start, end = date(year, 1, 1), date(year, 12, 31)
        return self._holidays.list_between(start, end)

    def is_holiday(self, day: date) -> bool:
        return self._holidays.get_by_date(day) is not None

    def create(
        self,
        *,
        name: str,
        holiday_date: date,
        is_optional: bool = False,
        description: Optional[str] = None,
    ) -> int:
        name = require_non_empty(name, "Name")
        if self._holidays.get_by_date(holiday_date):
            raise ValidationError("A holiday already exists on this date")

        holiday_id = self._holidays.create(
            name=name,
            holiday_date=holiday_date,
            is_optional=bool(is_optional),
            description=(description or "").strip() or None,
        )
        logger.info("[holidays] created %s on %s", name, holiday_date)
        return holiday_id

    def delete(self, holiday_id: int) -> None:
        if not self._holidays.get_by_id(holiday_id):
            raise NotFoundError("Holiday not found")
        self._holidays.delete_by_id(holiday_id)
