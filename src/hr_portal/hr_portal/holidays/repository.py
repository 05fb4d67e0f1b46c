from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Holiday


class HolidayRepository(Protocol):
    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        raise NotImplementedError

    def get_by_date(self, holiday_date: date) -> Optional[Holiday]:
        raise NotImplementedError

    def list_between(self, start: date, end: date) -> Sequence[Holiday]:
        raise NotImplementedError

    def create(self, *, name: str, holiday_date: date, is_optional: bool, description: Optional[str]) -> int:
        raise NotImplementedError

    def delete_by_id(self, holiday_id: int) -> bool:
        raise NotImplementedError
