from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import Holiday
from .repository import HolidayRepository

_COLUMNS = "holiday_id, name, holiday_date, is_optional, description"


def _to_holiday(r: dict) -> Holiday:
    return Holiday(
        holiday_id=int(r["holiday_id"]),
        name=r["name"],
        holiday_date=r["holiday_date"],
        is_optional=as_bool(r.get("is_optional")),
        description=r.get("description"),
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM holidays WHERE holiday_id=%s", (holiday_id,))
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def get_by_date(self, holiday_date: date) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM holidays WHERE holiday_date=%s", (holiday_date,))
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def list_between(self, start: date, end: date) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM holidays WHERE holiday_date BETWEEN %s AND %s ORDER BY holiday_date",
                (start, end),
            )
            return [_to_holiday(r) for r in fetchall(cur)]

    def create(self, *, name: str, holiday_date: date, is_optional: bool, description: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO holidays(name, holiday_date, is_optional, description)
                VALUES(%s,%s,%s,%s)
                """,
                (name, holiday_date, 1 if is_optional else 0, description),
            )
            return int(cur.lastrowid)

    def delete_by_id(self, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_id=%s", (holiday_id,))
            return cur.rowcount > 0
