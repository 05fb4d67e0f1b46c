from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .department_model import Department
from .department_repository import DepartmentRepository

_COLUMNS = "dept_id, dept_name, code, is_active"


def _to_department(row: dict) -> Department:
    return Department(
        dept_id=int(row["dept_id"]),
        dept_name=row["dept_name"],
        code=row.get("code"),
        is_active=as_bool(row.get("is_active", 1)),
    )


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM departments ORDER BY dept_name")
            return [_to_department(r) for r in fetchall(cur)]

    def get_by_name(self, dept_name: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM departments WHERE dept_name=%s", (dept_name,))
            row = fetchone(cur)
            return _to_department(row) if row else None

    def get_by_code(self, code: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM departments WHERE code=%s", (code,))
            row = fetchone(cur)
            return _to_department(row) if row else None

    def create(self, *, dept_name: str, code: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO departments(dept_name, code) VALUES(%s, %s)", (dept_name, code))
            return int(cur.lastrowid)
