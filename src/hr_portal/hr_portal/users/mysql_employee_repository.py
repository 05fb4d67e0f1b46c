from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_float, db_cursor, fetchall, fetchone, in_clause
from .model import Employee
from .repository import EmployeeRepository

_SELECT = """
    SELECT e.employee_id, e.employee_code, e.full_name, e.email, e.password_hash, e.role,
           e.dept_id, e.reporting_head_id, e.date_of_joining, e.monthly_salary, e.is_active,
           d.dept_name
    FROM employees e
    LEFT JOIN departments d ON d.dept_id = e.dept_id
"""


def _to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        employee_code=row["employee_code"],
        full_name=row["full_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        dept_id=row.get("dept_id"),
        reporting_head_id=row.get("reporting_head_id"),
        date_of_joining=row["date_of_joining"],
        monthly_salary=as_float(row.get("monthly_salary")),
        is_active=as_bool(row.get("is_active", 1)),
        dept_name=row.get("dept_name"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.employee_id=%s", (employee_id,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.email=%s", (email,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_all(self, *, active_only: bool = False) -> Sequence[Employee]:
        sql = _SELECT
        if active_only:
            sql += " WHERE e.is_active=1"
        sql += " ORDER BY e.full_name"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql)
            return [_to_employee(r) for r in fetchall(cur)]

    def list_by_ids(self, employee_ids: Sequence[int]) -> Sequence[Employee]:
        if not employee_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE e.employee_id IN ({in_clause(employee_ids)}) ORDER BY e.full_name",
                tuple(employee_ids),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def list_direct_report_ids(self, head_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT employee_id FROM employees WHERE reporting_head_id=%s", (head_id,))
            return [int(r["employee_id"]) for r in fetchall(cur)]

    def next_employee_code(self) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COALESCE(MAX(employee_id), 0) AS max_id FROM employees")
            row = fetchone(cur) or {"max_id": 0}
            return f"EMP{int(row['max_id']) + 1:03d}"

    def create_employee(
        self,
        *,
        employee_code: str,
        full_name: str,
        email: str,
        password_hash: str,
        role: Role,
        dept_id: Optional[int],
        reporting_head_id: Optional[int],
        date_of_joining: date,
        monthly_salary: float,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(employee_code, full_name, email, password_hash, role, dept_id,
                                      reporting_head_id, date_of_joining, monthly_salary, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (
                    employee_code,
                    full_name,
                    email,
                    password_hash,
                    role.value,
                    dept_id,
                    reporting_head_id,
                    date_of_joining,
                    monthly_salary,
                ),
            )
            return int(cur.lastrowid)

    def set_active(self, employee_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET is_active=%s WHERE employee_id=%s",
                (1 if is_active else 0, employee_id),
            )
            return cur.rowcount > 0
