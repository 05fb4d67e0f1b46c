from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, in_clause
from .model import PayrollFigures, PayrollRecord
from .repository import PayrollRepository

_SELECT = """
    SELECT p.payroll_id, p.employee_id, p.month, p.year, p.working_days, p.days_present, p.days_absent,
           p.basic_salary, p.gross_salary, p.professional_tax, p.total_deductions, p.net_salary,
           p.status, p.created_at, e.full_name
    FROM payroll_records p
    JOIN employees e ON e.employee_id = p.employee_id
"""


def _to_payroll(r: dict) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        working_days=int(r["working_days"]),
        days_present=as_float(r["days_present"]),
        days_absent=as_float(r["days_absent"]),
        basic_salary=as_float(r["basic_salary"]),
        gross_salary=as_float(r["gross_salary"]),
        professional_tax=as_float(r["professional_tax"]),
        total_deductions=as_float(r["total_deductions"]),
        net_salary=as_float(r["net_salary"]),
        status=PayrollStatus(r["status"]),
        created_at=r.get("created_at"),
        employee_name=r.get("full_name"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.payroll_id=%s", (payroll_id,))
            r = fetchone(cur)
            return _to_payroll(r) if r else None

    def exists(self, *, employee_id: int, month: int, year: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM payroll_records WHERE employee_id=%s AND month=%s AND year=%s",
                (employee_id, month, year),
            )
            return fetchone(cur) is not None

    def create(self, *, employee_id: int, month: int, year: int, figures: PayrollFigures) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_records(employee_id, month, year, working_days, days_present, days_absent,
                                            basic_salary, gross_salary, professional_tax, total_deductions,
                                            net_salary, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,'PENDING')
                """,
                (
                    employee_id,
                    month,
                    year,
                    figures.working_days,
                    figures.days_present,
                    figures.days_absent,
                    figures.basic_salary,
                    figures.gross_salary,
                    figures.professional_tax,
                    figures.total_deductions,
                    figures.net_salary,
                ),
            )
            return int(cur.lastrowid)

    def list_records(
        self,
        *,
        employee_ids: Optional[Sequence[int]] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Sequence[PayrollRecord]:
        clauses: list[str] = []
        params: list[object] = []
        if employee_ids is not None:
            if not employee_ids:
                return []
            clauses.append(f"p.employee_id IN ({in_clause(employee_ids)})")
            params.extend(int(i) for i in employee_ids)
        if month is not None:
            clauses.append("p.month=%s")
            params.append(int(month))
        if year is not None:
            clauses.append("p.year=%s")
            params.append(int(year))

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + where + " ORDER BY p.year DESC, p.month DESC, e.full_name", tuple(params))
            return [_to_payroll(r) for r in fetchall(cur)]

    def update_status(self, payroll_id: int, status: PayrollStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE payroll_records SET status=%s WHERE payroll_id=%s", (status.value, payroll_id))
            return cur.rowcount > 0

    def delete_by_id(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_records WHERE payroll_id=%s", (payroll_id,))
            return cur.rowcount > 0
