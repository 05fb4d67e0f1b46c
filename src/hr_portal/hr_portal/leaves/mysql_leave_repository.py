from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import LeaveRequest
from .repository import LeaveRepository

_SELECT = """
    SELECT lr.request_id, lr.employee_id, lr.leave_type, lr.start_date, lr.end_date, lr.days,
           lr.reason, lr.status, lr.created_at, lr.decided_by, lr.decided_at, lr.admin_comment,
           e.full_name
    FROM leave_requests lr
    JOIN employees e ON e.employee_id = lr.employee_id
"""


def _to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        days=int(r["days"]),
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        created_at=r.get("created_at"),
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
        admin_comment=r.get("admin_comment"),
        employee_name=r.get("full_name"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE lr.request_id=%s", (request_id,))
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def find_overlapping(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        statuses: Sequence[LeaveStatus],
    ) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + f"""
                WHERE lr.employee_id=%s
                  AND lr.status IN ({in_clause(statuses)})
                  AND lr.start_date <= %s AND lr.end_date >= %s
                LIMIT 1
                """,
                (employee_id, *[s.value for s in statuses], end_date, start_date),
            )
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def create(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        days: int,
        reason: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type, start_date, end_date, days, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s,'PENDING')
                """,
                (employee_id, leave_type.value, start_date, end_date, days, reason),
            )
            return int(cur.lastrowid)

    def update_decision(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        decided_by: int,
        decided_at: datetime,
        admin_comment: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, decided_by=%s, decided_at=%s, admin_comment=COALESCE(%s, admin_comment)
                WHERE request_id=%s
                """,
                (status.value, decided_by, decided_at, admin_comment, request_id),
            )
            return cur.rowcount > 0

    def list_requests(
        self,
        *,
        employee_ids: Optional[Sequence[int]] = None,
        status: Optional[LeaveStatus] = None,
    ) -> Sequence[LeaveRequest]:
        clauses: list[str] = []
        params: list[object] = []
        if employee_ids is not None:
            if not employee_ids:
                return []
            clauses.append(f"lr.employee_id IN ({in_clause(employee_ids)})")
            params.extend(int(i) for i in employee_ids)
        if status is not None:
            clauses.append("lr.status=%s")
            params.append(status.value)

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + where + " ORDER BY lr.created_at DESC, lr.request_id DESC", tuple(params))
            return [_to_leave(r) for r in fetchall(cur)]
