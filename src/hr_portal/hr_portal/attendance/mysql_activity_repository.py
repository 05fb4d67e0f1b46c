from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall
from .activity_repository import ActivityLogRepository
from .model import ActivityLog, SuspiciousLogRow


class MySQLActivityLogRepository(ActivityLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO activity_logs(attendance_id, logged_at, active, suspicious,
                                          pattern_type, pattern_details, ip_address, user_agent)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    attendance_id,
                    logged_at,
                    1 if active else 0,
                    1 if suspicious else 0,
                    pattern_type,
                    pattern_details,
                    ip_address,
                    (user_agent or "")[:255] or None,
                ),
            )
            return int(cur.lastrowid)

    def list_for_attendance(self, attendance_id: int) -> Sequence[ActivityLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT log_id, attendance_id, logged_at, active, suspicious,
                       pattern_type, pattern_details, ip_address, user_agent
                FROM activity_logs
                WHERE attendance_id=%s
                ORDER BY logged_at ASC, log_id ASC
                """,
                (attendance_id,),
            )
            return [
                ActivityLog(
                    log_id=int(r["log_id"]),
                    attendance_id=int(r["attendance_id"]),
                    logged_at=r["logged_at"],
                    active=as_bool(r.get("active")),
                    suspicious=as_bool(r.get("suspicious")),
                    pattern_type=r.get("pattern_type"),
                    pattern_details=r.get("pattern_details"),
                    ip_address=r.get("ip_address"),
                    user_agent=r.get("user_agent"),
                )
                for r in fetchall(cur)
            ]

    def list_suspicious(
        self,
        *,
        start: datetime,
        end: datetime,
        employee_id: Optional[int] = None,
        limit: int = 500,
    ) -> Sequence[SuspiciousLogRow]:
        clauses = ["al.suspicious=1", "al.logged_at BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if employee_id is not None:
            clauses.append("ar.employee_id=%s")
            params.append(int(employee_id))
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT al.log_id, al.logged_at, al.pattern_type, al.pattern_details,
                       al.ip_address, al.user_agent,
                       ar.work_date, e.employee_id, e.full_name, e.employee_code, d.dept_name
                FROM activity_logs al
                JOIN attendance_records ar ON ar.attendance_id = al.attendance_id
                JOIN employees e ON e.employee_id = ar.employee_id
                LEFT JOIN departments d ON d.dept_id = e.dept_id
                WHERE {" AND ".join(clauses)}
                ORDER BY al.logged_at DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [
                SuspiciousLogRow(
                    log_id=int(r["log_id"]),
                    employee_id=int(r["employee_id"]),
                    full_name=r["full_name"],
                    employee_code=r["employee_code"],
                    dept_name=r.get("dept_name"),
                    work_date=r["work_date"],
                    logged_at=r["logged_at"],
                    pattern_type=r.get("pattern_type"),
                    pattern_details=r.get("pattern_details"),
                    ip_address=r.get("ip_address"),
                    user_agent=r.get("user_agent"),
                )
                for r in fetchall(cur)
            ]
