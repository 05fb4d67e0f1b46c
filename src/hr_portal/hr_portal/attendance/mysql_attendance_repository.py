from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, in_clause
from .model import AttendanceRecord, AttendanceReportRow, OpenSession
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, employee_id, work_date, status, punch_in, punch_out, break_start, break_end,
    break_hours, total_hours, idle_hours, punch_in_ip, punch_out_ip, note
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        punch_in=r.get("punch_in"),
        punch_out=r.get("punch_out"),
        break_start=r.get("break_start"),
        break_end=r.get("break_end"),
        break_hours=as_float(r.get("break_hours")),
        total_hours=as_float(r.get("total_hours")),
        idle_hours=as_float(r.get("idle_hours")),
        punch_in_ip=r.get("punch_in_ip"),
        punch_out_ip=r.get("punch_out_ip"),
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (attendance_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (employee_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_record(
        self,
        *,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
        punch_in: Optional[datetime] = None,
        punch_out: Optional[datetime] = None,
        punch_in_ip: Optional[str] = None,
        total_hours: float = 0.0,
        note: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, work_date, status, punch_in, punch_out,
                                               punch_in_ip, total_hours, note)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (employee_id, work_date, status.value, punch_in, punch_out, punch_in_ip, total_hours, note),
            )
            return int(cur.lastrowid)

    def update_punch_out(
        self,
        *,
        attendance_id: int,
        punch_out: datetime,
        punch_out_ip: Optional[str],
        break_end: Optional[datetime],
        break_hours: float,
        total_hours: float,
        idle_hours: float,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET punch_out=%s, punch_out_ip=%s, break_end=%s, break_hours=%s,
                    total_hours=%s, idle_hours=%s, status=%s, note=%s
                WHERE attendance_id=%s AND punch_out IS NULL
                """,
                (
                    punch_out,
                    punch_out_ip,
                    break_end,
                    break_hours,
                    total_hours,
                    idle_hours,
                    status.value,
                    note,
                    attendance_id,
                ),
            )
            return cur.rowcount > 0

    def update_break(
        self,
        *,
        attendance_id: int,
        break_start: Optional[datetime],
        break_end: Optional[datetime],
        break_hours: float,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET break_start=%s, break_end=%s, break_hours=%s
                WHERE attendance_id=%s
                """,
                (break_start, break_end, break_hours, attendance_id),
            )
            return cur.rowcount > 0

    def update_idle(self, attendance_id: int, idle_hours: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET idle_hours=%s WHERE attendance_id=%s",
                (idle_hours, attendance_id),
            )
            return cur.rowcount > 0

    def update_status(self, attendance_id: int, status: AttendanceStatus, note: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET status=%s, note=COALESCE(%s, note) WHERE attendance_id=%s",
                (status.value, note, attendance_id),
            )
            return cur.rowcount > 0

    def admin_update_record(
        self,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        punch_in: Optional[datetime],
        punch_out: Optional[datetime],
        total_hours: float,
        idle_hours: float,
        note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, punch_in=%s, punch_out=%s, total_hours=%s, idle_hours=%s, note=%s
                WHERE attendance_id=%s
                """,
                (status.value, punch_in, punch_out, total_hours, idle_hours, note, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_records(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]
        if employee_ids is not None:
            if not employee_ids:
                return []
            clauses.append(f"employee_id IN ({in_clause(employee_ids)})")
            params.extend(int(i) for i in employee_ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {" AND ".join(clauses)}
                ORDER BY work_date DESC, employee_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_open_sessions(self, work_date: date) -> Sequence[OpenSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT ar.attendance_id, ar.employee_id, e.full_name, ar.punch_in,
                       (SELECT MAX(al.logged_at) FROM activity_logs al
                        WHERE al.attendance_id = ar.attendance_id) AS last_heartbeat
                FROM attendance_records ar
                JOIN employees e ON e.employee_id = ar.employee_id
                WHERE ar.work_date=%s AND ar.punch_in IS NOT NULL AND ar.punch_out IS NULL
                ORDER BY ar.punch_in ASC
                """,
                (work_date,),
            )
            return [
                OpenSession(
                    attendance_id=int(r["attendance_id"]),
                    employee_id=int(r["employee_id"]),
                    employee_name=r["full_name"],
                    punch_in=r["punch_in"],
                    last_heartbeat=r.get("last_heartbeat"),
                )
                for r in fetchall(cur)
            ]

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["ar.work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if employee_ids is not None:
            if not employee_ids:
                return []
            clauses.append(f"e.employee_id IN ({in_clause(employee_ids)})")
            params.extend(int(i) for i in employee_ids)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    e.employee_id, e.full_name, e.employee_code,
                    d.dept_name,
                    ar.work_date, ar.punch_in, ar.punch_out, ar.status,
                    ar.total_hours, ar.idle_hours, ar.break_hours
                FROM attendance_records ar
                JOIN employees e ON e.employee_id = ar.employee_id
                LEFT JOIN departments d ON d.dept_id = e.dept_id
                WHERE {where}
                ORDER BY ar.work_date DESC, e.employee_id ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

            return [
                AttendanceReportRow(
                    employee_id=int(r["employee_id"]),
                    full_name=r["full_name"],
                    employee_code=r["employee_code"],
                    dept_name=r.get("dept_name"),
                    work_date=r["work_date"],
                    punch_in=r.get("punch_in"),
                    punch_out=r.get("punch_out"),
                    status=AttendanceStatus(r["status"]),
                    total_hours=as_float(r.get("total_hours")),
                    idle_hours=as_float(r.get("idle_hours")),
                    break_hours=as_float(r.get("break_hours")),
                )
                for r in rows
            ]
