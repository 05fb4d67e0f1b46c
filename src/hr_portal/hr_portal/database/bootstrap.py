from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

HR_TABLES = (
    "departments",
    "employees",
    "attendance_records",
    "activity_logs",
    "holidays",
    "leave_requests",
    "payroll_records",
)

# (code, name, email, password, role, department, reports to manager, monthly salary)
DEMO_ACCOUNTS = (
    ("EMP001", "Admin Demo", "admin@example.com", "admin123", "ADMIN", "Human Resources", False, 90000),
    ("EMP002", "Manager Demo", "manager@example.com", "manager123", "MANAGER", "Engineering", False, 75000),
    ("EMP003", "Employee Demo", "employee@example.com", "employee123", "EMPLOYEE", "Engineering", True, 45000),
)


def missing_tables(tables: Iterable[str]) -> list[str]:
    """HR tables absent from `tables`, compared case-insensitively, in schema order."""
    present = {name.lower() for name in tables}
    return [name for name in HR_TABLES if name not in present]


def created_tables(sql: str) -> list[str]:
    """Names of the tables a schema script creates."""
    names = []
    for stmt in _iter_sql_statements(_strip_create_db_and_use(sql)):
        match = re.match(r"(?is)CREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?`?(\w+)`?", stmt)
        if match:
            names.append(match.group(1))
    return names


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes and '--' comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False
    in_comment = False

    for i, ch in enumerate(sql):
        if in_comment:
            if ch == "\n":
                in_comment = False
                buf.append(ch)
            continue

        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "-" and not in_single and not in_double and sql[i + 1 : i + 2] == "-":
            in_comment = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(cur, sql: str) -> None:
    for stmt in _iter_sql_statements(sql):
        cur.execute(stmt)


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_sql_file(db_config: dict, *, sql_path: str | Path) -> None:
    target = DBConfig.from_dict(db_config)
    sql = _strip_create_db_and_use(Path(sql_path).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        _exec_sql(cur, sql)
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    apply_sql_file(db_config, sql_path=schema_path)
    logger.info("[bootstrap] schema applied from %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    apply_sql_file(db_config, sql_path=seed_path)
    logger.info("[bootstrap] seed applied from %s", seed_path)


def ensure_demo_users(db_config: dict) -> None:
    """Upsert one account per role so a fresh database can be logged into."""

    target = DBConfig.from_dict(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)

        def dept_id(name: str) -> int:
            cur.execute("SELECT dept_id FROM departments WHERE dept_name=%s", (name,))
            row = cur.fetchone()
            if not row:
                raise RuntimeError(f"Missing departments row for dept_name={name}")
            return int(row["dept_id"])

        def upsert_employee(
            code: str,
            full_name: str,
            email: str,
            password: str,
            role: str,
            dept: int,
            reporting_head_id: int | None,
            salary: float,
        ) -> int:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT employee_id FROM employees WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    """
                    UPDATE employees
                    SET full_name=%s, password_hash=%s, role=%s, dept_id=%s,
                        reporting_head_id=%s, monthly_salary=%s, is_active=1
                    WHERE email=%s
                    """,
                    (full_name, password_hash, role, dept, reporting_head_id, salary, email),
                )
                return int(existing["employee_id"])

            cur.execute(
                """
                INSERT INTO employees (employee_code, full_name, email, password_hash, role, dept_id,
                                       reporting_head_id, date_of_joining, monthly_salary)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (code, full_name, email, password_hash, role, dept, reporting_head_id, date(2024, 1, 1), salary),
            )
            return int(cur.lastrowid)

        manager_id = None
        for code, full_name, email, password, role, dept, reports, salary in DEMO_ACCOUNTS:
            employee_id = upsert_employee(
                code, full_name, email, password, role, dept_id(dept), manager_id if reports else None, salary
            )
            if role == "MANAGER":
                manager_id = employee_id

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
