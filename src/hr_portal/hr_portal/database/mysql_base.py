from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def as_float(value: Any) -> float:
    """DECIMAL columns come back as Decimal; domain models use float."""

    if value is None:
        return 0.0
    return float(value)


def as_bool(value: Any) -> bool:
    return bool(int(value)) if value is not None else False


def in_clause(values: Sequence[Any]) -> str:
    """Placeholder list for `IN (...)`; callers must pass a non-empty sequence."""

    return ", ".join(["%s"] * len(values))
