from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Plain data object; no database access lives here.
    """

    employee_id: int
    employee_code: str
    full_name: str
    email: str
    password_hash: str
    role: Role
    dept_id: Optional[int]
    reporting_head_id: Optional[int]
    date_of_joining: date
    monthly_salary: float
    is_active: bool = True
    dept_name: Optional[str] = None


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    employee_id: int
    full_name: str
    role: Role
    dept_id: Optional[int]
