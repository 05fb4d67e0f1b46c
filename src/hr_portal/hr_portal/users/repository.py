from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Services depend on this protocol, never on a concrete database class.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self, *, active_only: bool = False) -> Sequence[Employee]:
        raise NotImplementedError

    def list_by_ids(self, employee_ids: Sequence[int]) -> Sequence[Employee]:
        raise NotImplementedError

    def list_direct_report_ids(self, head_id: int) -> Sequence[int]:
        raise NotImplementedError

    def next_employee_code(self) -> str:
        raise NotImplementedError

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
        raise NotImplementedError

    def set_active(self, employee_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError
