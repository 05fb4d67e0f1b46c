from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import PayrollStatus
from .model import PayrollFigures, PayrollRecord


class PayrollRepository(Protocol):
    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def exists(self, *, employee_id: int, month: int, year: int) -> bool:
        raise NotImplementedError

    def create(self, *, employee_id: int, month: int, year: int, figures: PayrollFigures) -> int:
        raise NotImplementedError

    def list_records(
        self,
        *,
        employee_ids: Optional[Sequence[int]] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def update_status(self, payroll_id: int, status: PayrollStatus) -> bool:
        raise NotImplementedError

    def delete_by_id(self, payroll_id: int) -> bool:
        raise NotImplementedError
