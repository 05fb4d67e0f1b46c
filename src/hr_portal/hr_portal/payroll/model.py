from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PayrollStatus


@dataclass(frozen=True)
class PayrollRecord:
    """Domain entity: one employee's payslip for one month."""

    payroll_id: int
    employee_id: int
    month: int
    year: int
    working_days: int
    days_present: float
    days_absent: float
    basic_salary: float
    gross_salary: float
    professional_tax: float
    total_deductions: float
    net_salary: float
    status: PayrollStatus
    created_at: Optional[datetime] = None
    employee_name: Optional[str] = None


@dataclass(frozen=True)
class PayrollFigures:
    """Computed amounts before they are stored."""

    working_days: int
    days_present: float
    days_absent: float
    basic_salary: float
    gross_salary: float
    professional_tax: float
    total_deductions: float
    net_salary: float
