from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, now_local
from ..core.enums import PayrollStatus
from ..core.exceptions import NotFoundError
from ..users.model import SessionUser
from ..users.repository import EmployeeRepository
from ..users.service import TeamAccess
from .calculator.base import PayrollCalculator
from .calculator.fixed_salary_calculator import FixedSalaryCalculator
from .model import PayrollRecord
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    created: list[PayrollRecord] = field(default_factory=list)
    skipped: list[dict] = field(default_factory=list)


class PayrollService:
    """Use cases: generate monthly payroll and manage its lifecycle."""

    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        access: TeamAccess,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._payroll = payroll
        self._employees = employees
        self._attendance = attendance
        self._access = access
        self._calculator = calculator or FixedSalaryCalculator()

    def generate(
        self,
        *,
        month: int,
        year: int,
        employee_ids: Optional[Sequence[int]] = None,
        today: Optional[date] = None,
    ) -> GenerationResult:
        today = today or now_local().date()
        month_start, month_end = month_bounds(year, month)
        result = GenerationResult()

        if employee_ids:
            employees = [e for e in self._employees.list_by_ids(list(employee_ids)) if e.is_active]
        else:
            employees = list(self._employees.list_all(active_only=True))

        for emp in employees:
            if self._payroll.exists(employee_id=emp.employee_id, month=month, year=year):
                result.skipped.append({"employeeId": emp.employee_id, "reason": "Payroll already exists"})
                continue

            start = max(emp.date_of_joining, month_start)
            end = min(today, month_end)
            if start > end:
                result.skipped.append({"employeeId": emp.employee_id, "reason": "No working days in period"})
                continue

            # One extra day on each side so weekend days can see the adjacent Friday / Monday.
            records = self._attendance.list_records(
                start_date=start - timedelta(days=1),
                end_date=end + timedelta(days=1),
                employee_ids=[emp.employee_id],
            )
            by_day = {r.work_date: r for r in records}

            present = self._calculator.present_days(by_day, start=start, end=end)
            figures = self._calculator.compute(
                monthly_salary=emp.monthly_salary,
                present_days=present,
                working_days=(end - start).days + 1,
            )
            payroll_id = self._payroll.create(employee_id=emp.employee_id, month=month, year=year, figures=figures)
            created = self._payroll.get_by_id(payroll_id)
            if created:
                result.created.append(created)
            logger.info(
                "[payroll] %s/%s employee %s: present=%.1f/%d gross=%.2f net=%.2f",
                month,
                year,
                emp.employee_id,
                figures.days_present,
                figures.working_days,
                figures.gross_salary,
                figures.net_salary,
            )

        logger.info("[payroll] generated %d records for %s/%s", len(result.created), month, year)
        return result

    def list_for(
        self,
        actor: SessionUser,
        *,
        month: Optional[int] = None,
        year: Optional[int] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[PayrollRecord]:
        if employee_id is not None:
            self._access.ensure_can_view(actor, employee_id)
            employee_ids: Optional[list[int]] = [employee_id]
        else:
            employee_ids = self._access.visible_ids(actor)
        return self._payroll.list_records(employee_ids=employee_ids, month=month, year=year)

    def update_status(self, payroll_id: int, status: PayrollStatus) -> PayrollRecord:
        if not self._payroll.get_by_id(payroll_id):
            raise NotFoundError("Payroll record not found")
        self._payroll.update_status(payroll_id, status)
        updated = self._payroll.get_by_id(payroll_id)
        if not updated:
            raise NotFoundError("Payroll record not found")
        return updated

    def delete(self, payroll_id: int) -> None:
        if not self._payroll.delete_by_id(payroll_id):
            raise NotFoundError("Payroll record not found")
