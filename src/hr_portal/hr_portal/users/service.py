from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .department_model import Department
from .department_repository import DepartmentRepository
from .model import Employee, SessionUser
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate an employee (login)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def authenticate(self, email: str, password: str) -> SessionUser:
        employee = self._employees.get_by_email((email or "").strip().lower())
        if not employee or not employee.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(employee.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hash in the database
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        logger.info("[auth] employee %s logged in", employee.employee_id)
        return SessionUser(
            employee_id=employee.employee_id,
            full_name=employee.full_name,
            role=employee.role,
            dept_id=employee.dept_id,
        )


class TeamAccess:
    """Role scoping: admins see everyone, managers themselves plus direct reports, employees themselves."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def visible_ids(self, actor: SessionUser) -> Optional[list[int]]:
        """Employee ids the actor may see; None means no restriction."""

        if actor.role == Role.ADMIN:
            return None
        if actor.role == Role.MANAGER:
            return [actor.employee_id, *self._employees.list_direct_report_ids(actor.employee_id)]
        return [actor.employee_id]

    def is_direct_report(self, manager_id: int, employee_id: int) -> bool:
        return employee_id in self._employees.list_direct_report_ids(manager_id)

    def ensure_can_view(self, actor: SessionUser, employee_id: int) -> None:
        allowed = self.visible_ids(actor)
        if allowed is not None and employee_id not in allowed:
            raise AuthorizationError("Forbidden")

    def resolve_target(self, actor: SessionUser, requested_id: Optional[int]) -> int:
        """Employees always act for themselves; admins and managers may name someone they can see."""

        if requested_id is None or actor.role == Role.EMPLOYEE:
            return actor.employee_id
        self.ensure_can_view(actor, requested_id)
        return requested_id


class EmployeeService:
    """Use case: manage employees (admin)."""

    def __init__(self, employees: EmployeeRepository, access: TeamAccess):
        self._employees = employees
        self._access = access

    def list_for(self, actor: SessionUser) -> Sequence[Employee]:
        allowed = self._access.visible_ids(actor)
        if allowed is None:
            return self._employees.list_all()
        return self._employees.list_by_ids(allowed)

    def get(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def create_employee(
        self,
        *,
        full_name: str,
        email: str,
        password: str,
        role: Role,
        dept_id: Optional[int],
        reporting_head_id: Optional[int],
        date_of_joining: Optional[date],
        monthly_salary: float,
        employee_code: Optional[str] = None,
    ) -> int:
        full_name = require_non_empty(full_name, "Full name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._employees.get_by_email(email):
            raise ValidationError("Email already exists")
        if monthly_salary < 0:
            raise ValidationError("Monthly salary cannot be negative")
        if reporting_head_id is not None:
            head = self._employees.get_by_id(reporting_head_id)
            if not head or head.role == Role.EMPLOYEE:
                raise ValidationError("Reporting head must be a manager or admin")

        employee_id = self._employees.create_employee(
            employee_code=(employee_code or "").strip() or self._employees.next_employee_code(),
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            dept_id=dept_id,
            reporting_head_id=reporting_head_id,
            date_of_joining=date_of_joining or date.today(),
            monthly_salary=float(monthly_salary),
        )
        logger.info("[employees] created employee %s (%s)", employee_id, role.value)
        return employee_id

    def toggle_active(self, employee_id: int) -> bool:
        employee = self.get(employee_id)
        if employee.role == Role.ADMIN and employee.is_active:
            raise ValidationError("Cannot deactivate an admin account")

        new_state = not employee.is_active
        if not self._employees.set_active(employee_id, is_active=new_state):
            raise ValidationError("Failed to update employee")
        return new_state


class DepartmentService:
    def __init__(self, departments: DepartmentRepository):
        self._departments = departments

    def list_all(self) -> Sequence[Department]:
        return self._departments.list_all()

    def create(self, *, dept_name: str, code: Optional[str] = None) -> int:
        dept_name = require_non_empty(dept_name, "Department name")
        code = (code or "").strip().upper() or None

        if self._departments.get_by_name(dept_name):
            raise ValidationError("Department already exists")
        if code and self._departments.get_by_code(code):
            raise ValidationError("Department code already exists")
        return self._departments.create(dept_name=dept_name, code=code)
