from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.datetime_utils import parse_iso_date
from ..common.web import api_errors, current_actor, json_body, json_flag, login_required, optional_int, roles_required
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from .department_model import Department
from .model import Employee


def employee_json(e: Employee) -> dict:
    return {
        "employeeId": e.employee_id,
        "employeeCode": e.employee_code,
        "fullName": e.full_name,
        "email": e.email,
        "role": e.role.value,
        "deptId": e.dept_id,
        "deptName": e.dept_name,
        "reportingHeadId": e.reporting_head_id,
        "dateOfJoining": e.date_of_joining.isoformat(),
        "monthlySalary": e.monthly_salary,
        "isActive": e.is_active,
    }


def department_json(d: Department) -> dict:
    return {"deptId": d.dept_id, "deptName": d.dept_name, "code": d.code, "isActive": d.is_active}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    @api_errors
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.clear()
        session.permanent = json_flag(data, "rememberMe", False)
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

        session["employee_id"] = s_user.employee_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        session["dept_id"] = s_user.dept_id

        return jsonify(
            {
                "success": True,
                "user": {
                    "employeeId": s_user.employee_id,
                    "name": s_user.full_name,
                    "role": s_user.role.value,
                    "deptId": s_user.dept_id,
                },
            }
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    @api_errors
    def me():
        employee = container.employee_service.get(current_actor().employee_id)
        return jsonify({"success": True, "user": employee_json(employee)})

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @roles_required(Role.ADMIN, Role.MANAGER)
    @api_errors
    def list_employees():
        employees = container.employee_service.list_for(current_actor())
        return jsonify({"success": True, "employees": [employee_json(e) for e in employees]})

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @roles_required(Role.ADMIN)
    @api_errors
    def create_employee():
        data = json_body()
        try:
            role = Role(str(data.get("role") or Role.EMPLOYEE.value).upper())
        except ValueError:
            raise ValidationError("Invalid role")

        joined = data.get("dateOfJoining")
        try:
            salary = float(data.get("monthlySalary") or 0)
        except (TypeError, ValueError):
            raise ValidationError("Invalid monthly salary")

        employee_id = container.employee_service.create_employee(
            full_name=data.get("fullName", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            role=role,
            dept_id=optional_int(data.get("deptId")),
            reporting_head_id=optional_int(data.get("reportingHeadId")),
            date_of_joining=parse_iso_date(joined) if joined else None,
            monthly_salary=salary,
            employee_code=data.get("employeeCode"),
        )
        return jsonify({"success": True, "employeeId": employee_id}), 201

    @app.route("/api/employees/<int:employee_id>/toggle-active", methods=["POST"], endpoint="employees_toggle")
    @roles_required(Role.ADMIN)
    @api_errors
    def toggle_active(employee_id: int):
        is_active = container.employee_service.toggle_active(employee_id)
        return jsonify({"success": True, "employeeId": employee_id, "isActive": is_active})

    @app.route("/api/departments", methods=["GET"], endpoint="departments_list")
    @login_required
    @api_errors
    def list_departments():
        departments = container.department_service.list_all()
        return jsonify({"success": True, "departments": [department_json(d) for d in departments]})

    @app.route("/api/departments", methods=["POST"], endpoint="departments_create")
    @roles_required(Role.ADMIN)
    @api_errors
    def create_department():
        data = json_body()
        dept_id = container.department_service.create(dept_name=data.get("deptName", ""), code=data.get("code"))
        return jsonify({"success": True, "deptId": dept_id}), 201
