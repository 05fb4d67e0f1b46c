from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import parse_month_year
from ..common.web import api_errors, current_actor, json_body, login_required, optional_int, roles_required
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.enums import PayrollStatus, Role
from ..core.exceptions import ValidationError
from ..container import Container
from .model import PayrollRecord


def payroll_json(p: PayrollRecord) -> dict:
    return {
        "id": p.payroll_id,
        "employeeId": p.employee_id,
        "employeeName": p.employee_name,
        "month": p.month,
        "year": p.year,
        "workingDays": p.working_days,
        "daysPresent": p.days_present,
        "daysAbsent": p.days_absent,
        "basicSalary": p.basic_salary,
        "grossSalary": p.gross_salary,
        "professionalTax": p.professional_tax,
        "totalDeductions": p.total_deductions,
        "netSalary": p.net_salary,
        "status": p.status.value,
        "createdAt": p.created_at.isoformat() if p.created_at else None,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll", methods=["GET"], endpoint="payroll_list")
    @login_required
    @api_errors
    def list_payroll():
        args = request.args
        records = container.payroll_service.list_for(
            current_actor(),
            month=optional_int(args.get("month")),
            year=optional_int(args.get("year")),
            employee_id=optional_int(args.get("employeeId")),
        )
        return jsonify({"success": True, "payroll": [payroll_json(p) for p in records]})

    @app.route("/api/payroll", methods=["POST"], endpoint="payroll_generate")
    @roles_required(Role.ADMIN)
    @api_errors
    def generate_payroll():
        data = json_body()
        month, year = parse_month_year(data.get("month"), data.get("year"))
        raw_ids = data.get("employeeIds") or []
        if not isinstance(raw_ids, list):
            raise ValidationError("employeeIds must be a list")
        employee_ids = [i for i in (optional_int(v) for v in raw_ids) if i is not None]

        result = container.payroll_service.generate(month=month, year=year, employee_ids=employee_ids)
        return (
            jsonify(
                {
                    "success": True,
                    "message": f"Generated {len(result.created)} payroll records",
                    "payroll": [payroll_json(p) for p in result.created],
                    "skipped": result.skipped,
                }
            ),
            201,
        )

    @app.route("/api/payroll", methods=["PUT"], endpoint="payroll_update_status")
    @roles_required(Role.ADMIN)
    @api_errors
    def update_payroll_status():
        data = json_body()
        payroll_id = optional_int(data.get("id"))
        if payroll_id is None or not data.get("status"):
            raise ValidationError("ID and status required")
        try:
            status = PayrollStatus(str(data["status"]).upper())
        except ValueError:
            raise ValidationError("Invalid status")

        record = container.payroll_service.update_status(payroll_id, status)
        return jsonify({"success": True, "payroll": payroll_json(record)})

    @app.route("/api/payroll", methods=["DELETE"], endpoint="payroll_delete")
    @roles_required(Role.ADMIN)
    @api_errors
    def delete_payroll():
        payroll_id = optional_int(request.args.get("id"))
        if payroll_id is None:
            raise ValidationError("Payroll ID required")
        container.payroll_service.delete(payroll_id)
        return jsonify({"success": True})

    @app.route("/api/reports/attendance", methods=["GET"], endpoint="reports_attendance")
    @login_required
    @api_errors
    def attendance_report():
        today = now_local().date()
        start_s = request.args.get("start")
        end_s = request.args.get("end")
        end = parse_iso_date(end_s) if end_s else today
        start = parse_iso_date(start_s) if start_s else end - timedelta(days=DEFAULT_REPORT_DAYS)

        report = container.payroll_report_service.build_attendance_report(current_actor(), start=start, end=end)
        return jsonify(
            {
                "success": True,
                "start": start.isoformat(),
                "end": end.isoformat(),
                "rows": report.rows,
                "summary": report.summary,
            }
        )
