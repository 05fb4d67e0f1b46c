from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import api_errors, current_actor, json_body, login_required, optional_int
from ..core.enums import LeaveStatus
from ..core.exceptions import ValidationError
from ..container import Container
from .model import LeaveRequest


def leave_json(leave: LeaveRequest) -> dict:
    return {
        "id": leave.request_id,
        "employeeId": leave.employee_id,
        "employeeName": leave.employee_name,
        "leaveType": leave.leave_type.value,
        "startDate": leave.start_date.isoformat(),
        "endDate": leave.end_date.isoformat(),
        "days": leave.days,
        "reason": leave.reason,
        "status": leave.status.value,
        "createdAt": leave.created_at.isoformat() if leave.created_at else None,
        "decidedBy": leave.decided_by,
        "decidedAt": leave.decided_at.isoformat() if leave.decided_at else None,
        "adminComment": leave.admin_comment,
    }


def _parse_leave_status(value) -> LeaveStatus:
    try:
        return LeaveStatus(str(value).upper())
    except ValueError:
        raise ValidationError("Invalid status")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leaves", methods=["GET"], endpoint="leaves_list")
    @login_required
    @api_errors
    def list_leaves():
        status = request.args.get("status")
        leaves = container.leave_service.list_for(
            current_actor(),
            employee_id=optional_int(request.args.get("employeeId")),
            status=_parse_leave_status(status) if status else None,
        )
        return jsonify({"success": True, "leaves": [leave_json(lv) for lv in leaves]})

    @app.route("/api/leaves", methods=["POST"], endpoint="leaves_apply")
    @login_required
    @api_errors
    def apply_leave():
        data = json_body()
        start = data.get("startDate")
        end = data.get("endDate")
        request_id = container.leave_service.apply(
            current_actor(),
            leave_type=data.get("leaveType"),
            start_date=parse_iso_date(start) if start else None,
            end_date=parse_iso_date(end) if end else None,
            reason=data.get("reason"),
            employee_id=optional_int(data.get("employeeId")),
        )
        return jsonify({"success": True, "id": request_id}), 201

    @app.route("/api/leaves", methods=["PUT"], endpoint="leaves_decide")
    @login_required
    @api_errors
    def decide_leave():
        data = json_body()
        request_id = optional_int(data.get("id"))
        if request_id is None:
            raise ValidationError("Leave ID required")
        if not data.get("status"):
            raise ValidationError("Status is required")

        leave = container.leave_service.decide(
            current_actor(),
            request_id=request_id,
            status=_parse_leave_status(data["status"]),
            admin_comment=data.get("adminComment"),
        )
        return jsonify({"success": True, "leave": leave_json(leave)})
