from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.decorators import current_viewer, login_required
from ..common.http import csv_response, json_body
from ..common.serialization import to_dict
from ..common.validators import require_iso_date
from ..container import Container
from ..reports.export import attendance_csv, export_filename
from ..reports.filtering import FilterSelection
from ..users.controller import user_json
from .model import AttendanceRow
from .service import DailyStatus


def row_json(row: AttendanceRow) -> dict:
    out = to_dict(row)
    out["date"] = row.filter_date.isoformat() if row.filter_date else None
    out["groupName"] = row.group_name
    return out


def daily_json(item: DailyStatus) -> dict:
    out = user_json(item.user)
    if item.record:
        attendance = to_dict(item.record)
    elif item.on_leave:
        # approved leave with no stored record yet
        attendance = {
            "id": None,
            "userId": item.user.id,
            "date": item.day.isoformat(),
            "status": item.status.value,
            "markedAt": "Pre-approved",
            "markedBy": None,
        }
    else:
        attendance = None
    out["attendance"] = attendance
    out["todayStatus"] = item.status.value
    return out


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance")
    @login_required
    def attendance_list():
        rows = container.attendance_service.list_view(current_viewer(), FilterSelection.from_args(request.args))
        return jsonify([row_json(r) for r in rows])

    @app.route("/api/attendance.csv", methods=["GET"], endpoint="api_attendance_csv")
    @login_required
    def attendance_export():
        selection = FilterSelection.from_args(request.args)
        rows = container.attendance_service.list_view(current_viewer(), selection)
        filename = export_filename("attendance", selection, container.attendance_service.today())
        return csv_response(app, attendance_csv(rows), filename=filename)

    @app.route("/api/attendance/filters", methods=["GET"], endpoint="api_attendance_filters")
    @login_required
    def attendance_filters():
        return jsonify({"classes": container.attendance_service.filter_options(current_viewer())})

    @app.route("/api/my-attendance", methods=["GET"], endpoint="api_my_attendance")
    @login_required
    def my_attendance():
        return jsonify([row_json(r) for r in container.attendance_service.my_attendance(current_viewer())])

    @app.route("/api/attendance-today", methods=["GET"], endpoint="api_attendance_today")
    @login_required
    def attendance_today():
        raw = request.args.get("date")
        day = require_iso_date(raw, "date") if raw else None
        items = container.attendance_service.today_view(current_viewer(), day)
        return jsonify([daily_json(i) for i in items])

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="api_attendance_mark")
    @login_required
    def mark_attendance():
        record = container.attendance_service.mark(current_viewer(), json_body())
        return jsonify(to_dict(record))
