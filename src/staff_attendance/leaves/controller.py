from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.decorators import current_viewer, login_required
from ..common.http import csv_response, json_body
from ..common.serialization import to_dict
from ..container import Container
from ..reports.export import export_filename, leave_requests_csv
from ..reports.filtering import FilterSelection
from .model import LeaveRow


def row_json(row: LeaveRow) -> dict:
    out = to_dict(row)
    out["leaveTypeLabel"] = row.leave_type_label
    out["groupName"] = row.group_name
    return out


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leave-request", methods=["POST"], endpoint="api_leave_request")
    @login_required
    def submit_leave():
        leave = container.leave_service.submit(current_viewer(), json_body())
        return jsonify(to_dict(leave)), 201

    @app.route("/api/leave-requests", methods=["GET"], endpoint="api_leave_requests")
    @login_required
    def leave_list():
        rows = container.leave_service.list_view(current_viewer(), FilterSelection.from_args(request.args))
        return jsonify([row_json(r) for r in rows])

    @app.route("/api/leave-requests.csv", methods=["GET"], endpoint="api_leave_requests_csv")
    @login_required
    def leave_export():
        selection = FilterSelection.from_args(request.args)
        rows = container.leave_service.list_view(current_viewer(), selection)
        filename = export_filename("leave_requests", selection, container.leave_service.today())
        return csv_response(app, leave_requests_csv(rows), filename=filename)

    @app.route("/api/leave-requests/filters", methods=["GET"], endpoint="api_leave_request_filters")
    @login_required
    def leave_filters():
        return jsonify({"classes": container.leave_service.filter_options(current_viewer())})

    @app.route("/api/leave-requests/respond", methods=["POST"], endpoint="api_leave_respond")
    @login_required
    def respond_leave():
        leave = container.leave_service.respond(current_viewer(), json_body())
        return jsonify(to_dict(leave))
