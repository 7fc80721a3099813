from __future__ import annotations

from flask import Flask, jsonify

from ..common.decorators import current_viewer, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard/metrics", methods=["GET"], endpoint="api_dashboard_metrics")
    @login_required
    def dashboard_metrics():
        return jsonify(container.metrics_service.metrics(current_viewer()))
