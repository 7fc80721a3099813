from __future__ import annotations

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError


def register_error_handlers(app: Flask) -> None:
    """Translate exceptions into ``{"message": ...}`` JSON responses."""

    @app.errorhandler(DomainError)
    def handle_domain_error(err: DomainError):
        return jsonify({"message": str(err)}), err.status_code

    @app.errorhandler(404)
    def handle_not_found(_err):
        return jsonify({"message": "Not found"}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(_err):
        return jsonify({"message": "Method not allowed"}), 405

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        return jsonify({"message": err.description or err.name}), err.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        app.logger.exception("unhandled error: %s", err)
        return jsonify({"message": "Server error"}), 500
