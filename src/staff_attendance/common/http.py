from __future__ import annotations

from typing import Any, Dict

from flask import Flask, request

from ..core.exceptions import ValidationError


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("Invalid request data")
    return data


def csv_response(app: Flask, text: str, *, filename: str):
    # BOM so spreadsheet apps pick UTF-8
    return app.response_class(
        text.encode("utf-8-sig"),
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
