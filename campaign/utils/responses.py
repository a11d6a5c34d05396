"""Helpers for consistent JSON response schema."""

from __future__ import annotations

from typing import Any

from flask import Response, jsonify


def ok(
    data: Any = None,
    status_code: int = 200,
    message: str | None = None,
    pagination: dict[str, int] | None = None,
) -> Response:
    """Success response."""

    body: dict[str, Any] = {"status": "success", "message": message, "data": data}
    if pagination is not None:
        body["pagination"] = pagination
    return jsonify(body), status_code


def fail(code: str, message: str, status_code: int, details: Any | None = None) -> Response:
    """Error response."""

    return (
        jsonify(
            {
                "status": "error",
                "statusCode": status_code,
                "code": code,
                "message": message,
                "details": details,
            }
        ),
        status_code,
    )


def attachment(content: bytes, mimetype: str, filename: str) -> Response:
    """File download response."""

    response = Response(content, status=200, mimetype=mimetype)
    response.headers["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response
