"""Centralized error handlers.

Every handler discards the request session first: the teardown hook only
sees unhandled exceptions, so a handled error must not commit partial work.
"""

from __future__ import annotations

import logging

from flask import Flask, current_app
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from campaign.db import rollback_session
from campaign.errors import AppError, ConflictError, ValidationError
from campaign.utils.responses import fail

logger = logging.getLogger(__name__)


def _first_message(messages: object) -> str | None:
    if isinstance(messages, str):
        return messages
    if isinstance(messages, list):
        for item in messages:
            found = _first_message(item)
            if found:
                return found
    if isinstance(messages, dict):
        for item in messages.values():
            found = _first_message(item)
            if found:
                return found
    return None


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app."""

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        rollback_session()
        if exc.status_code >= 500:
            logger.warning("Request failed: %s (%s)", exc.message, exc.code)
        return fail(exc.code, exc.message, exc.status_code, exc.details)

    @app.errorhandler(MarshmallowValidationError)
    def _handle_schema_error(exc: MarshmallowValidationError):
        rollback_session()
        # exc.messages is a dict of field -> list[str]
        wrapped = ValidationError(
            message=_first_message(exc.messages) or "Dados inválidos.",
            details=exc.messages,
        )
        return fail(wrapped.code, wrapped.message, wrapped.status_code, wrapped.details)

    @app.errorhandler(IntegrityError)
    def _handle_integrity_error(exc: IntegrityError):
        rollback_session()
        # Constraint names and SQL stay in the log.
        logger.warning("Integrity error: %s", exc.orig if exc.orig is not None else exc)
        wrapped = ConflictError()
        return fail(wrapped.code, wrapped.message, wrapped.status_code, wrapped.details)

    @app.errorhandler(HTTPException)
    def _handle_http_exception(exc: HTTPException):
        rollback_session()
        status = int(getattr(exc, "code", 500) or 500)
        if status == 404:
            return fail("not_found", "Rota não encontrada.", 404)

        return fail(
            "http_error",
            getattr(exc, "description", "HTTP error"),
            status,
            details={"name": getattr(exc, "name", "HTTPException")},
        )

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        rollback_session()
        logger.exception("Unhandled exception")
        if current_app.config.get("APP_ENV") == "production":
            return fail("internal_error", "Internal Server Error", 500)
        return fail("internal_error", str(exc) or "An unexpected error occurred on the server.", 500)
