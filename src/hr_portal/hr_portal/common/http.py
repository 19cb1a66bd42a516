from __future__ import annotations

import logging
from typing import Any, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, StoreError, ValidationError

logger = logging.getLogger(__name__)


def error_response(message: str, status: int, details: Optional[Any] = None):
    body: dict[str, Any] = {"error": message}
    if details is not None:
        body["details"] = details
    return jsonify(body), status


def json_body() -> dict:
    """Return the request JSON object or fail with a ValidationError."""

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object", details={"body": "Expected a JSON object"})
    return data


def register_error_handlers(app: Flask) -> None:
    """Map the domain exception taxonomy onto JSON error responses."""

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if isinstance(e, StoreError):
            logger.error("Datastore failure on %s %s: %s", request.method, request.path, e, exc_info=e.__cause__ or e)
            details = str(e.__cause__ or e) if app.config.get("DEBUG") else None
            return error_response(e.message, e.status_code, details)

        if e.status_code >= 500:
            logger.error("%s on %s %s: %s", type(e).__name__, request.method, request.path, e)
        else:
            logger.info("%s on %s %s: %s", type(e).__name__, request.method, request.path, e)
        return error_response(e.message, e.status_code, e.details)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return error_response(e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        details = str(e) if app.config.get("DEBUG") else None
        return error_response("Internal server error", 500, details)
