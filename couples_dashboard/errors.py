"""Centralised error handling and custom exceptions.

This module defines custom exception classes and provides
Flask error handlers that serialise them into JSON responses.
By using custom exceptions, the service layer can signal
specific error conditions (not-found, validation, data-access)
without coupling itself to HTTP response codes. The Flask app
will register these handlers during application factory
initialisation.
"""
from __future__ import annotations

import logging

from flask import jsonify

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str, fields: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.fields = fields or {}

    def to_response(self, status_code: int = 400):
        response = {
            "error": {
                "code": "VALIDATION_ERROR",
                "message": self.message,
                "fields": self.fields,
            }
        }
        return jsonify(response), status_code


class NotFoundError(Exception):
    """Raised when a requested resource cannot be found."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_response(self, status_code: int = 404):
        response = {
            "error": {
                "code": "NOT_FOUND",
                "message": self.message,
            }
        }
        return jsonify(response), status_code


class DataAccessError(Exception):
    """Raised when the backing store is unreachable or rejects a write."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_response(self, status_code: int = 500):
        response = {
            "error": {
                "code": "DATA_ACCESS_ERROR",
                "message": self.message,
                "retryable": True,
            }
        }
        return jsonify(response), status_code


def register_error_handlers(app) -> None:
    """Register custom error handlers on the given Flask app."""
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return err.to_response(400)

    @app.errorhandler(NotFoundError)
    def handle_not_found_error(err: NotFoundError):
        return err.to_response(404)

    @app.errorhandler(DataAccessError)
    def handle_data_access_error(err: DataAccessError):
        logger.error("Data access fault surfaced to client: %s", err.message)
        return err.to_response(500)
