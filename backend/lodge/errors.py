import logging

from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .accounting import BillingError
from .extensions import db

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Error that is reported to the client as ``{"error": message}``."""

    status_code = 400

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequest(APIError):
    status_code = 400


class Unauthorized(APIError):
    status_code = 401


class NotFound(APIError):
    status_code = 404


class Conflict(APIError):
    status_code = 409


class InvoiceNumberTaken(Conflict):
    """The counter produced a number that is already printed on a bill.

    The counter has been moved past ``number``; the caller can simply retry.
    """

    def __init__(self, number: str):
        super().__init__(f"Invoice number {number} already issued, retry")
        self.number = number


def _error_response(message, status):
    return jsonify({"error": message}), status


def register_error_handlers(app: Flask):
    @app.errorhandler(APIError)
    def handle_api_error(err):
        db.session.rollback()
        return _error_response(err.message, err.status_code)

    @app.errorhandler(BillingError)
    def handle_billing_error(err):
        db.session.rollback()
        return _error_response(str(err), 400)

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        return _error_response(err.description, err.code)

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(err):
        db.session.rollback()
        logger.exception("database error")
        return _error_response("Database error", 500)
