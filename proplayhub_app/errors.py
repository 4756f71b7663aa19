# proplayhub_app/errors.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import jsonify, current_app
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from .extensions import db


class ApiError(Exception):
    """Erro de domínio com status HTTP; vira {"message": ...} na resposta."""
    status = 500

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class BadRequest(ApiError):
    status = 400


class Unauthorized(ApiError):
    status = 401


class Forbidden(ApiError):
    status = 403


class NotFound(ApiError):
    status = 404


class Conflict(ApiError):
    status = 409


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def _api_error(e: ApiError):
        return jsonify(message=e.message), e.status

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return jsonify(message=e.description or e.name), e.code

    @app.errorhandler(IntegrityError)
    def _integrity_error(e: IntegrityError):
        db.session.rollback()
        current_app.logger.warning("Integrity error: %s", e.orig)
        return jsonify(message="Resource already exists."), 409

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        db.session.rollback()
        current_app.logger.exception("Unhandled error")
        return jsonify(message="Server error"), 500
