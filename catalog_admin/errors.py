"""Error taxonomy shared by the API handlers.

Every error renders as ``{"ok": false, "message": ..., "errors": [...]}``
through the handlers registered in :func:`register_error_handlers`.
"""

from flask import current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge


class CatalogError(Exception):
    status_code = 500

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    def to_dict(self):
        payload = {"ok": False, "message": self.message}
        if self.errors:
            payload["errors"] = self.errors
        return payload


class ValidationError(CatalogError):
    """Bad or missing input; ``errors`` holds ``{field, message}`` pairs."""

    status_code = 400


class NotFoundError(CatalogError):
    status_code = 404

    def __init__(self, message="Not found"):
        super().__init__(message)


class StorageError(CatalogError):
    """Unexpected database or filesystem failure."""

    status_code = 500


def field_error(field, message):
    return {"field": field, "message": message}


def register_error_handlers(app):
    from catalog_admin import db

    @app.errorhandler(CatalogError)
    def handle_catalog_error(error):
        if error.status_code >= 500:
            current_app.logger.error("❌ %s", error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        current_app.logger.exception("❌ Error de base de datos: %s", error)
        return jsonify({"ok": False, "message": "Server error"}), 500

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        return jsonify({"ok": False, "message": "Request terlalu besar."}), 413

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        if isinstance(error, HTTPException):
            return error
        db.session.rollback()
        current_app.logger.exception("❌ Error inesperado: %s", error)
        return jsonify({"ok": False, "message": "Server error"}), 500
