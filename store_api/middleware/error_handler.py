import logging

from flask import jsonify
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from store_api.errors import ApiError, InternalError
from store_api.models.database import db

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    """Render every failure in the API's JSON envelope."""

    @app.errorhandler(ApiError)
    def handle_api_error(error: ApiError):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SchemaValidationError)
    def handle_schema_error(error: SchemaValidationError):
        messages = error.messages if isinstance(error.messages, dict) else {"_schema": error.messages}
        return jsonify({
            "success": False,
            "message": "Validation failed",
            "errors": messages,
        }), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"success": False, "message": error.description}), error.code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error: SQLAlchemyError):
        db.session.rollback()
        logger.exception("Database error")
        return jsonify(InternalError().to_dict()), 500

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        db.session.rollback()
        logger.exception("Unhandled error")
        return jsonify(InternalError().to_dict()), 500
