from flask import request
from marshmallow import Schema

from store_api.errors import ValidationError


def request_payload() -> dict:
    """Body of the request as a dict, whether sent as JSON or as a form.

    Blank form fields are dropped so optional fields fall back to their
    defaults instead of failing type conversion.
    """
    if request.is_json:
        return request.get_json(silent=True) or {}
    return {key: value for key, value in request.form.items() if value != ""}


def load_payload(schema: Schema, payload: dict = None, partial: bool = False) -> dict:
    """Validate then deserialize, raising ValidationError with per-field messages."""
    payload = request_payload() if payload is None else payload
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be an object")

    errors = schema.validate(payload, partial=partial)
    if errors:
        raise ValidationError(errors=errors)
    return schema.load(payload, partial=partial)
