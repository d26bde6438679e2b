from flask import Blueprint, current_app, jsonify
from marshmallow import EXCLUDE, Schema, fields, pre_load, validate

from store_api.api.payload import load_payload
from store_api.api.serializers import user_to_dict
from store_api.extensions import limiter
from store_api.services import get_services

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")

PASSWORD_PATTERN = r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&#])[A-Za-z\d@$!%*?&#]"
PHONE_PATTERN = r"^[\d\s\-+()]+$"


def auth_rate_limit():
    return current_app.config["AUTH_RATE_LIMIT"]


class EmailSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)

    @pre_load
    def normalize_email(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get("email"), str):
            data = dict(data, email=data["email"].strip().lower())
        return data


class RegisterSchema(EmailSchema):
    name = fields.String(required=True, validate=validate.Length(min=2, max=100))
    password = fields.String(required=True, validate=[
        validate.Length(min=8, max=128),
        validate.Regexp(
            PASSWORD_PATTERN,
            error="Password must contain uppercase, lowercase, number, and special character",
        ),
    ])
    phone = fields.String(load_default=None, allow_none=True,
                          validate=validate.Regexp(PHONE_PATTERN, error="Invalid phone number format"))

    @pre_load
    def strip_name(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get("name"), str):
            data = dict(data, name=data["name"].strip())
        return data


class LoginSchema(EmailSchema):
    password = fields.String(required=True, validate=validate.Length(min=1))


@auth_bp.route("/register", methods=["POST"])
@limiter.limit(auth_rate_limit)
def register():
    """Register a new customer account."""
    data = load_payload(RegisterSchema())
    user = get_services().auth.register_user(
        name=data["name"],
        email=data["email"],
        password=data["password"],
        phone=data.get("phone"),
    )
    return jsonify({
        "success": True,
        "message": "Registration successful",
        "user": user_to_dict(user),
    }), 201


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(auth_rate_limit)
def login():
    """Authenticate and receive a JWT token."""
    data = load_payload(LoginSchema())
    token, user = get_services().auth.authenticate(data["email"], data["password"])

    response = jsonify({
        "success": True,
        "token": token,
        "role": user.role.value,
        "user": {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "role": user.role.value,
        },
    })
    response.set_cookie(
        current_app.config["JWT_COOKIE_NAME"],
        token,
        max_age=current_app.config["JWT_EXPIRY_MINUTES"] * 60,
        httponly=True,
        secure=current_app.config["COOKIE_SECURE"],
        samesite="None" if current_app.config["COOKIE_SECURE"] else "Lax",
    )
    return response, 200


@auth_bp.route("/logout", methods=["POST"])
def logout():
    """Drop the auth cookie. Issued tokens stay valid until they expire."""
    response = jsonify({"success": True, "message": "Logged out successfully"})
    response.delete_cookie(
        current_app.config["JWT_COOKIE_NAME"],
        httponly=True,
        secure=current_app.config["COOKIE_SECURE"],
        samesite="None" if current_app.config["COOKIE_SECURE"] else "Lax",
    )
    return response, 200
