from flask import Blueprint, g, jsonify, request
from marshmallow import EXCLUDE, Schema, fields, validate

from store_api.api.auth import PHONE_PATTERN
from store_api.api.payload import load_payload
from store_api.api.serializers import order_to_dict, user_to_dict
from store_api.middleware.auth import require_admin, require_auth
from store_api.services import get_services

# Endpoints for the signed-in user
user_bp = Blueprint("user", __name__, url_prefix="/api/user")

# Account management for admins
users_bp = Blueprint("users", __name__, url_prefix="/api/users")


class ProfileSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(validate=validate.Length(min=2, max=100))
    phone = fields.String(allow_none=True,
                          validate=validate.Regexp(PHONE_PATTERN, error="Invalid phone number format"))


class BlockSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    is_blocked = fields.Boolean(data_key="isBlocked", required=True)


@user_bp.route("/profile", methods=["GET"])
@require_auth
def get_profile():
    """Profile of the signed-in user."""
    user = get_services().users.get_user(g.current_user.id)
    return jsonify({"success": True, "data": user_to_dict(user)})


@user_bp.route("/profile", methods=["PUT"])
@require_auth
def update_profile():
    """Update name or phone of the signed-in user."""
    data = load_payload(ProfileSchema(), partial=True)
    user = get_services().users.update_profile(g.current_user.id, data)
    return jsonify({
        "success": True,
        "message": "Profile updated successfully",
        "data": user_to_dict(user),
    })


@user_bp.route("/profile/image", methods=["POST"])
@require_auth
def upload_profile_image():
    """Replace the signed-in user's profile image."""
    user = get_services().users.set_profile_image(g.current_user.id, request.files.get("image"))
    return jsonify({
        "success": True,
        "message": "Profile image updated",
        "data": user_to_dict(user),
    })


@user_bp.route("/orders", methods=["GET"])
@require_auth
def my_orders():
    """Orders placed by the signed-in user, newest first."""
    orders = get_services().orders.list_orders(g.current_user)
    return jsonify([order_to_dict(o) for o in orders])


@user_bp.route("/orders/<int:order_id>/cancel", methods=["POST"])
@require_auth
def cancel_my_order(order_id):
    """Cancel one of the caller's own pending orders."""
    order = get_services().orders.cancel_order(order_id, g.current_user)
    return jsonify({
        "success": True,
        "message": "Order cancelled",
        "data": order_to_dict(order),
    })


@users_bp.route("", methods=["GET"])
@require_admin
def list_users():
    """List all users (admin only)."""
    users = get_services().users.list_users()
    return jsonify({"success": True, "data": [user_to_dict(u) for u in users]})


@users_bp.route("/<int:user_id>/block", methods=["PUT"])
@require_admin
def block_user(user_id):
    """Block or unblock a user account (admin only)."""
    data = load_payload(BlockSchema())
    user = get_services().users.set_blocked(g.current_user.id, user_id, data["is_blocked"])
    return jsonify({
        "success": True,
        "message": f"User {'blocked' if user.is_blocked else 'unblocked'} successfully",
        "data": user_to_dict(user),
    })
