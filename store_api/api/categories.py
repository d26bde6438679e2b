from flask import Blueprint, jsonify, request
from marshmallow import EXCLUDE, Schema, fields, pre_load, validate

from store_api.api.payload import load_payload
from store_api.api.serializers import category_to_dict
from store_api.middleware.auth import require_admin
from store_api.services import get_services

categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


class CategorySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=2, max=100))
    description = fields.String(allow_none=True, validate=validate.Length(max=500))

    @pre_load
    def strip_strings(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        return {k: v.strip() if isinstance(v, str) else v for k, v in data.items()}


@categories_bp.route("", methods=["GET"])
def list_categories():
    """List all categories."""
    categories = get_services().categories.list_categories()
    return jsonify([category_to_dict(c) for c in categories])


@categories_bp.route("/<int:category_id>", methods=["GET"])
def get_category(category_id):
    """Fetch a single category."""
    category = get_services().categories.get_category(category_id)
    return jsonify(category_to_dict(category))


@categories_bp.route("", methods=["POST"])
@require_admin
def create_category():
    """Create a category with an optional image file."""
    data = load_payload(CategorySchema())
    category = get_services().categories.create_category(data, request.files.get("image"))
    return jsonify({"success": True, "data": category_to_dict(category)}), 201


@categories_bp.route("/<int:category_id>", methods=["PUT"])
@require_admin
def update_category(category_id):
    """Partially update a category; a new image replaces the old one."""
    data = load_payload(CategorySchema(), partial=True)
    category = get_services().categories.update_category(
        category_id, data, request.files.get("image")
    )
    return jsonify({
        "success": True,
        "message": "Category updated successfully",
        "data": category_to_dict(category),
    })


@categories_bp.route("/<int:category_id>", methods=["DELETE"])
@require_admin
def delete_category(category_id):
    """Delete a category (admin only)."""
    get_services().categories.delete_category(category_id)
    return jsonify({"success": True, "message": "Category deleted successfully"})
