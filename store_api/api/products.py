from flask import Blueprint, jsonify, request
from marshmallow import EXCLUDE, Schema, fields, validate

from store_api.api.payload import load_payload
from store_api.api.serializers import product_to_dict
from store_api.middleware.auth import require_admin
from store_api.services import get_services

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


class ProductSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    title = fields.String(required=True, validate=validate.Length(min=3, max=255))
    description = fields.String(required=True, validate=validate.Length(min=1, max=5000))
    price = fields.Decimal(required=True, validate=validate.Range(min=0))
    category = fields.String(required=True, validate=validate.Length(min=1, max=255))
    stock = fields.Integer(validate=validate.Range(min=0))
    discount = fields.Integer(validate=validate.Range(min=0, max=100))
    rating = fields.Decimal(validate=validate.Range(min=0, max=5))
    is_featured = fields.Boolean(data_key="isFeatured")
    image = fields.String(validate=validate.Length(min=1))


def _featured_filter():
    raw = request.args.get("featured")
    if raw is None:
        return None
    return raw.strip().lower() in ("1", "true", "yes")


@products_bp.route("", methods=["GET"])
def list_products():
    """List products, optionally filtered by featured flag or category."""
    products = get_services().products.list_products(
        featured=_featured_filter(),
        category=request.args.get("category") or None,
    )
    return jsonify([product_to_dict(p) for p in products])


@products_bp.route("/featured", methods=["GET"])
def list_featured():
    """List featured products."""
    products = get_services().products.list_products(featured=True)
    return jsonify([product_to_dict(p) for p in products])


@products_bp.route("/<int:product_id>", methods=["GET"])
def get_product(product_id):
    """Fetch a single product."""
    product = get_services().products.get_product(product_id)
    return jsonify(product_to_dict(product))


@products_bp.route("", methods=["POST"])
@require_admin
def create_product():
    """Create a product from multipart form data with an optional image."""
    data = load_payload(ProductSchema())
    product = get_services().products.create_product(data, request.files.get("image"))
    return jsonify({"success": True, "data": product_to_dict(product)}), 201


@products_bp.route("/<int:product_id>", methods=["PUT"])
@require_admin
def update_product(product_id):
    """Partially update a product; a new image replaces the old one."""
    data = load_payload(ProductSchema(), partial=True)
    product = get_services().products.update_product(product_id, data, request.files.get("image"))
    return jsonify({
        "success": True,
        "message": "Product updated successfully",
        "data": product_to_dict(product),
    })


@products_bp.route("/<int:product_id>", methods=["DELETE"])
@require_admin
def delete_product(product_id):
    """Delete a product (admin only)."""
    get_services().products.delete_product(product_id)
    return jsonify({"success": True, "message": "Product deleted successfully"})
