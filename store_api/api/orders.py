from flask import Blueprint, g, jsonify
from marshmallow import EXCLUDE, Schema, fields, validate

from store_api.api.payload import load_payload, request_payload
from store_api.api.serializers import order_to_dict
from store_api.middleware.auth import optional_auth, require_admin
from store_api.models.database import OrderStatus
from store_api.services import get_services

orders_bp = Blueprint("orders", __name__, url_prefix="/api/orders")


class OrderItemSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.Raw(allow_none=True)
    title = fields.String(required=True, validate=validate.Length(min=1))
    price = fields.Decimal(required=True, validate=validate.Range(min=0))
    quantity = fields.Integer(required=True, validate=validate.Range(min=1))
    image = fields.String(allow_none=True)


class CreateOrderSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    customer_name = fields.String(data_key="customerName", required=True,
                                  validate=validate.Length(min=2, max=100))
    total = fields.Decimal(required=True, validate=validate.Range(min=0))
    items = fields.List(fields.Nested(OrderItemSchema), required=True,
                        validate=validate.Length(min=1, error="At least one item is required"))
    user_id = fields.Integer(data_key="userId", allow_none=True, load_default=None)
    shipping_address = fields.Raw(data_key="shippingAddress", allow_none=True, load_default=None)


class UpdateStatusSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    status = fields.String(required=True, validate=validate.OneOf(
        OrderStatus.values(), error="Invalid order status"))


@orders_bp.route("", methods=["GET"])
@require_admin
def list_orders():
    """List every order, newest first (admin only)."""
    services = get_services()
    orders = services.orders.list_orders(g.current_user, scope=services.orders.SCOPE_ALL)
    return jsonify({
        "success": True,
        "data": [order_to_dict(o, include_user=True) for o in orders],
    })


@orders_bp.route("", methods=["POST"])
@optional_auth
def create_order():
    """Create an order from a checked-out cart."""
    payload = request_payload()
    data = load_payload(CreateOrderSchema(), payload)

    # Only admins may name the owning user. Customers always order for
    # themselves and guest orders belong to nobody.
    principal = g.current_user
    if principal is None:
        user_id = None
    elif principal.is_admin:
        user_id = data["user_id"]
    else:
        user_id = principal.id

    order = get_services().orders.create_order(
        customer_name=data["customer_name"],
        total=data["total"],
        items=payload["items"],
        user_id=user_id,
        shipping_address=data["shipping_address"],
    )
    return jsonify({"success": True, "data": order_to_dict(order)}), 201


@orders_bp.route("/<int:order_id>", methods=["GET"])
@require_admin
def get_order(order_id):
    """Fetch one order with its owner's details (admin only)."""
    order = get_services().orders.get_order(order_id)
    return jsonify({"success": True, "data": order_to_dict(order, include_user=True)})


@orders_bp.route("/<int:order_id>", methods=["PUT"])
@require_admin
def update_order_status(order_id):
    """Set the status of an order (admin only)."""
    data = load_payload(UpdateStatusSchema())
    order = get_services().orders.update_status(order_id, data["status"])
    return jsonify({
        "success": True,
        "message": f"Order status updated to {order.status.value}",
        "data": order_to_dict(order),
    })
