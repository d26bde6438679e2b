import logging

from marshmallow import EXCLUDE, Schema, fields, pre_load, validate

from store_api.client.api import StoreClient
from store_api.client.cart import Cart
from store_api.errors import ValidationError

logger = logging.getLogger(__name__)

CHECKOUT_PHONE_PATTERN = r"^\+?[\d\s\-()]{10,}$"
ADDRESS_FIELDS = ("address", "city", "state", "postalCode", "country")


class CheckoutFormSchema(Schema):
    """Shipping and contact details collected before an order is placed."""

    class Meta:
        unknown = EXCLUDE

    fullName = fields.String(required=True, validate=validate.Length(min=1, error="Full name is required"))
    email = fields.Email(load_default=None, allow_none=True)
    phone = fields.String(required=True, validate=[
        validate.Length(min=1, error="Phone number is required"),
        validate.Regexp(CHECKOUT_PHONE_PATTERN, error="Phone number is invalid"),
    ])
    address = fields.String(required=True, validate=validate.Length(min=1, error="Address is required"))
    city = fields.String(required=True, validate=validate.Length(min=1, error="City is required"))
    state = fields.String(required=True, validate=validate.Length(min=1, error="State is required"))
    postalCode = fields.String(load_default=None, allow_none=True)
    country = fields.String(required=True, validate=validate.Length(min=1, error="Country is required"))

    @pre_load
    def strip_strings(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        return {k: v.strip() if isinstance(v, str) else v for k, v in data.items()}


def validate_checkout_form(form: dict) -> dict:
    schema = CheckoutFormSchema()
    errors = schema.validate(form)
    if errors:
        raise ValidationError("Please fix the highlighted fields", errors=errors)
    return schema.load(form)


def build_order_request(cart: Cart, details: dict, user_id=None) -> dict:
    """Turn a cart and validated checkout details into an order payload."""
    order = {
        "customerName": details["fullName"],
        "total": float(cart.total),
        "items": cart.to_order_items(),
        "shippingAddress": {
            "fullName": details["fullName"],
            "phone": details["phone"],
            "email": details.get("email"),
            **{name: details.get(name) for name in ADDRESS_FIELDS},
        },
    }
    if user_id is not None:
        order["userId"] = user_id
    return order


def checkout(client: StoreClient, cart: Cart, form: dict) -> dict:
    """Validate the form, place the order and empty the cart.

    Returns the created order, which doubles as the confirmation payload.
    The cart is left untouched when validation or the request fails.
    """
    if cart.is_empty():
        raise ValidationError("Your cart is empty", errors={"items": ["At least one item is required"]})

    details = validate_checkout_form(form)
    user_id = client.user["id"] if client.user else None
    order = client.create_order(build_order_request(cart, details, user_id))

    cart.clear()
    logger.info("Checkout complete: order=%s", order["id"])
    return order
