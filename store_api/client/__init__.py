from store_api.client.api import ApiError, StoreClient
from store_api.client.cart import Cart, CartLine
from store_api.client.checkout import build_order_request, checkout, validate_checkout_form

__all__ = [
    "ApiError",
    "Cart",
    "CartLine",
    "StoreClient",
    "build_order_request",
    "checkout",
    "validate_checkout_form",
]
