import json
import logging
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from store_api.errors import Forbidden, NotFound, ValidationError
from store_api.models.database import Order, OrderStatus, transaction
from store_api.models.repositories import OrderRepository, UserRepository

logger = logging.getLogger(__name__)

# Transitions a customer may apply to their own order. Admins are not
# restricted by this table.
CUSTOMER_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CANCELLED},
}


def parse_status(value) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError(
            "Invalid order status",
            errors={"status": [f"Must be one of: {', '.join(OrderStatus.values())}"]},
        )


def items_subtotal(items: list) -> Optional[Decimal]:
    """Sum of price x quantity, or None when a line can't be priced."""
    total = Decimal("0")
    try:
        for item in items:
            total += Decimal(str(item["price"])) * int(item["quantity"])
    except (KeyError, TypeError, ValueError, InvalidOperation):
        return None
    return total


class OrderService:
    """Handles order business logic."""

    SCOPE_ALL = "all"
    SCOPE_MINE = "mine"

    def __init__(self, orders: OrderRepository, users: UserRepository):
        self.orders = orders
        self.users = users

    def create_order(self, customer_name: str, total, items: list,
                     user_id: Optional[int] = None, shipping_address=None) -> Order:
        """Persist a checkout as a new Pending order.

        ``items`` is stored verbatim as a JSON snapshot, so later product
        edits never reach historic orders. ``total`` is taken as supplied.
        """
        if not items:
            raise ValidationError("At least one item is required",
                                  errors={"items": ["At least one item is required"]})

        if user_id is not None and self.users.get(user_id) is None:
            raise ValidationError("Unknown user", errors={"userId": ["User not found"]})

        subtotal = items_subtotal(items)
        if subtotal is not None and subtotal.quantize(Decimal("0.01")) != Decimal(str(total)).quantize(Decimal("0.01")):
            logger.warning(
                "Order total differs from item subtotal: customer=%s total=%s subtotal=%s",
                customer_name, total, subtotal,
            )

        order = Order(
            customer_name=customer_name,
            total=Decimal(str(total)),
            status=OrderStatus.PENDING,
            items=json.dumps(items),
            shipping_address=json.dumps(shipping_address) if shipping_address is not None else None,
            user_id=user_id,
        )
        with transaction(self.orders.session):
            self.orders.add(order)

        logger.info("Order created: id=%s user_id=%s total=%s items=%d",
                    order.id, user_id, order.total, len(items))
        return order

    def get_order(self, order_id: int) -> Order:
        order = self.orders.get(order_id)
        if order is None:
            raise NotFound("Order not found")
        return order

    def list_orders(self, principal, scope: str = SCOPE_MINE) -> List[Order]:
        """List every order (admins) or only the caller's, newest first."""
        if scope == self.SCOPE_ALL:
            if not principal.is_admin:
                raise Forbidden()
            return self.orders.list_all()
        return self.orders.list_for_user(principal.id)

    def update_status(self, order_id: int, status) -> Order:
        """Overwrite the status of an order. Any recognized status is accepted."""
        new_status = parse_status(status)
        order = self.get_order(order_id)
        previous = order.status

        with transaction(self.orders.session):
            order.status = new_status

        logger.info("Order status changed: id=%s %s -> %s",
                    order.id, previous.value, new_status.value)
        return order

    def cancel_order(self, order_id: int, principal) -> Order:
        """Let a customer cancel one of their own orders."""
        order = self.get_order(order_id)
        if order.user_id != principal.id:
            raise Forbidden("You are not authorized to update this order")

        if OrderStatus.CANCELLED not in CUSTOMER_TRANSITIONS.get(order.status, set()):
            raise ValidationError("Only pending orders can be cancelled")

        with transaction(self.orders.session):
            order.status = OrderStatus.CANCELLED

        logger.info("Order cancelled by customer: id=%s user_id=%s", order.id, principal.id)
        return order
