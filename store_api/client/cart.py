from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List


@dataclass
class CartLine:
    product: dict
    quantity: int = 1

    @property
    def price(self) -> Decimal:
        return Decimal(str(self.product["price"]))

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


@dataclass
class Cart:
    """In-memory shopping cart keyed by product id.

    Lines never drop below a quantity of one: lowering a line under one
    removes it instead.
    """

    lines: Dict[object, CartLine] = field(default_factory=dict)

    def add(self, product: dict, quantity: int = 1) -> CartLine:
        if quantity < 1:
            raise ValueError("quantity must be at least 1")
        line = self.lines.get(product["id"])
        if line is None:
            line = self.lines[product["id"]] = CartLine(dict(product), quantity)
        else:
            line.quantity += quantity
        return line

    def update_quantity(self, product_id, quantity: int) -> None:
        if product_id not in self.lines:
            raise KeyError(product_id)
        if quantity < 1:
            self.remove(product_id)
        else:
            self.lines[product_id].quantity = quantity

    def increment(self, product_id) -> None:
        self.update_quantity(product_id, self.lines[product_id].quantity + 1)

    def decrement(self, product_id) -> None:
        self.update_quantity(product_id, self.lines[product_id].quantity - 1)

    def remove(self, product_id) -> None:
        self.lines.pop(product_id, None)

    def clear(self) -> None:
        self.lines.clear()

    @property
    def total(self) -> Decimal:
        return sum((line.line_total for line in self.lines.values()), Decimal("0"))

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines.values())

    def is_empty(self) -> bool:
        return not self.lines

    def to_order_items(self) -> List[dict]:
        """Snapshot of the lines in the shape stored on an order."""
        return [
            {
                "id": line.product["id"],
                "title": line.product.get("title"),
                "price": float(line.price),
                "quantity": line.quantity,
                "image": line.product.get("image"),
            }
            for line in self.lines.values()
        ]
