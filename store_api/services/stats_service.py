from datetime import datetime, timezone
from decimal import Decimal

from store_api.models.repositories import OrderRepository, ProductRepository, UserRepository


def growth_percent(current, previous) -> float:
    """Month-over-month change in percent, rounded to one decimal."""
    current, previous = Decimal(str(current)), Decimal(str(previous))
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round(float((current - previous) / previous * 100), 1)


def month_bounds(now: datetime) -> tuple:
    """Return (previous month start, current month start)."""
    current = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if current.month == 1:
        previous = current.replace(year=current.year - 1, month=12)
    else:
        previous = current.replace(month=current.month - 1)
    return previous, current


class StatsService:
    """Dashboard aggregates."""

    def __init__(self, products: ProductRepository, orders: OrderRepository, users: UserRepository):
        self.products = products
        self.orders = orders
        self.users = users

    def summary(self, now: datetime = None) -> dict:
        now = now or datetime.now(timezone.utc)
        previous_start, current_start = month_bounds(now)

        growth = {
            "products": growth_percent(
                self.products.count(since=current_start),
                self.products.count(since=previous_start, until=current_start),
            ),
            "orders": growth_percent(
                self.orders.count(since=current_start),
                self.orders.count(since=previous_start, until=current_start),
            ),
            "revenue": growth_percent(
                self.orders.revenue(since=current_start),
                self.orders.revenue(since=previous_start, until=current_start),
            ),
        }
        growth["overall"] = round(sum(growth.values()) / len(growth), 1)

        return {
            "products": self.products.count(),
            "orders": self.orders.count(),
            "revenue": float(self.orders.revenue()),
            "customers": self.users.count_customers(),
            "growth": growth,
        }
