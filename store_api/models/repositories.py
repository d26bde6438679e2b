"""
Explicit data-access objects for each table.

Repositories are built once by the application factory around the
request-scoped SQLAlchemy session and handed to the services, so no
service reaches for the ``Model.query`` globals.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select

from store_api.models.database import Category, Order, Product, Role, User


class Repository:
    model = None

    def __init__(self, session):
        self.session = session

    def get(self, entity_id: int):
        return self.session.get(self.model, entity_id)

    def add(self, entity):
        self.session.add(entity)
        self.session.flush()
        return entity

    def delete(self, entity) -> None:
        self.session.delete(entity)

    def count(self, since: Optional[datetime] = None, until: Optional[datetime] = None) -> int:
        stmt = select(func.count(self.model.id))
        stmt = self._between(stmt, since, until)
        return self.session.scalar(stmt) or 0

    def _between(self, stmt, since, until):
        if since is not None:
            stmt = stmt.where(self.model.created_at >= since)
        if until is not None:
            stmt = stmt.where(self.model.created_at < until)
        return stmt


class UserRepository(Repository):
    model = User

    def find_by_email(self, email: str) -> Optional[User]:
        return self.session.scalar(select(User).where(User.email == email))

    def list_all(self) -> List[User]:
        return list(self.session.scalars(select(User).order_by(User.created_at.desc(), User.id.desc())))

    def count_customers(self, since=None, until=None) -> int:
        stmt = select(func.count(User.id)).where(User.role == Role.CUSTOMER)
        return self.session.scalar(self._between(stmt, since, until)) or 0


class ProductRepository(Repository):
    model = Product

    def list(self, featured: Optional[bool] = None, category: Optional[str] = None) -> List[Product]:
        stmt = select(Product).order_by(Product.id)
        if featured is not None:
            stmt = stmt.where(Product.is_featured.is_(featured))
        if category:
            stmt = stmt.where(Product.category == category)
        return list(self.session.scalars(stmt))


class CategoryRepository(Repository):
    model = Category

    def list(self) -> List[Category]:
        return list(self.session.scalars(select(Category).order_by(Category.id)))

    def find_by_name(self, name: str) -> Optional[Category]:
        return self.session.scalar(select(Category).where(Category.name == name))


class OrderRepository(Repository):
    model = Order

    def _newest_first(self, stmt):
        return stmt.order_by(Order.created_at.desc(), Order.id.desc())

    def list_all(self) -> List[Order]:
        return list(self.session.scalars(self._newest_first(select(Order))))

    def list_for_user(self, user_id: int) -> List[Order]:
        stmt = self._newest_first(select(Order).where(Order.user_id == user_id))
        return list(self.session.scalars(stmt))

    def revenue(self, since=None, until=None):
        stmt = select(func.coalesce(func.sum(Order.total), 0))
        return self.session.scalar(self._between(stmt, since, until)) or 0
