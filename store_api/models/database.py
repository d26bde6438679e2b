import enum
import json
from contextlib import contextmanager
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def _utcnow():
    return datetime.now(timezone.utc)


class Role(enum.Enum):
    ADMIN = "admin"
    CUSTOMER = "customer"


class OrderStatus(enum.Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @classmethod
    def values(cls) -> list:
        return [status.value for status in cls]


@contextmanager
def transaction(session):
    """Commit on success, roll back on any failure."""
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(
        db.Enum(Role, values_callable=lambda roles: [r.value for r in roles], name="user_role"),
        nullable=False,
        default=Role.CUSTOMER,
    )
    phone = db.Column(db.String(255))
    profile_image = db.Column(db.Text)
    is_blocked = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    orders = db.relationship("Order", back_populates="user", lazy="dynamic",
                             passive_deletes=True)

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def __repr__(self):
        return f"<User {self.email}>"


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    category = db.Column(db.String(255), nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)
    image = db.Column(db.Text, nullable=False)
    discount = db.Column(db.Integer, nullable=False, default=0)
    rating = db.Column(db.Numeric(2, 1), nullable=False, default=4.5)
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<Product {self.title}>"


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), unique=True, nullable=False)
    description = db.Column(db.Text)
    image = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<Category {self.name}>"


class Order(db.Model):
    __tablename__ = "orders"

    id = db.Column(db.Integer, primary_key=True)
    customer_name = db.Column(db.String(255), nullable=False)
    total = db.Column(db.Numeric(10, 2), nullable=False)
    status = db.Column(
        db.Enum(OrderStatus, values_callable=lambda statuses: [s.value for s in statuses], name="order_status"),
        nullable=False,
        default=OrderStatus.PENDING,
    )
    # JSON snapshot of the cart lines at checkout time
    items = db.Column(db.Text, nullable=False)
    shipping_address = db.Column(db.Text)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"),
                        nullable=True, index=True)
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    user = db.relationship("User", back_populates="orders")

    @property
    def item_list(self) -> list:
        return json.loads(self.items) if self.items else []

    @property
    def shipping_details(self):
        return json.loads(self.shipping_address) if self.shipping_address else None

    def __repr__(self):
        return f"<Order {self.id} {self.status.value}>"
