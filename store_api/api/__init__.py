from store_api.api.admin import admin_bp
from store_api.api.auth import auth_bp
from store_api.api.categories import categories_bp
from store_api.api.orders import orders_bp
from store_api.api.products import products_bp
from store_api.api.users import user_bp, users_bp

__all__ = [
    "admin_bp",
    "auth_bp",
    "categories_bp",
    "orders_bp",
    "products_bp",
    "user_bp",
    "users_bp",
]
