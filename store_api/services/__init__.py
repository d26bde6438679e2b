from dataclasses import dataclass

from flask import current_app

from store_api.models.repositories import (
    CategoryRepository,
    OrderRepository,
    ProductRepository,
    UserRepository,
)
from store_api.services.auth_service import AuthService
from store_api.services.catalog_service import CategoryService, ProductService
from store_api.services.order_service import OrderService
from store_api.services.stats_service import StatsService
from store_api.services.uploads import ImageStore
from store_api.services.user_service import UserService

EXTENSION_KEY = "store_api"


@dataclass
class Services:
    auth: AuthService
    products: ProductService
    categories: CategoryService
    orders: OrderService
    users: UserService
    stats: StatsService

    @classmethod
    def build(cls, session, config) -> "Services":
        """Wire repositories and services once, at application start."""
        users = UserRepository(session)
        products = ProductRepository(session)
        categories = CategoryRepository(session)
        orders = OrderRepository(session)
        images = ImageStore(config["UPLOAD_FOLDER"])

        return cls(
            auth=AuthService(users, config["JWT_SECRET"], config["JWT_EXPIRY_MINUTES"]),
            products=ProductService(products, images, config["DEFAULT_PRODUCT_IMAGE"]),
            categories=CategoryService(categories, images, config["DEFAULT_CATEGORY_IMAGE"]),
            orders=OrderService(orders, users),
            users=UserService(users, images),
            stats=StatsService(products, orders, users),
        )


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
