import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from store_api.errors import Conflict, NotFound
from store_api.models.database import Category, Product, transaction
from store_api.models.repositories import CategoryRepository, ProductRepository
from store_api.services.uploads import ImageStore

logger = logging.getLogger(__name__)

# Storage precision of the price and rating columns
PRICE_STEP = Decimal("0.01")
RATING_STEP = Decimal("0.1")


def round_amounts(data: dict) -> dict:
    """Round validated price and rating to the precision they are stored at."""
    if data.get("price") is not None:
        data["price"] = data["price"].quantize(PRICE_STEP, rounding=ROUND_HALF_UP)
    if data.get("rating") is not None:
        data["rating"] = data["rating"].quantize(RATING_STEP, rounding=ROUND_HALF_UP)
    return data


class ProductService:
    """Admin-managed product catalog."""

    def __init__(self, products: ProductRepository, images: ImageStore, default_image: str):
        self.products = products
        self.images = images
        self.default_image = default_image

    def list_products(self, featured: Optional[bool] = None, category: Optional[str] = None) -> List[Product]:
        return self.products.list(featured=featured, category=category)

    def get_product(self, product_id: int) -> Product:
        product = self.products.get(product_id)
        if product is None:
            raise NotFound("Product not found")
        return product

    def create_product(self, data: dict, image_file=None) -> Product:
        round_amounts(data)
        image_url = data.pop("image", None)
        image = self.images.save(image_file, "products") or image_url
        product = Product(image=image or self.default_image, **data)
        with transaction(self.products.session):
            self.products.add(product)

        logger.info("Product created: id=%s title=%s", product.id, product.title)
        return product

    def update_product(self, product_id: int, data: dict, image_file=None) -> Product:
        product = self.get_product(product_id)
        round_amounts(data)
        image = self.images.save(image_file, "products")
        if image:
            data["image"] = image

        with transaction(self.products.session):
            for field, value in data.items():
                setattr(product, field, value)

        logger.info("Product updated: id=%s fields=%s", product.id, sorted(data))
        return product

    def delete_product(self, product_id: int) -> None:
        # Orders keep their own item snapshot, so nothing references the row
        product = self.get_product(product_id)
        with transaction(self.products.session):
            self.products.delete(product)
        logger.info("Product deleted: id=%s", product_id)


class CategoryService:
    """Admin-managed product categories."""

    DUPLICATE_MESSAGE = "Category with this name already exists"

    def __init__(self, categories: CategoryRepository, images: ImageStore, default_image: str):
        self.categories = categories
        self.images = images
        self.default_image = default_image

    def list_categories(self) -> List[Category]:
        return self.categories.list()

    def get_category(self, category_id: int) -> Category:
        category = self.categories.get(category_id)
        if category is None:
            raise NotFound("Category not found")
        return category

    def _ensure_unique(self, name: str, category_id: Optional[int] = None) -> None:
        existing = self.categories.find_by_name(name)
        if existing is not None and existing.id != category_id:
            raise Conflict(self.DUPLICATE_MESSAGE, errors={"name": [self.DUPLICATE_MESSAGE]})

    def create_category(self, data: dict, image_file=None) -> Category:
        self._ensure_unique(data["name"])
        image = self.images.save(image_file, "categories")
        category = Category(
            name=data["name"],
            description=data.get("description"),
            image=image or self.default_image,
        )
        try:
            with transaction(self.categories.session):
                self.categories.add(category)
        except IntegrityError:
            raise Conflict(self.DUPLICATE_MESSAGE)

        logger.info("Category created: id=%s name=%s", category.id, category.name)
        return category

    def update_category(self, category_id: int, data: dict, image_file=None) -> Category:
        category = self.get_category(category_id)
        if "name" in data:
            self._ensure_unique(data["name"], category_id)

        image = self.images.save(image_file, "categories")
        if image:
            data["image"] = image

        try:
            with transaction(self.categories.session):
                for field, value in data.items():
                    setattr(category, field, value)
        except IntegrityError:
            raise Conflict(self.DUPLICATE_MESSAGE)

        logger.info("Category updated: id=%s", category.id)
        return category

    def delete_category(self, category_id: int) -> None:
        category = self.get_category(category_id)
        with transaction(self.categories.session):
            self.categories.delete(category)
        logger.info("Category deleted: id=%s", category_id)
