import io
import os

import pytest

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, bearer, image_file
from store_api.app import create_app
from store_api.config.settings import TestingConfig
from store_api.models.database import db
from store_api.services import get_services


def test_create_product_with_image_returns_absolute_url(app, client, admin):
    response = client.post("/api/products", headers=admin["headers"], content_type="multipart/form-data", data={
        "title": "Leather Bag",
        "description": "Hand-stitched",
        "price": "120.50",
        "category": "Bags",
        "stock": "3",
        "discount": "15",
        "rating": "4.8",
        "isFeatured": "true",
        "image": image_file(),
    })
    assert response.status_code == 201

    product = response.get_json()["data"]
    assert product["title"] == "Leather Bag"
    assert product["price"] == 120.5
    assert product["discount"] == 15
    assert product["rating"] == 4.8
    assert product["isFeatured"] is True
    assert product["image"].startswith("http://localhost/uploads/products/")

    relative = product["image"].replace("http://localhost/uploads/", "")
    assert os.path.exists(os.path.join(app.config["UPLOAD_FOLDER"], relative))
    assert client.get(product["image"].replace("http://localhost", "")).status_code == 200


def test_defaults_apply_without_optional_fields(client, create_product):
    product = create_product()
    assert product["stock"] == 10
    assert product["discount"] == 0
    assert product["rating"] == 4.5
    assert product["isFeatured"] is False
    assert product["image"] == "http://localhost/static/defaults/product.svg"
    assert client.get("/static/defaults/product.svg").status_code == 200


def test_public_base_url_is_used_for_images(app, client, create_product):
    app.config["PUBLIC_BASE_URL"] = "https://cdn.example.com/"
    product = create_product()
    assert product["image"] == "https://cdn.example.com/static/defaults/product.svg"


def test_absolute_image_urls_pass_through(create_product):
    product = create_product(image="https://images.example.com/scarf.jpg")
    assert product["image"] == "https://images.example.com/scarf.jpg"


def test_discount_over_100_is_rejected(client, admin):
    response = client.post("/api/products", headers=admin["headers"], json={
        "title": "Scarf", "description": "Warm", "price": 10, "category": "Accessories", "discount": 150,
    })
    assert response.status_code == 400
    assert "discount" in response.get_json()["errors"]


def test_invalid_product_fields_are_reported_per_field(client, admin):
    response = client.post("/api/products", headers=admin["headers"], json={
        "title": "ab", "description": "", "price": -1, "stock": -2, "rating": 6,
    })
    errors = response.get_json()["errors"]
    assert response.status_code == 400
    assert set(errors) >= {"title", "description", "price", "stock", "rating", "category"}


def test_non_image_upload_is_rejected(client, admin):
    response = client.post("/api/products", headers=admin["headers"], content_type="multipart/form-data", data={
        "title": "Scarf", "description": "Warm", "price": "10", "category": "Accessories",
        "image": image_file("notes.txt", "text/plain"),
    })
    assert response.status_code == 400
    assert response.get_json()["message"] == "Only image files are allowed"


def test_list_featured_and_filter(client, create_product):
    create_product(title="Plain Scarf")
    create_product(title="Star Scarf", isFeatured="true", category="Winter")

    assert len(client.get("/api/products").get_json()) == 2

    featured = client.get("/api/products/featured").get_json()
    assert [p["title"] for p in featured] == ["Star Scarf"]

    assert [p["title"] for p in client.get("/api/products?featured=true").get_json()] == ["Star Scarf"]
    assert [p["title"] for p in client.get("/api/products?category=Winter").get_json()] == ["Star Scarf"]


def test_get_unknown_product_is_not_found(client):
    response = client.get("/api/products/999")
    assert response.status_code == 404
    assert response.get_json() == {"success": False, "message": "Product not found"}


def test_partial_update(client, admin, create_product):
    product = create_product()
    response = client.put(f"/api/products/{product['id']}", headers=admin["headers"],
                          content_type="multipart/form-data", data={"price": "65", "image": image_file()})
    assert response.status_code == 200

    updated = response.get_json()["data"]
    assert updated["price"] == 65.0
    assert updated["title"] == product["title"]
    assert "/uploads/products/" in updated["image"]


def test_update_validates_ranges(client, admin, create_product):
    product = create_product()
    response = client.put(f"/api/products/{product['id']}", headers=admin["headers"], json={"discount": 101})
    assert response.status_code == 400


def test_update_unknown_product(client, admin):
    response = client.put("/api/products/42", headers=admin["headers"], json={"price": 1})
    assert response.status_code == 404


def test_delete_product(client, admin, create_product):
    product = create_product()
    assert client.delete(f"/api/products/{product['id']}", headers=admin["headers"]).status_code == 200
    assert client.get(f"/api/products/{product['id']}").status_code == 404
    assert client.delete(f"/api/products/{product['id']}", headers=admin["headers"]).status_code == 404


@pytest.mark.parametrize("field, value", [
    ("rating", "5.04"),
    ("rating", "-0.01"),
    ("price", "-0.004"),
])
def test_ranges_are_checked_before_rounding(client, admin, field, value):
    data = {"title": "Scarf", "description": "Warm", "price": "10", "category": "Accessories"}
    data[field] = value
    response = client.post("/api/products", headers=admin["headers"], json=data)
    assert response.status_code == 400
    assert field in response.get_json()["errors"]


def test_price_and_rating_are_rounded_to_storage_precision(create_product):
    product = create_product(price="19.994", rating="4.96")
    assert product["price"] == 19.99
    assert product["rating"] == 5.0


def test_upload_over_size_limit_is_rejected(client, admin):
    big = (io.BytesIO(b"\0" * (5 * 1024 * 1024 + 1)), "huge.png", "image/png")
    response = client.post("/api/products", headers=admin["headers"], content_type="multipart/form-data", data={
        "title": "Scarf", "description": "Warm", "price": "10", "category": "Accessories", "image": big,
    })
    assert response.status_code == 413
    assert response.get_json()["success"] is False


def test_relative_upload_folder_is_served(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    app = create_app({
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'store.db'}",
        "UPLOAD_FOLDER": "./uploads",
    }, config_object=TestingConfig)
    assert app.config["UPLOAD_FOLDER"] == str(tmp_path / "uploads")

    with app.app_context():
        db.create_all()
        get_services().auth.seed_admin("Admin", ADMIN_EMAIL, ADMIN_PASSWORD)

    client = app.test_client()
    token = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}).get_json()["token"]
    response = client.post("/api/products", headers=bearer(token), content_type="multipart/form-data", data={
        "title": "Scarf", "description": "Warm", "price": "10", "category": "Accessories", "image": image_file(),
    })
    assert response.status_code == 201

    path = response.get_json()["data"]["image"].replace("http://localhost", "")
    assert client.get(path).status_code == 200

    with app.app_context():
        db.session.remove()
        db.drop_all()
