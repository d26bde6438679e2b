import io
from urllib.parse import urlsplit

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from store_api.app import create_app
from store_api.config.settings import TestingConfig
from store_api.models.database import db
from store_api.services import get_services

ADMIN_EMAIL = "admin@test.com"
ADMIN_PASSWORD = "Adm1n!Pass"
CUSTOMER_PASSWORD = "Passw0rd!"


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr("store_api.services.auth_service.BCRYPT_ROUNDS", 4)


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'store.db'}",
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
    }, config_object=TestingConfig)

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register(client):
    def _register(email="alice@test.com", password=CUSTOMER_PASSWORD, name="Alice", phone="1234567890"):
        payload = {"name": name, "email": email, "password": password}
        if phone is not None:
            payload["phone"] = phone
        return client.post("/api/auth/register", json=payload)
    return _register


@pytest.fixture
def login(app):
    """Log in on a throwaway client so the shared client keeps no cookie."""
    def _login(email, password):
        response = app.test_client().post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.get_json()
        return response.get_json()
    return _login


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer(register, login):
    """Registered customer: returns dict with id, token and headers."""
    user = register().get_json()["user"]
    body = login("alice@test.com", CUSTOMER_PASSWORD)
    return {"id": user["id"], "token": body["token"], "headers": bearer(body["token"])}


@pytest.fixture
def admin(app, login):
    with app.app_context():
        user = get_services().auth.seed_admin("Admin", ADMIN_EMAIL, ADMIN_PASSWORD)
        user_id = user.id
    body = login(ADMIN_EMAIL, ADMIN_PASSWORD)
    return {"id": user_id, "token": body["token"], "headers": bearer(body["token"])}


@pytest.fixture
def create_product(client, admin):
    def _create(**overrides):
        data = {
            "title": "Wool Scarf",
            "description": "Warm knitted scarf",
            "price": "50.00",
            "category": "Accessories",
            "stock": "10",
        }
        data.update(overrides)
        response = client.post("/api/products", data=data, headers=admin["headers"],
                               content_type="multipart/form-data")
        assert response.status_code == 201, response.get_json()
        return response.get_json()["data"]
    return _create


def image_file(name="photo.png", content_type="image/png"):
    return (io.BytesIO(b"\x89PNG\r\n\x1a\nfake"), name, content_type)


class FlaskTransport(requests.adapters.BaseAdapter):
    """requests transport that dispatches into a Flask test client."""

    def __init__(self, app):
        super().__init__()
        self.client = app.test_client()

    def send(self, request, **kwargs):
        url = urlsplit(request.url)
        headers = {k: v for k, v in request.headers.items() if k.lower() != "content-length"}
        result = self.client.open(
            url.path,
            method=request.method,
            query_string=url.query,
            headers=headers,
            data=request.body,
        )

        response = requests.Response()
        response.status_code = result.status_code
        response.reason = result.status.split(" ", 1)[-1]
        response.headers = CaseInsensitiveDict(result.headers)
        response._content = result.get_data()
        response.encoding = "utf-8"
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


@pytest.fixture
def store_client(app):
    from store_api.client import StoreClient

    session = requests.Session()
    session.mount("http://store.test", FlaskTransport(app))
    return StoreClient("http://store.test", session=session)
