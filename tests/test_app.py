import pytest
from sqlalchemy import inspect

from store_api.app import create_app
from store_api.config.settings import DEV_JWT_SECRET, TestingConfig
from store_api.models.database import db


@pytest.fixture
def make_app(tmp_path):
    def _make(**overrides):
        config = {
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'store.db'}",
            "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        }
        config.update(overrides)
        return create_app(config, config_object=TestingConfig)
    return _make


def test_production_requires_jwt_secret(make_app):
    with pytest.raises(RuntimeError, match="JWT_SECRET must be set"):
        make_app(APP_ENV="production", JWT_SECRET=None)


def test_development_falls_back_to_dev_secret(make_app):
    app = make_app(APP_ENV="development", JWT_SECRET=None)
    assert app.config["JWT_SECRET"] == DEV_JWT_SECRET


def test_auth_routes_are_rate_limited(make_app):
    app = make_app(RATELIMIT_ENABLED=True, AUTH_RATE_LIMIT="2 per minute")
    with app.app_context():
        db.create_all()

    client = app.test_client()
    credentials = {"email": "nobody@test.com", "password": "Wr0ng!Pass"}
    assert client.post("/api/auth/login", json=credentials).status_code == 401
    assert client.post("/api/auth/login", json=credentials).status_code == 401

    response = client.post("/api/auth/login", json=credentials)
    assert response.status_code == 429
    assert response.get_json()["success"] is False


def test_init_db_command_creates_tables(make_app):
    app = make_app()
    result = app.test_cli_runner().invoke(args=["init-db"])
    assert result.exit_code == 0
    assert "Database tables initialized" in result.output

    with app.app_context():
        assert {"users", "products", "categories", "orders"} <= set(inspect(db.engine).get_table_names())


def test_create_admin_command(make_app):
    app = make_app()
    result = app.test_cli_runner().invoke(args=[
        "create-admin", "--email", "Root@Test.com", "--password", "R00t!Pass", "--name", "Root",
    ])
    assert result.exit_code == 0
    assert "Admin ready: root@test.com" in result.output

    response = app.test_client().post("/api/auth/login", json={"email": "root@test.com", "password": "R00t!Pass"})
    assert response.status_code == 200
    assert response.get_json()["role"] == "admin"


def test_create_admin_command_needs_credentials(make_app):
    app = make_app(ADMIN_EMAIL=None, ADMIN_PASSWORD=None)
    result = app.test_cli_runner().invoke(args=["create-admin"])
    assert result.exit_code != 0
    assert "ADMIN_EMAIL and ADMIN_PASSWORD must be set" in result.output
