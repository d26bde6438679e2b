import os
from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


DEV_JWT_SECRET = "dev-secret-key-do-not-use-in-production"


class Config:
    """Application configuration loaded from environment variables."""

    APP_ENV = os.environ.get("APP_ENV", "development")

    SECRET_KEY = os.environ.get("SECRET_KEY")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///store.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JWT_SECRET = os.environ.get("JWT_SECRET")
    JWT_EXPIRY_MINUTES = int(os.environ.get("JWT_EXPIRY_MINUTES", "1440"))
    JWT_COOKIE_NAME = os.environ.get("JWT_COOKIE_NAME", "token")
    COOKIE_SECURE = _as_bool(os.environ.get("COOKIE_SECURE", "false"))

    CORS_ORIGINS = os.environ.get(
        "CORS_ORIGINS", "http://localhost:5173,http://localhost:5174"
    ).split(",")

    # Flask-Limiter reads the RATELIMIT_* keys
    RATELIMIT_DEFAULT = os.environ.get("RATE_LIMIT_DEFAULT", "100 per 15 minutes")
    RATELIMIT_STORAGE_URI = os.environ.get("RATE_LIMIT_STORAGE_URI", "memory://")
    RATELIMIT_ENABLED = _as_bool(os.environ.get("RATE_LIMIT_ENABLED", "true"))
    AUTH_RATE_LIMIT = os.environ.get("AUTH_RATE_LIMIT", "30 per 15 minutes")

    UPLOAD_FOLDER = os.environ.get(
        "UPLOAD_FOLDER", os.path.join(os.getcwd(), "uploads")
    )
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))
    PUBLIC_BASE_URL = os.environ.get("PUBLIC_BASE_URL")
    # Placeholders shipped in store_api/static; may also be absolute URLs
    DEFAULT_PRODUCT_IMAGE = os.environ.get("DEFAULT_PRODUCT_IMAGE", "/static/defaults/product.svg")
    DEFAULT_CATEGORY_IMAGE = os.environ.get("DEFAULT_CATEGORY_IMAGE", "/static/defaults/category.svg")

    ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD")
    ADMIN_NAME = os.environ.get("ADMIN_NAME", "Administrator")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    DEBUG = False


class TestingConfig(Config):
    TESTING = True
    APP_ENV = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET = "testing-secret-key-with-enough-length"
    RATELIMIT_ENABLED = False
    PUBLIC_BASE_URL = None
    LOG_LEVEL = "WARNING"
