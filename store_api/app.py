import logging
import logging.config
import os

import click
from flask import Flask, request, send_from_directory

from store_api.config.settings import DEV_JWT_SECRET, Config
from store_api.extensions import cors, limiter
from store_api.models.database import db
from store_api.api import (
    admin_bp,
    auth_bp,
    categories_bp,
    orders_bp,
    products_bp,
    user_bp,
    users_bp,
)
from store_api.middleware.error_handler import register_error_handlers
from store_api.services import EXTENSION_KEY, Services, get_services

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s"},
        },
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "default"},
        },
        "root": {"level": level, "handlers": ["console"]},
    })


def _check_secrets(app: Flask) -> None:
    if app.config.get("JWT_SECRET"):
        return
    if app.config["APP_ENV"] == "production":
        raise RuntimeError("JWT_SECRET must be set in production")
    logger.warning("JWT_SECRET not set, using unsafe default for development only")
    app.config["JWT_SECRET"] = DEV_JWT_SECRET


def create_app(overrides: dict = None, config_object=Config) -> Flask:
    """Application factory."""
    app = Flask(__name__)
    app.config.from_object(config_object)
    if overrides:
        app.config.update(overrides)

    # Relative folders resolve against the working directory, for both
    # saving and serving
    app.config["UPLOAD_FOLDER"] = os.path.abspath(app.config["UPLOAD_FOLDER"])

    configure_logging(app.config["LOG_LEVEL"])
    _check_secrets(app)

    # Initialize extensions
    db.init_app(app)
    cors.init_app(app, origins=app.config["CORS_ORIGINS"], supports_credentials=True)
    limiter.init_app(app)

    with app.app_context():
        app.extensions[EXTENSION_KEY] = Services.build(db.session, app.config)

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(user_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(admin_bp)

    @app.route("/uploads/<path:filename>")
    def uploaded_file(filename):
        return send_from_directory(app.config["UPLOAD_FOLDER"], filename)

    @app.after_request
    def log_request(response):
        logger.info("%s %s %s", request.method, request.path, response.status_code)
        return response

    # Register error handlers
    register_error_handlers(app)
    register_commands(app)

    return app


def register_commands(app: Flask) -> None:
    @app.cli.command("init-db")
    def init_db():
        """Create all database tables."""
        db.create_all()
        click.echo("Database tables initialized")

    @app.cli.command("create-admin")
    @click.option("--email", default=None, help="Defaults to ADMIN_EMAIL.")
    @click.option("--password", default=None, help="Defaults to ADMIN_PASSWORD.")
    @click.option("--name", default=None, help="Defaults to ADMIN_NAME.")
    def create_admin(email, password, name):
        """Create the admin account or promote an existing user."""
        email = email or app.config.get("ADMIN_EMAIL")
        password = password or app.config.get("ADMIN_PASSWORD")
        if not email or not password:
            raise click.UsageError("ADMIN_EMAIL and ADMIN_PASSWORD must be set")

        db.create_all()
        user = get_services().auth.seed_admin(
            name=name or app.config["ADMIN_NAME"],
            email=email.strip().lower(),
            password=password,
        )
        click.echo(f"Admin ready: {user.email} (id={user.id})")
