"""Flask application factory.

Creates and configures the Flask app, registers extensions, error
handlers, and API namespaces.
"""

import logging
import os
from decimal import Decimal

from flask import Flask
from flask.json.provider import DefaultJSONProvider
from flask_restx import Api

from app.config.settings import CONFIG_MAP
from app.extensions import db, migrate


class CustomJSONProvider(DefaultJSONProvider):
    """Extend Flask's default JSON provider to render Decimal money as strings."""

    @staticmethod
    def default(o):
        if isinstance(o, Decimal):
            return str(o)
        return DefaultJSONProvider.default(o)


def create_app(config_name: str | None = None) -> Flask:
    """Build and configure the Flask application.

    Args:
        config_name: One of 'development', 'testing', 'production'.
                     Defaults to the FLASK_ENV environment variable.
    """
    app = Flask(__name__)
    app.json_provider_class = CustomJSONProvider
    app.json = CustomJSONProvider(app)

    # --- Configuration ---
    config_name = config_name or os.getenv("FLASK_ENV", "development")
    app.config.from_object(CONFIG_MAP[config_name])

    # --- Extensions ---
    db.init_app(app)
    migrate.init_app(app, db)

    with app.app_context():
        from app.domain import models  # noqa: F401 register tables

        db.create_all()

    # --- Logging ---
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    # --- API ---
    api = Api(
        app,
        title="Fruit Subscription Shop",
        version="1.0",
        description="Fruit baskets, customisable subscriptions and shop administration",
    )

    # Register namespaces
    from app.api.store import ns as store_ns
    from app.api.dashboard import ns as dashboard_ns

    api.add_namespace(store_ns, path="/store")
    api.add_namespace(dashboard_ns, path="/dashboard")

    # --- Global error handler ---
    _register_error_handlers(app)

    return app


def _register_error_handlers(app: Flask) -> None:
    """Map application exceptions to JSON responses."""
    from app.domain.exceptions import AppError  # noqa: avoid circular import

    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        from app.schemas.response import app_error_response
        return app_error_response(error)

    @app.errorhandler(404)
    def handle_not_found(_error):
        from app.schemas.response import error_response
        return error_response("Resource not found", "NOT_FOUND", 404)

    @app.errorhandler(500)
    def handle_internal(_error):
        from app.schemas.response import error_response
        logging.getLogger(__name__).exception("Unhandled server error")
        return error_response("Internal server error", "INTERNAL_ERROR", 500)
