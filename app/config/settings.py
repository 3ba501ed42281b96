"""Application configuration classes.

Supports multiple environments via class inheritance.
DATABASE_URL can be set via environment variable; defaults to SQLite for local dev.
"""

import os


class BaseConfig:
    """Base configuration shared across all environments."""

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_SORT_KEYS = False
    RESTX_MASK_SWAGGER = False
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

    # Days between checkout and the first delivery of a new subscription.
    NEXT_DELIVERY_DAYS = int(os.getenv("NEXT_DELIVERY_DAYS", "7"))
    LOW_STOCK_THRESHOLD = int(os.getenv("LOW_STOCK_THRESHOLD", "5"))
    STORE_API_URL = os.getenv("STORE_API_URL", "http://localhost:5000")


class DevelopmentConfig(BaseConfig):
    """Development configuration — SQLite fallback for local testing."""

    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///dev.db",
    )


class TestingConfig(BaseConfig):
    """Testing configuration — in-memory SQLite for fast tests."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    NEXT_DELIVERY_DAYS = 7
    LOW_STOCK_THRESHOLD = 5


class ProductionConfig(BaseConfig):
    """Production configuration — requires DATABASE_URL and SECRET_KEY to be set."""

    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "")
    SECRET_KEY = os.getenv("SECRET_KEY", "")


CONFIG_MAP = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}
