"""
Daily Sales Report Service
Configuration classes for Flask App Factory.

Every tunable is read from the environment once, at import time. Keys:

    DATABASE_URL / TEST_DATABASE_URL   store (SQLite fallback outside prod)
    SECRET_KEY, JWT_SECRET_KEY         token verification
    JWT_ACCESS_EXPIRES                 lifetime of tokens minted locally (s)
    REDIS_URL                          rate limiter storage
    CORS_ORIGINS                       comma separated, "*" outside prod
    DEFAULT_PAGE_LIMIT / MAX_PAGE_LIMIT
    RATELIMIT_WRITE / RATELIMIT_READ   per-actor limits
    LOG_LEVEL / LOG_FORMAT / SLOW_REQUEST_MS

Usage:
    config_name = os.getenv("APP_ENV", "development")
    app.config.from_object(config[config_name]())
"""

import os
import secrets

basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))

_SQLITE_DEV = f"sqlite:///{os.path.join(basedir, 'instance', 'dailyreport_dev.db')}"
_SQLITE_TEST = "sqlite:///:memory:"

# Random per process; tokens minted in dev do not survive a restart
_DEV_SECRET = secrets.token_hex(32)


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _database_url(name: str = "DATABASE_URL") -> str | None:
    raw = os.getenv(name, "")
    # SQLAlchemy 2.0 only accepts the postgresql:// scheme
    return raw.replace("postgres://", "postgresql://", 1) if raw else None


class Config:
    """Base configuration shared across all environments."""

    SECRET_KEY = os.getenv("SECRET_KEY", _DEV_SECRET)
    DEBUG = False
    TESTING = False

    # SQLAlchemy
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    AUTO_CREATE_TABLES = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
    }

    # Identity tokens
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
    JWT_ACCESS_EXPIRES = _env_int("JWT_ACCESS_EXPIRES", 8 * 3600)

    # Rate limiting
    REDIS_URL = os.getenv("REDIS_URL", "memory://")
    RATELIMIT_WRITE = os.getenv("RATELIMIT_WRITE", "120/minute")
    RATELIMIT_READ = os.getenv("RATELIMIT_READ", "300/minute")

    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # List endpoints
    DEFAULT_PAGE_LIMIT = _env_int("DEFAULT_PAGE_LIMIT", 20)
    MAX_PAGE_LIMIT = _env_int("MAX_PAGE_LIMIT", 100)

    MAX_CONTENT_LENGTH = 1 * 1024 * 1024

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL")
    LOG_FORMAT = os.getenv("LOG_FORMAT")
    SLOW_REQUEST_MS = _env_int("SLOW_REQUEST_MS", 1000)


class DevelopmentConfig(Config):
    DEBUG = True
    AUTO_CREATE_TABLES = True
    SQLALCHEMY_DATABASE_URI = _database_url() or _SQLITE_DEV


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = _database_url("TEST_DATABASE_URL") or _SQLITE_TEST
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = "test-jwt-secret-key-with-at-least-32-bytes"
    RATELIMIT_ENABLED = False


class ProductionConfig(Config):
    """Production: PostgreSQL with a statement timeout, explicit secrets."""

    SQLALCHEMY_DATABASE_URI = _database_url()
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")

    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_recycle": 300,
        "pool_timeout": 20,
        "connect_args": {
            "options": "-c statement_timeout=30000",  # 30s
        },
    }

    def __init__(self):
        if not self.SQLALCHEMY_DATABASE_URI:
            raise RuntimeError("DATABASE_URL environment variable is required in production")
        for name in ("SECRET_KEY", "JWT_SECRET_KEY"):
            if not os.getenv(name):
                raise RuntimeError(f"{name} environment variable must be set in production")


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}
