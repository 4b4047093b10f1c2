"""Application configuration for erpdesk."""

from __future__ import annotations

import os
from typing import Dict, Type

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    """Base configuration loaded for all environments."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "change-me")
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.environ.get("SESSION_COOKIE_SAMESITE", "Lax")
    SESSION_COOKIE_SECURE = _flag("SESSION_COOKIE_SECURE", "false")
    PERMANENT_SESSION_LIFETIME = int(os.environ.get("SESSION_TTL_SECONDS", "86400"))
    WTF_CSRF_ENABLED = True

    # External ERP API
    ERP_API_URL = os.environ.get("ERP_API_URL", "http://localhost:8080")
    ERP_API_TIMEOUT_SECONDS = float(os.environ.get("ERP_API_TIMEOUT_SECONDS", "10"))
    TOKEN_SESSION_KEY = "erp_token"

    LIST_PAGE_SIZE = int(os.environ.get("LIST_PAGE_SIZE", "20"))
    SNAPSHOT_CACHE_SIZE = int(os.environ.get("SNAPSHOT_CACHE_SIZE", "512"))

    SIGNIN_PATH = os.environ.get("SIGNIN_PATH", "/auth/signin")
    DEFAULT_AUTHENTICATED_PATH = os.environ.get("DEFAULT_AUTHENTICATED_PATH", "/dashboard")
    GUARD_ERROR_PATH = "/auth/error?reason=unavailable"
    # False keeps the session when /me fails with a 5xx or a network error.
    GUARD_LOGOUT_ON_TRANSIENT_ERROR = _flag("GUARD_LOGOUT_ON_TRANSIENT_ERROR", "true")

    RATELIMIT_DEFAULT = os.environ.get("RATELIMIT_DEFAULT", "200/hour")
    RATELIMIT_STORAGE_URI = os.environ.get("REDIS_URL", "memory://")
    RATELIMIT_ENABLED = _flag("RATELIMIT_ENABLED", "true")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")


class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "testing-secret"
    ERP_API_URL = "http://erp.test"
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    SNAPSHOT_CACHE_SIZE = 32


class ProductionConfig(BaseConfig):
    ENV = "production"
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_SAMESITE = "Lax"


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    # CI pipelines set APP_ENV=ci; map to testing defaults.
    "ci": TestingConfig,
}
