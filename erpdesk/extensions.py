"""Shared extensions for the erpdesk application."""

import logging
import sys

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from erpdesk.core.pages.snapshots import StaleSnapshotStore

limiter = Limiter(
    key_func=get_remote_address, enabled=True, default_limits=["200 per hour"]
)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(app) -> None:
    """Route application and library loggers to stderr at ``LOG_LEVEL``."""
    level = logging.getLevelName(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    if not isinstance(level, int):
        level = logging.INFO
    root = logging.getLogger("erpdesk")
    if not any(getattr(h, "_erpdesk", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._erpdesk = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(level)
    app.logger.setLevel(level)


def init_extensions(app) -> None:
    """Initialize all extensions with the Flask app."""
    configure_logging(app)
    limiter.enabled = app.config.get("RATELIMIT_ENABLED", True)
    limiter.default_limits = [app.config.get("RATELIMIT_DEFAULT", "200 per hour")]
    limiter.storage_uri = app.config.get("RATELIMIT_STORAGE_URI", "memory://")
    limiter.init_app(app)
    app.extensions["snapshots"] = StaleSnapshotStore(app.config.get("SNAPSHOT_CACHE_SIZE", 512))
