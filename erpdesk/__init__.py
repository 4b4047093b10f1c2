"""erpdesk application factory and bootstrap."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import requests
from flask import Flask, g, redirect, render_template, url_for

from erpdesk.config import config_by_name
from erpdesk.core.auth.csrf import csrf_field, generate_csrf_token
from erpdesk.extensions import init_extensions


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the erpdesk Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()

    app = Flask(
        __name__,
        static_folder=str(Path(__file__).parent / "static"),
        template_folder=str(Path(__file__).parent / "templates"),
    )
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)

    init_extensions(app)
    # One pooled HTTP session per process for calls to the ERP API.
    app.extensions.setdefault("erp_http", requests.Session())

    _register_blueprints(app)
    _register_error_handlers(app)
    _register_template_helpers(app)

    @app.get("/")
    def index():
        return redirect(url_for("dashboard_pages.dashboard"))

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    return app


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all page controllers."""
    from erpdesk.core.auth.controllers import auth_bp  # local import to avoid circulars
    from erpdesk.domains.dashboard.controllers.dashboard_pages import dashboard_pages_bp
    from erpdesk.domains.hr.controllers.hr_pages import hr_pages_bp
    from erpdesk.domains.inventory.controllers.inventory_pages import inventory_pages_bp
    from erpdesk.domains.master.controllers.master_pages import master_pages_bp
    from erpdesk.domains.production.controllers.production_pages import production_pages_bp
    from erpdesk.domains.purchase.controllers.purchase_pages import purchase_pages_bp
    from erpdesk.domains.quality.controllers.quality_pages import quality_pages_bp
    from erpdesk.domains.sales.controllers.sales_pages import sales_pages_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(dashboard_pages_bp, url_prefix="/dashboard")
    app.register_blueprint(master_pages_bp, url_prefix="/master")
    app.register_blueprint(purchase_pages_bp, url_prefix="/purchase")
    app.register_blueprint(inventory_pages_bp, url_prefix="/inventory")
    app.register_blueprint(production_pages_bp, url_prefix="/production")
    app.register_blueprint(quality_pages_bp, url_prefix="/quality")
    app.register_blueprint(sales_pages_bp, url_prefix="/sales")
    app.register_blueprint(hr_pages_bp, url_prefix="/hr")


def _register_error_handlers(app: Flask) -> None:
    """HTML error pages."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return render_template("errors/error.html", code=exc.code, message=exc.description), exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        message = str(exc) if (app.debug or app.testing) else "unexpected_error"
        return render_template("errors/error.html", code=500, message=message), 500


def _register_template_helpers(app: Flask) -> None:
    from erpdesk.core.auth.roles import Role, role_satisfies
    from erpdesk.core.pages.filters import resolve_path
    from erpdesk.core.utils.excel import format_cell
    from erpdesk.domains.navigation import navigation_for

    @app.template_filter("cell")
    def _cell(record, key):
        return format_cell(resolve_path(record, key))

    @app.context_processor
    def inject_helpers():
        user = g.get("current_user")
        return {
            "csrf_token": generate_csrf_token,
            "csrf_field": csrf_field,
            "current_user": user,
            "navigation": navigation_for(user.role if user else None),
            "can": lambda role: bool(user) and (role is None or role_satisfies(user.role, Role.require(role))),
        }
