"""Auth HTML pages: sign-in, self sign-up, profile, password and logout."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, flash, g, redirect, render_template, request, url_for

from erpdesk.core.auth.csrf import rotate_csrf_token
from erpdesk.core.auth.guard import auth_guard
from erpdesk.core.auth.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
)
from erpdesk.core.auth.services import get_auth_client, start_visitor_session
from erpdesk.core.pages.forms import FORM_ERROR_KEY, validate_form
from erpdesk.core.utils.decorators import csrf_protected
from erpdesk.extensions import limiter

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth_pages", __name__)

ERROR_REASONS = {
    "unavailable": ("Service unavailable", "The ERP server could not be reached. Please try again shortly."),
    "SessionRequired": ("Sign-in required", "Please sign in to continue."),
    "AccessDenied": ("Access denied", "You do not have permission to open that page."),
    "CredentialsSignin": ("Sign-in failed", "The email or password is incorrect."),
}


def _safe_next(target: str | None) -> str:
    default = current_app.config.get("DEFAULT_AUTHENTICATED_PATH", "/dashboard")
    if not target or not target.startswith("/") or target.startswith("//"):
        return default
    return target


@auth_bp.route("/signin", methods=["GET", "POST"])
@limiter.limit("10/minute", methods=["POST"])
@csrf_protected
def signin():
    # The form always renders on GET so a stale token can never loop back here.
    values = {"email": request.form.get("email", "")}
    if request.method == "GET":
        return render_template("auth/signin.html", values=values, errors={}, next=request.args.get("next", ""))

    data, errors = validate_form(LoginRequest, request.form)
    if data is None:
        return render_template("auth/signin.html", values=values, errors=errors, next=request.form.get("next", "")), 400

    envelope = get_auth_client().login(data.email, data.password)
    if not envelope.ok or not envelope.token:
        logger.info("Sign-in rejected (status %s)", envelope.http_status)
        errors = {FORM_ERROR_KEY: envelope.message or ERROR_REASONS["CredentialsSignin"][1]}
        return render_template("auth/signin.html", values=values, errors=errors, next=request.form.get("next", "")), 401

    start_visitor_session()
    rotate_csrf_token()
    name = envelope.user.name if envelope.user else data.email
    flash(f"Welcome, {name}.", "success")
    return redirect(_safe_next(request.form.get("next")))


@auth_bp.route("/register", methods=["GET", "POST"])
@limiter.limit("5/minute", methods=["POST"])
@csrf_protected
def register():
    values = request.form.to_dict()
    values.pop("password", None)
    values.pop("password_confirm", None)
    if request.method == "GET":
        return render_template("auth/register.html", values={}, errors={})

    data, errors = validate_form(RegisterRequest, request.form)
    if data is None:
        return render_template("auth/register.html", values=values, errors=errors), 400

    envelope = get_auth_client().register(**data.api_payload())
    if not envelope.ok or not envelope.token:
        errors = {FORM_ERROR_KEY: envelope.message or "Registration failed."}
        return render_template("auth/register.html", values=values, errors=errors), 400

    start_visitor_session()
    rotate_csrf_token()
    flash("Your account has been created.", "success")
    return redirect(_safe_next(None))


@auth_bp.post("/logout")
@csrf_protected
def logout():
    target = get_auth_client().logout()
    flash("You have been signed out.", "info")
    return redirect(target)


@auth_bp.route("/profile", methods=["GET", "POST"])
@auth_guard()
@csrf_protected
def profile():
    user = g.current_user
    values = user.model_dump() if user else {}
    if request.method == "GET":
        return render_template("auth/profile.html", values=values, errors={})

    data, errors = validate_form(ProfileUpdateRequest, request.form)
    if data is None:
        return render_template("auth/profile.html", values={**values, **request.form.to_dict()}, errors=errors), 400

    client = get_auth_client()
    envelope = client.update_profile(**data.model_dump(exclude_none=True))
    if envelope.http_status == 401:
        return redirect(client.logout())
    if not envelope.ok:
        errors = {FORM_ERROR_KEY: envelope.message or "Profile update failed."}
        return render_template("auth/profile.html", values={**values, **request.form.to_dict()}, errors=errors), 400

    flash("Profile updated.", "success")
    return redirect(url_for("auth_pages.profile"))


@auth_bp.route("/change-password", methods=["GET", "POST"])
@auth_guard()
@csrf_protected
def change_password():
    if request.method == "GET":
        return render_template("auth/change_password.html", errors={})

    data, errors = validate_form(ChangePasswordRequest, request.form)
    if data is None:
        return render_template("auth/change_password.html", errors=errors), 400

    client = get_auth_client()
    envelope = client.change_password(data.current_password, data.new_password, data.confirm_password)
    if not envelope.ok:
        errors = {FORM_ERROR_KEY: envelope.message or "Password change failed."}
        return render_template("auth/change_password.html", errors=errors), 400

    flash("Password changed.", "success")
    return redirect(url_for("auth_pages.profile"))


@auth_bp.get("/error")
def error():
    reason = request.args.get("reason") or request.args.get("error")
    title, message = ERROR_REASONS.get(reason or "", ("Something went wrong", None))
    message = message or request.args.get("message") or "An unexpected authentication error occurred."
    return render_template("auth/error.html", title=title, message=message), 200
