"""Session-bound CSRF tokens for the HTML forms."""

from __future__ import annotations

import secrets

from flask import request, session
from markupsafe import Markup, escape

CSRF_SESSION_KEY = "_csrf_token"
CSRF_FORM_FIELD = "csrf_token"
CSRF_HEADER = "X-CSRF-Token"


def generate_csrf_token() -> str:
    token = session.get(CSRF_SESSION_KEY)
    if not token:
        token = rotate_csrf_token()
    return token


def rotate_csrf_token() -> str:
    """Issue a fresh token; called whenever the signed-in identity changes."""
    token = secrets.token_hex(32)
    session[CSRF_SESSION_KEY] = token
    return token


def submitted_csrf_token() -> str:
    return request.headers.get(CSRF_HEADER) or request.form.get(CSRF_FORM_FIELD) or ""


def validate_csrf_token(token: str) -> bool:
    expected = session.get(CSRF_SESSION_KEY)
    if not token or not expected:
        return False
    return secrets.compare_digest(token, expected)


def csrf_field() -> Markup:
    """Hidden input for templates: ``{{ csrf_field() }}``."""
    return Markup('<input type="hidden" name="{}" value="{}">').format(
        CSRF_FORM_FIELD, escape(generate_csrf_token())
    )
