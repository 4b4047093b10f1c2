"""Reusable decorators for page controllers."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from flask import abort, current_app, request

from erpdesk.core.auth.csrf import submitted_csrf_token, validate_csrf_token

F = TypeVar("F", bound=Callable)

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def csrf_protected(fn: F) -> F:
    """Reject state-changing requests without the session CSRF token."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        if request.method in SAFE_METHODS or not current_app.config.get("WTF_CSRF_ENABLED", True):
            return fn(*args, **kwargs)
        if not validate_csrf_token(submitted_csrf_token()):
            abort(403, description="csrf_failed")
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
