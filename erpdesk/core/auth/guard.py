"""Route guard: decides whether a page renders, or where to redirect instead."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import wraps
from typing import Callable, Optional, TypeVar, Union

from flask import current_app, g, redirect

from erpdesk.core.api.result import ErrorKind
from erpdesk.core.auth.auth_client import AuthClient
from erpdesk.core.auth.roles import Role, role_satisfies
from erpdesk.core.auth.schemas import UserProfile

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable)

DEFAULT_AUTHENTICATED_PATH = "/dashboard"
DEFAULT_ERROR_PATH = "/auth/error?reason=unavailable"


class GuardState(str, Enum):
    CHECKING = "checking"
    AUTHORIZED = "authorized"
    REDIRECTING = "redirecting"


@dataclass(frozen=True)
class GuardDecision:
    state: GuardState
    redirect_to: Optional[str] = None
    user: Optional[UserProfile] = None

    @property
    def authorized(self) -> bool:
        return self.state is GuardState.AUTHORIZED


class RouteGuard:
    """One evaluation per navigation; the role is not re-checked afterwards."""

    def __init__(
        self,
        client: AuthClient,
        require_auth: bool = True,
        required_role: Union[Role, str, None] = None,
        signin_path: Optional[str] = None,
        default_path: str = DEFAULT_AUTHENTICATED_PATH,
        error_path: str = DEFAULT_ERROR_PATH,
        logout_on_transient_error: bool = True,
    ):
        self.client = client
        self.require_auth = require_auth
        self.required_role = Role.require(required_role) if required_role is not None else None
        self.signin_path = signin_path or client.signin_path
        self.default_path = default_path
        self.error_path = error_path
        self.logout_on_transient_error = logout_on_transient_error
        self.state = GuardState.CHECKING

    def evaluate(self) -> GuardDecision:
        self.state = GuardState.CHECKING
        try:
            decision = self._check()
        except Exception:
            logger.exception("Auth check failed")
            decision = self._redirect(self.client.logout())
        self.state = decision.state
        return decision

    def _check(self) -> GuardDecision:
        if not self.require_auth:
            return GuardDecision(GuardState.AUTHORIZED)

        if not self.client.is_authenticated():
            return self._redirect(self.signin_path)

        result = self.client.fetch_current_user()
        if not result.ok:
            transient = result.kind in (ErrorKind.SERVER, ErrorKind.TRANSPORT)
            if transient and not self.logout_on_transient_error:
                logger.warning("Profile lookup failed transiently (%s); keeping session", result.kind.value)
                return self._redirect(self.error_path)
            return self._redirect(self.client.logout())

        user = result.value
        if self.required_role is not None and not role_satisfies(user.role, self.required_role):
            return self._redirect(self.default_path, user)
        return GuardDecision(GuardState.AUTHORIZED, user=user)

    @staticmethod
    def _redirect(target: str, user: Optional[UserProfile] = None) -> GuardDecision:
        return GuardDecision(GuardState.REDIRECTING, redirect_to=target, user=user)


def auth_guard(required_role: Union[Role, str, None] = None, require_auth: bool = True):
    """Guard a Flask view; the view body only runs once the guard authorizes."""
    role = Role.require(required_role) if required_role is not None else None

    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args, **kwargs):  # type: ignore[misc]
            from erpdesk.core.auth.services import get_auth_client

            guard = RouteGuard(
                get_auth_client(),
                require_auth=require_auth,
                required_role=role,
                signin_path=current_app.config.get("SIGNIN_PATH"),
                default_path=current_app.config.get("DEFAULT_AUTHENTICATED_PATH", DEFAULT_AUTHENTICATED_PATH),
                error_path=current_app.config.get("GUARD_ERROR_PATH", DEFAULT_ERROR_PATH),
                logout_on_transient_error=current_app.config.get("GUARD_LOGOUT_ON_TRANSIENT_ERROR", True),
            )
            decision = guard.evaluate()
            if not decision.authorized:
                return redirect(decision.redirect_to)
            g.current_user = decision.user
            return fn(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
