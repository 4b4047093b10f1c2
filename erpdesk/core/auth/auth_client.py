"""Client for the external ERP API: session lifecycle and authenticated calls.

Every expected failure (bad credentials, expired token, unreachable API) comes
back as a value: an ``AuthEnvelope`` for the auth endpoints, ``None`` from
``get_current_user`` and a ``Result`` everywhere else. Callers branch on those
values and never need a try/except for routine auth failures.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Union

import requests
from pydantic import ValidationError

from erpdesk.core.api.result import (
    NETWORK_ERROR_MESSAGE,
    ErrorKind,
    Result,
    kind_for_status,
    message_from_body,
)
from erpdesk.core.auth.roles import Role, role_satisfies
from erpdesk.core.auth.schemas import AuthEnvelope, UserProfile
from erpdesk.core.auth.token_store import TokenStore

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_SIGNIN_PATH = "/auth/signin"


class AuthClient:
    def __init__(
        self,
        token_store: TokenStore,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 10,
        http: Optional[requests.Session] = None,
        signin_path: str = DEFAULT_SIGNIN_PATH,
        on_logout: Optional[Callable[[], None]] = None,
    ):
        self.token_store = token_store
        self.base_url = (base_url or DEFAULT_API_URL).rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()
        self.signin_path = signin_path
        self.on_logout = on_logout

    # --- session lifecycle ---

    def login(self, email: str, password: str) -> AuthEnvelope:
        return self._token_call("/api/auth/login", {"email": email, "password": password}, "Login")

    def register(self, **profile_fields: Any) -> AuthEnvelope:
        payload = {k: v for k, v in profile_fields.items() if v is not None}
        return self._token_call("/api/auth/register", payload, "Registration")

    def get_current_user(self) -> Optional[UserProfile]:
        return self.fetch_current_user().value_or_none()

    def fetch_current_user(self) -> Result[UserProfile]:
        """Resolve the stored token to a profile, keeping the failure kind."""
        if not self.token_store.get():
            return Result.failure(ErrorKind.NO_SESSION, "Not signed in")

        result = self.request_json("/api/auth/me")
        if not result.ok:
            # request_json has already cleared the token on 401; other
            # statuses are treated as transient and keep the session.
            return Result.failure(result.kind, result.message, result.status_code)

        body = result.value or {}
        raw_user = body.get("data", {}).get("user") if isinstance(body.get("data"), dict) else None
        if raw_user is None:
            raw_user = body
        try:
            user = UserProfile.model_validate(raw_user)
        except ValidationError as exc:
            logger.warning("Unreadable profile payload from /api/auth/me: %s", exc)
            return Result.failure(ErrorKind.SERVER, "Unreadable profile payload", result.status_code)
        return Result.success(user, result.status_code)

    def update_profile(self, **fields: Any) -> AuthEnvelope:
        payload = {k: v for k, v in fields.items() if v is not None}
        return self._envelope_call("PATCH", "/api/auth/me", payload, "Update profile")

    def change_password(self, current_password: str, new_password: str, confirm_password: str) -> AuthEnvelope:
        envelope = self._envelope_call(
            "PATCH",
            "/api/auth/change-password",
            {
                "passwordCurrent": current_password,
                "password": new_password,
                "passwordConfirm": confirm_password,
            },
            "Change password",
            # 401 here means the current password was rejected, not an expired session.
            clear_on_401=False,
        )
        # The API may invalidate the old token after a password change.
        if envelope.ok and envelope.token:
            self.token_store.set(envelope.token)
        return envelope

    def logout(self) -> str:
        """Drop the session and return where the caller should navigate."""
        if self.token_store.get():
            outcome = self.make_authenticated_request("/api/auth/logout", method="POST")
            if not outcome.ok:
                logger.warning("Server-side logout failed: %s", outcome.message)
        self.token_store.clear()
        if self.on_logout is not None:
            self.on_logout()
        return self.signin_path

    def is_authenticated(self) -> bool:
        return bool(self.token_store.get())

    def has_role(self, required_role: Union[Role, str]) -> bool:
        required = Role.parse(required_role)
        if required is None:
            return False
        user = self.get_current_user()
        if user is None:
            return False
        return role_satisfies(user.role, required)

    # --- transport ---

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.base_url}{path}"

    def auth_headers(self) -> Dict[str, str]:
        token = self.token_store.get()
        return {"Authorization": f"Bearer {token}"} if token else {}

    def make_authenticated_request(self, path: str, method: str = "GET", **options: Any) -> Result[requests.Response]:
        """Send a request with JSON and bearer headers; the status is not inspected."""
        headers = {"Content-Type": "application/json", **self.auth_headers()}
        headers.update(options.pop("headers", None) or {})
        options.setdefault("timeout", self.timeout)
        try:
            response = self.http.request(method.upper(), self.url_for(path), headers=headers, **options)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method.upper(), path, exc)
            return Result.failure(ErrorKind.TRANSPORT, NETWORK_ERROR_MESSAGE)
        return Result.success(response, response.status_code)

    def request_json(
        self,
        path: str,
        method: str = "GET",
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Result[Dict[str, Any]]:
        """Authenticated call whose response is interpreted as a JSON envelope."""
        options: Dict[str, Any] = {}
        if json is not None:
            options["json"] = json
        if params:
            options["params"] = params
        outcome = self.make_authenticated_request(path, method=method, **options)
        if not outcome.ok:
            return Result.failure(outcome.kind, outcome.message)

        response = outcome.value
        body = _json_or_none(response)
        kind = kind_for_status(response.status_code)
        if kind is None:
            return Result.success(body if isinstance(body, dict) else {}, response.status_code)
        if kind is ErrorKind.UNAUTHORIZED:
            self.token_store.clear()
        return Result.failure(kind, message_from_body(body, _default_message(kind)), response.status_code)

    # --- helpers ---

    def _token_call(self, path: str, payload: Dict[str, Any], label: str) -> AuthEnvelope:
        envelope = self._post_unauthenticated(path, payload, label)
        if envelope.ok and envelope.token:
            self.token_store.set(envelope.token)
        else:
            self.token_store.clear()
        return envelope

    def _post_unauthenticated(self, path: str, payload: Dict[str, Any], label: str) -> AuthEnvelope:
        try:
            response = self.http.request(
                "POST",
                self.url_for(path),
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("%s error: %s", label, exc)
            return AuthEnvelope.network_error()
        return _envelope_from(response)

    def _envelope_call(
        self, method: str, path: str, payload: Dict[str, Any], label: str, clear_on_401: bool = True
    ) -> AuthEnvelope:
        outcome = self.make_authenticated_request(path, method=method, json=payload)
        if not outcome.ok:
            logger.warning("%s error: %s", label, outcome.message)
            return AuthEnvelope.network_error()
        response = outcome.value
        if response.status_code == 401 and clear_on_401:
            self.token_store.clear()
        return _envelope_from(response)


def _json_or_none(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _envelope_from(response: requests.Response) -> AuthEnvelope:
    body = _json_or_none(response)
    if not isinstance(body, dict):
        body = {}
    try:
        envelope = AuthEnvelope.model_validate(body)
    except ValidationError:
        envelope = AuthEnvelope(status=str(body.get("status") or "error"), message=message_from_body(body))
    envelope.http_status = response.status_code
    if not envelope.ok and not envelope.message:
        envelope.message = message_from_body(body)
    return envelope


def _default_message(kind: ErrorKind) -> str:
    return {
        ErrorKind.UNAUTHORIZED: "Your session has expired. Please sign in again.",
        ErrorKind.FORBIDDEN: "You do not have permission to perform this action.",
        ErrorKind.NOT_FOUND: "The requested record was not found.",
        ErrorKind.VALIDATION: "The request was rejected by the server.",
        ErrorKind.SERVER: "The server failed to process the request.",
    }.get(kind, "Unexpected error occurred")
