"""Per-request wiring of the auth client to the visitor's session."""

from __future__ import annotations

import secrets

from flask import current_app, g, session

from erpdesk.core.auth.auth_client import AuthClient
from erpdesk.core.auth.token_store import SessionTokenStore

SESSION_ID_KEY = "_sid"


def visitor_session_id() -> str:
    """Opaque per-visitor id used to key server-side UI caches."""
    sid = session.get(SESSION_ID_KEY)
    if not sid:
        sid = secrets.token_urlsafe(16)
        session[SESSION_ID_KEY] = sid
    return sid


def _discard_snapshots(sid) -> None:
    snapshots = current_app.extensions.get("snapshots")
    if sid and snapshots is not None:
        snapshots.discard_session(sid)


def start_visitor_session() -> None:
    """Forget cached pages from whoever used this browser before the sign-in."""
    _discard_snapshots(session.pop(SESSION_ID_KEY, None))


def _reset_session() -> None:
    # Hard reset: drop every piece of per-visitor UI state, not just the token.
    _discard_snapshots(session.get(SESSION_ID_KEY))
    session.clear()


def get_auth_client() -> AuthClient:
    """Return the request-scoped client, creating it on first use."""
    client = g.get("auth_client")
    if client is None:
        config = current_app.config
        client = AuthClient(
            SessionTokenStore(config.get("TOKEN_SESSION_KEY", "erp_token")),
            base_url=config.get("ERP_API_URL"),
            timeout=config.get("ERP_API_TIMEOUT_SECONDS", 10),
            http=current_app.extensions.get("erp_http"),
            signin_path=config.get("SIGNIN_PATH", "/auth/signin"),
            on_logout=_reset_session,
        )
        g.auth_client = client
    return client
