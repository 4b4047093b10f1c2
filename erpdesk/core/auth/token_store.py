"""Bearer token storage for the current visitor session."""

from __future__ import annotations

from typing import Optional, Protocol

from flask import has_request_context, session

TOKEN_SESSION_KEY = "erp_token"


class TokenStore(Protocol):
    def get(self) -> Optional[str]: ...

    def set(self, token: str) -> None: ...

    def clear(self) -> None: ...


class SessionTokenStore:
    """Keeps at most one token in the signed Flask session cookie.

    Outside a request context (CLI commands, app start-up) there is no session
    to read from, so every operation degrades to a no-op.
    """

    def __init__(self, key: str = TOKEN_SESSION_KEY):
        self.key = key

    def get(self) -> Optional[str]:
        if not has_request_context():
            return None
        token = session.get(self.key)
        return token or None

    def set(self, token: str) -> None:
        if not has_request_context():
            return
        session[self.key] = token

    def clear(self) -> None:
        if not has_request_context():
            return
        session.pop(self.key, None)


class MemoryTokenStore:
    """Process-local store used by scripts and tests."""

    def __init__(self, token: Optional[str] = None):
        self._token = token or None

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token or None

    def clear(self) -> None:
        self._token = None
