import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import MagicMock

import pytest
import requests

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from erpdesk import create_app
from erpdesk.core.auth.auth_client import AuthClient
from erpdesk.core.auth.token_store import MemoryTokenStore

API_URL = "http://erp.test"
TOKEN = "token-abc"


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no Flask app, no HTTP)")
    config.addinivalue_line("markers", "integration: Integration tests (Flask app against the fake ERP API)")
    config.addinivalue_line("markers", "smoke: Quick smoke tests for CI")


def make_response(status: int = 200, body: Any = None) -> MagicMock:
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    if body is None:
        response.json.side_effect = ValueError("No JSON body")
    else:
        response.json.return_value = body
    return response


def user_payload(role: str = "USER", **fields) -> Dict[str, Any]:
    user = {
        "_id": "u1",
        "name": "Kim Minsu",
        "email": "kim@example.com",
        "role": role,
        "department": "Purchasing",
        "isActive": True,
    }
    user.update(fields)
    return user


class FakeApi:
    """Stand-in for ``requests.Session`` that answers by (method, path).

    A route registered once answers every matching call; registering the same
    route several times queues the answers, the last one repeating. Unknown
    routes answer 404. ``request`` is a MagicMock so calls can be asserted.
    """

    def __init__(self, base_url: str = API_URL):
        self.base_url = base_url
        self.routes: Dict[Tuple[str, str], List[Tuple[int, Any, Optional[Exception]]]] = {}
        self.request = MagicMock(side_effect=self._dispatch)

    def add(self, method: str, path: str, status: int = 200, body: Any = None, exc: Optional[Exception] = None):
        self.routes.setdefault((method.upper(), path), []).append((status, body, exc))
        return self

    def _dispatch(self, method: str, url: str, **kwargs):
        path = url[len(self.base_url):] if url.startswith(self.base_url) else url
        queue = self.routes.get((method.upper(), path))
        if not queue:
            return make_response(404, {"status": "error", "message": "Not found"})
        status, body, exc = queue.pop(0) if len(queue) > 1 else queue[0]
        if exc is not None:
            raise exc
        return make_response(status, body)

    def calls(self, method: Optional[str] = None, path: Optional[str] = None) -> List[Tuple[str, str, Dict[str, Any]]]:
        out = []
        for call in self.request.call_args_list:
            call_method, url = call.args[0], call.args[1]
            call_path = url[len(self.base_url):] if url.startswith(self.base_url) else url
            if method and call_method != method.upper():
                continue
            if path and call_path != path:
                continue
            out.append((call_method, call_path, call.kwargs))
        return out


@pytest.fixture()
def api():
    return FakeApi()


@pytest.fixture()
def store():
    return MemoryTokenStore()


@pytest.fixture()
def auth_client(store, api):
    return AuthClient(store, base_url=API_URL, http=api)


@pytest.fixture()
def app(api):
    app = create_app("testing")
    app.extensions["erp_http"] = api
    yield app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def login_as(client, api):
    """Put a token in the visitor's session and make ``/api/auth/me`` answer with ``role``."""

    def _login(role: str = "USER", **fields):
        with client.session_transaction() as sess:
            sess["erp_token"] = TOKEN
        api.add("GET", "/api/auth/me", body={"status": "success", "data": {"user": user_payload(role, **fields)}})
        return api

    return _login
