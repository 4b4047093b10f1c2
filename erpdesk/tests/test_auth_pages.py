import pytest

from erpdesk.tests.conftest import TOKEN, user_payload

pytestmark = pytest.mark.integration


def _login_ok(api, token="tok-1", role="USER"):
    api.add("POST", "/api/auth/login", body={"status": "success", "token": token, "data": {"user": user_payload(role)}})


def test_signin_page_renders(client, api):
    resp = client.get("/auth/signin")

    assert resp.status_code == 200
    assert b"Sign in" in resp.data
    assert api.request.call_count == 0


def test_signin_stores_token_and_lands_on_dashboard(client, api):
    _login_ok(api)
    api.add("GET", "/api/auth/me", body={"status": "success", "data": {"user": user_payload("USER")}})
    api.add("GET", "/api/dashboard/stats", body={"status": "success", "data": [{"name": "Open orders", "value": 7}]})

    resp = client.post("/auth/signin", data={"email": "Kim@Example.com", "password": "secret1"})

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/dashboard")
    with client.session_transaction() as sess:
        assert sess["erp_token"] == "tok-1"
    _, _, kwargs = api.calls("POST", "/api/auth/login")[0]
    assert kwargs["json"] == {"email": "kim@example.com", "password": "secret1"}

    page = client.get("/dashboard")
    assert page.status_code == 200
    assert b"Open orders" in page.data
    _, _, kwargs = api.calls("GET", "/api/auth/me")[0]
    assert kwargs["headers"]["Authorization"] == "Bearer tok-1"


def test_signin_follows_only_local_next(client, api):
    _login_ok(api)

    local = client.post("/auth/signin", data={"email": "a@b.com", "password": "x", "next": "/purchase/orders"})
    with client.session_transaction() as sess:
        sess.clear()
    foreign = client.post("/auth/signin", data={"email": "a@b.com", "password": "x", "next": "//evil.example"})

    assert local.headers["Location"].endswith("/purchase/orders")
    assert foreign.headers["Location"].endswith("/dashboard")


def test_signin_with_bad_credentials_shows_server_message(client, api):
    api.add("POST", "/api/auth/login", status=401, body={"status": "error", "message": "Invalid email or password"})

    resp = client.post("/auth/signin", data={"email": "a@b.com", "password": "wrong"})

    assert resp.status_code == 401
    assert b"Invalid email or password" in resp.data
    with client.session_transaction() as sess:
        assert "erp_token" not in sess


def test_signin_validation_error_makes_no_call(client, api):
    resp = client.post("/auth/signin", data={"email": "not-an-email", "password": ""})

    assert resp.status_code == 400
    assert api.request.call_count == 0


def test_signin_reachable_with_stale_token(client, api):
    with client.session_transaction() as sess:
        sess["erp_token"] = "stale"

    resp = client.get("/auth/signin")

    assert resp.status_code == 200
    assert api.request.call_count == 0


def test_logout_clears_session(client, api):
    with client.session_transaction() as sess:
        sess["erp_token"] = TOKEN
        sess["_sid"] = "visitor-1"
    api.add("POST", "/api/auth/logout", body={"status": "success"})

    resp = client.post("/auth/logout")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/auth/signin")
    with client.session_transaction() as sess:
        assert "erp_token" not in sess
        assert "_sid" not in sess
    _, _, kwargs = api.calls("POST", "/api/auth/logout")[0]
    assert kwargs["headers"]["Authorization"] == f"Bearer {TOKEN}"


def test_logout_when_api_is_down_still_signs_out(client, api):
    import requests

    with client.session_transaction() as sess:
        sess["erp_token"] = TOKEN
    api.add("POST", "/api/auth/logout", exc=requests.ConnectionError("down"))

    resp = client.post("/auth/logout")

    assert resp.headers["Location"].endswith("/auth/signin")
    with client.session_transaction() as sess:
        assert "erp_token" not in sess


def test_csrf_is_enforced_when_enabled(app, client, api):
    app.config["WTF_CSRF_ENABLED"] = True
    _login_ok(api)

    rejected = client.post("/auth/signin", data={"email": "a@b.com", "password": "secret1"})
    client.get("/auth/signin")
    with client.session_transaction() as sess:
        token = sess["_csrf_token"]
    accepted = client.post("/auth/signin", data={"email": "a@b.com", "password": "secret1", "csrf_token": token})

    assert rejected.status_code == 403
    assert accepted.status_code == 302
    assert len(api.calls("POST", "/api/auth/login")) == 1
    with client.session_transaction() as sess:
        assert sess["_csrf_token"] != token


def test_register_creates_account_and_signs_in(client, api):
    api.add("POST", "/api/auth/register", status=201, body={"status": "success", "token": "new-tok", "data": {"user": user_payload()}})

    resp = client.post(
        "/auth/register",
        data={"name": "Kim", "email": "kim@example.com", "password": "secret1", "password_confirm": "secret1", "department": ""},
    )

    assert resp.status_code == 302
    _, _, kwargs = api.calls("POST", "/api/auth/register")[0]
    assert kwargs["json"] == {"name": "Kim", "email": "kim@example.com", "password": "secret1"}
    with client.session_transaction() as sess:
        assert sess["erp_token"] == "new-tok"


def test_register_mismatched_passwords(client, api):
    resp = client.post(
        "/auth/register",
        data={"name": "Kim", "email": "kim@example.com", "password": "secret1", "password_confirm": "secret2"},
    )

    assert resp.status_code == 400
    assert b"passwords do not match" in resp.data
    assert api.request.call_count == 0


def test_register_duplicate_email(client, api):
    api.add("POST", "/api/auth/register", status=400, body={"status": "error", "message": "Email already registered"})

    resp = client.post("/auth/register", data={"name": "Kim", "email": "kim@example.com", "password": "secret1"})

    assert resp.status_code == 400
    assert b"Email already registered" in resp.data


def test_profile_shows_current_user(client, login_as):
    login_as("MANAGER", name="Choi Yuna")

    resp = client.get("/auth/profile")

    assert resp.status_code == 200
    assert b"Choi Yuna" in resp.data


def test_change_password_rotates_session_token(client, api, login_as):
    login_as("USER")
    api.add("PATCH", "/api/auth/change-password", body={"status": "success", "token": "rotated"})

    resp = client.post(
        "/auth/change-password",
        data={"current_password": "secret1", "new_password": "secret2", "confirm_password": "secret2"},
    )

    assert resp.status_code == 302
    with client.session_transaction() as sess:
        assert sess["erp_token"] == "rotated"


def test_wrong_current_password_keeps_session_and_shows_message(client, api, login_as):
    login_as("USER")
    api.add("PATCH", "/api/auth/change-password", status=401, body={"status": "fail", "message": "Your current password is wrong"})

    resp = client.post(
        "/auth/change-password",
        data={"current_password": "typo", "new_password": "secret2", "confirm_password": "secret2"},
    )

    assert resp.status_code == 400
    assert b"Your current password is wrong" in resp.data
    with client.session_transaction() as sess:
        assert sess["erp_token"] == TOKEN
    assert api.calls("POST", "/api/auth/logout") == []


@pytest.mark.parametrize(
    "reason, title",
    [("unavailable", b"Service unavailable"), ("AccessDenied", b"Access denied"), ("whatever", b"Something went wrong")],
)
def test_error_page(client, reason, title):
    resp = client.get(f"/auth/error?reason={reason}")

    assert resp.status_code == 200
    assert title in resp.data
