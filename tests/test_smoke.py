import pytest
from werkzeug.security import generate_password_hash

import app.acme.auth as auth_mod
from app.acme import create_app
from app.acme.auth import ACCOUNT_DISABLED, AuthError, authenticate
from app.acme.db import session_scope
from app.acme.models import Base, User


@pytest.fixture()
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")

    app = create_app()

    engine = app.extensions["sqlalchemy_engine"]
    Base.metadata.create_all(bind=engine)

    with session_scope(app) as s:
        s.add_all(
            [
                User(email="user@nextmail.com", password_hash=generate_password_hash("123456"), is_active=True),
                User(email="gone@nextmail.com", password_hash=generate_password_hash("123456"), is_active=False),
            ]
        )

    return app.test_client()


def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json == {"ok": True, "db": "ok"}

    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.data == b"ok"


def test_dashboard_requires_login(client):
    r = client.get("/dashboard/customers", follow_redirects=False)
    assert r.status_code == 302
    assert "/auth/login" in r.headers["Location"]
    assert "next=" in r.headers["Location"]


def test_login_and_dashboard_access(client):
    r = client.post("/auth/login", data={"email": "user@nextmail.com", "password": "123456"}, follow_redirects=False)
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/dashboard/")

    r = client.get("/dashboard/")
    assert r.status_code == 200
    assert b"Dashboard" in r.data


def test_login_follows_local_next_only(client):
    r = client.post(
        "/auth/login",
        data={"email": "user@nextmail.com", "password": "123456", "next": "/dashboard/invoices"},
        follow_redirects=False,
    )
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/dashboard/invoices")

    client.get("/auth/logout")
    r = client.post(
        "/auth/login",
        data={"email": "user@nextmail.com", "password": "123456", "next": "//evil.example.com/"},
        follow_redirects=False,
    )
    assert r.status_code == 302
    assert "evil.example.com" not in r.headers["Location"]


def test_bad_password_shows_invalid_credentials(client):
    r = client.post("/auth/login", data={"email": "user@nextmail.com", "password": "wrong"})
    assert r.status_code == 200
    assert b"Invalid credentials." in r.data

    r = client.get("/dashboard/", follow_redirects=False)
    assert r.status_code == 302


def test_authenticate_maps_auth_errors(client):
    app = client.application
    with app.test_request_context("/auth/login", method="POST"):
        with session_scope(app) as s:
            assert authenticate(s, None, {"email": "user@nextmail.com", "password": "123456"}) is None
            assert authenticate(s, None, {"email": "nobody@nextmail.com", "password": "123456"}) == "Invalid credentials."
            assert authenticate(s, None, {"email": "user@nextmail.com", "password": ""}) == "Invalid credentials."
            # Any other sign-in failure type gets the generic message.
            assert authenticate(s, None, {"email": "gone@nextmail.com", "password": "123456"}) == "Something went wrong."


def test_authenticate_reraises_non_auth_errors(client, monkeypatch):
    def _boom(s, email, password):
        raise RuntimeError("directory unavailable")

    monkeypatch.setattr(auth_mod, "sign_in", _boom)
    app = client.application
    with app.test_request_context("/auth/login", method="POST"):
        with session_scope(app) as s:
            with pytest.raises(RuntimeError):
                authenticate(s, None, {"email": "user@nextmail.com", "password": "123456"})


def test_auth_error_carries_type():
    err = AuthError(ACCOUNT_DISABLED)
    assert err.type == "AccountDisabled"
    assert str(err) == "AccountDisabled"


def test_post_without_csrf_token_is_rejected(client):
    client.post("/auth/login", data={"email": "user@nextmail.com", "password": "123456"})
    r = client.post(
        "/dashboard/customers/create",
        data={"name": "Ann", "email": "ann@example.com", "image_url": "https://example.com/ann.png"},
    )
    assert r.status_code == 400


def test_unknown_page_is_404(client):
    r = client.get("/does-not-exist")
    assert r.status_code == 404


def test_index_sends_signed_in_users_to_dashboard(client):
    r = client.get("/")
    assert r.status_code == 200

    client.post("/auth/login", data={"email": "user@nextmail.com", "password": "123456"})
    r = client.get("/", follow_redirects=False)
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/dashboard/")
