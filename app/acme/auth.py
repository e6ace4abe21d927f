from __future__ import annotations

import uuid
from typing import Any, Mapping

from flask import Blueprint, current_app, g, redirect, render_template, request, session, url_for
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash

from app.acme.db import db_session
from app.acme.models import User

bp = Blueprint("auth", __name__)

CREDENTIALS_SIGNIN = "CredentialsSignin"
ACCOUNT_DISABLED = "AccountDisabled"


class AuthError(Exception):
    """Sign-in failure; ``type`` is a fixed code such as ``CredentialsSignin``."""

    def __init__(self, type: str, message: str | None = None):
        super().__init__(message or type)
        self.type = type


def sign_in(s: Session, email: str, password: str) -> User:
    email = (email or "").strip().lower()
    user = s.query(User).filter(User.email == email).one_or_none()
    if not user or not check_password_hash(user.password_hash, password or ""):
        raise AuthError(CREDENTIALS_SIGNIN)
    if not user.is_active:
        raise AuthError(ACCOUNT_DISABLED)
    return user


def authenticate(s: Session, prev_state: str | None, form: Mapping[str, Any]) -> str | None:
    """
    Sign-in action. Returns None on success, otherwise the message to show.
    Only AuthError is mapped; anything else propagates.
    """
    try:
        user = sign_in(s, form.get("email") or "", form.get("password") or "")
    except AuthError as e:
        current_app.logger.info("Sign-in failed (type=%s request_id=%s)", e.type, getattr(g, "request_id", None))
        if e.type == CREDENTIALS_SIGNIN:
            return "Invalid credentials."
        return "Something went wrong."
    session["user_id"] = user.id
    return None


def load_current_user() -> None:
    """
    Loads g.current_user from the signed session cookie.
    Also assigns a simple per-request request_id (for log correlation).
    """
    if not getattr(g, "request_id", None):
        g.request_id = uuid.uuid4().hex
    if request.path.startswith(("/static/", "/health", "/healthz")):
        g.current_user = None
        return

    user_id = session.get("user_id")
    if not user_id:
        g.current_user = None
        return

    s = db_session()
    user = s.get(User, int(user_id))
    if not user or not user.is_active:
        session.pop("user_id", None)
        g.current_user = None
        return
    g.current_user = user


@bp.get("/login")
def login_get():
    nxt = (request.args.get("next") or "").strip()
    return render_template("auth/login.html", next=nxt, error=None)


@bp.post("/login")
def login_post():
    nxt = (request.form.get("next") or "").strip()
    error = authenticate(db_session(), None, request.form)
    if error:
        return render_template("auth/login.html", next=nxt, error=error, email=request.form.get("email") or ""), 200
    # Optional "next" redirect (only allow local paths to avoid open redirects).
    if nxt.startswith("/") and not nxt.startswith("//"):
        return redirect(nxt)
    return redirect(url_for("dashboard.index"))


@bp.get("/logout")
def logout():
    session.pop("user_id", None)
    return redirect(url_for("routes.index"))
