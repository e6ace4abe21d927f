from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import g, redirect, request, url_for

from app.acme.models import User


def require_login(fn: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(fn)
    def wrapped(*args: Any, **kwargs: Any):
        user: User | None = getattr(g, "current_user", None)
        # Unauthenticated -> redirect to login, coming back here afterwards.
        if not user or not user.is_active:
            nxt = request.full_path or request.path
            # Avoid trailing '?' from full_path when there is no query string.
            if nxt.endswith("?"):
                nxt = nxt[:-1]
            return redirect(url_for("auth.login_get", next=nxt))
        return fn(*args, **kwargs)

    return wrapped
