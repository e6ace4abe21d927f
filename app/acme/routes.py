from flask import Blueprint, current_app, g, redirect, render_template, url_for
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.acme.db import db_session

bp = Blueprint("routes", __name__)


@bp.get("/")
def index():
    # Signed-in users go straight to the dashboard overview.
    if getattr(g, "current_user", None):
        return redirect(url_for("dashboard.index"))
    return render_template("public/index.html")


@bp.get("/health")
def health():
    """Readiness check: the app is up and the store answers ``SELECT 1``."""
    try:
        db_session().execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("Health check: database unreachable")
        return {"ok": False, "db": "unreachable"}, 503
    return {"ok": True, "db": "ok"}


@bp.get("/healthz")
def healthz():
    """Liveness probe; never touches the database."""
    return "ok", 200
