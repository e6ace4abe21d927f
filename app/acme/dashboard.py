from flask import Blueprint, render_template

from app.acme.access import require_login
from app.acme.cache import cached_listing
from app.acme.constants import CUSTOMERS_PATH, DASHBOARD_PATH, INVOICES_PATH
from app.acme.db import db_session
from app.acme.modules.invoices.service import fetch_card_data, fetch_latest_invoices

bp = Blueprint("dashboard", __name__)


@bp.get("/")
@require_login
def index():
    s = db_session()
    overview = cached_listing(
        DASHBOARD_PATH,
        "overview",
        lambda: {"cards": fetch_card_data(s), "latest_invoices": fetch_latest_invoices(s)},
        depends_on=(CUSTOMERS_PATH, INVOICES_PATH),
    )
    return render_template(
        "admin/index.html",
        cards=overview["cards"],
        latest_invoices=overview["latest_invoices"],
    )
