from __future__ import annotations

import uuid
from decimal import Decimal

from flask import Blueprint, abort, flash, redirect, render_template, request

from app.acme.access import require_login
from app.acme.actions import FormState
from app.acme.db import db_session
from app.acme.modules.customers.service import list_customer_choices
from app.acme.modules.invoices.models import INVOICE_STATUSES
from app.acme.modules.invoices.service import (
    create_invoice,
    delete_invoice,
    fetch_filtered_invoices,
    get_invoice_by_id,
    update_invoice,
)

bp = Blueprint("invoices", __name__)


def _page_arg() -> int:
    try:
        return max(int(request.args.get("page") or "1"), 1)
    except ValueError:
        return 1


def _render_list(state: FormState):
    s = db_session()
    query = (request.args.get("query") or "").strip()
    page = _page_arg()
    listing = fetch_filtered_invoices(s, query, page)
    return render_template(
        "admin/invoices/list.html",
        invoices=listing["rows"],
        total_pages=listing["total_pages"],
        page=page,
        query=query,
        state=state,
    )


def _render_form(invoice_id: uuid.UUID | None, values, state: FormState):
    return render_template(
        "admin/invoices/form.html",
        invoice_id=invoice_id,
        customers=list_customer_choices(db_session()),
        statuses=INVOICE_STATUSES,
        values=values,
        state=state,
    )


# ---------- List ----------
@bp.get("/invoices")
@require_login
def invoices_list():
    return _render_list(FormState())


# ---------- Create ----------
@bp.get("/invoices/create")
@require_login
def invoices_create_get():
    return _render_form(None, {}, FormState())


@bp.post("/invoices/create")
@require_login
def invoices_create_post():
    state = create_invoice(db_session(), FormState(), request.form)
    if state.redirect_to:
        flash("Invoice created.", "success")
        return redirect(state.redirect_to)
    return _render_form(None, request.form, state)


# ---------- Edit ----------
@bp.get("/invoices/<uuid:invoice_id>/edit")
@require_login
def invoices_edit_get(invoice_id: uuid.UUID):
    invoice = get_invoice_by_id(db_session(), invoice_id)
    if not invoice:
        abort(404)
    values = {
        "customer_id": str(invoice.customer_id),
        "amount": str(Decimal(invoice.amount) / 100),
        "status": invoice.status,
    }
    return _render_form(invoice.id, values, FormState())


@bp.post("/invoices/<uuid:invoice_id>/edit")
@require_login
def invoices_edit_post(invoice_id: uuid.UUID):
    state = update_invoice(db_session(), invoice_id, FormState(), request.form)
    if state.redirect_to:
        flash("Invoice updated.", "success")
        return redirect(state.redirect_to)
    return _render_form(invoice_id, request.form, state)


# ---------- Delete ----------
@bp.post("/invoices/delete")
@require_login
def invoices_delete():
    state = delete_invoice(db_session(), FormState(), request.form)
    return _render_list(state)
