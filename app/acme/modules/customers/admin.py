from __future__ import annotations

import uuid

from flask import Blueprint, abort, flash, redirect, render_template, request

from app.acme.access import require_login
from app.acme.actions import FormState
from app.acme.db import db_session
from app.acme.modules.customers.service import (
    create_customer,
    delete_customer,
    fetch_filtered_customers,
    get_customer_by_id,
    update_customer,
)

bp = Blueprint("customers", __name__)


def _render_list(state: FormState):
    s = db_session()
    query = (request.args.get("query") or "").strip()
    customers = fetch_filtered_customers(s, query)
    return render_template("admin/customers/list.html", customers=customers, query=query, state=state)


# ---------- List ----------
@bp.get("/customers")
@require_login
def customers_list():
    return _render_list(FormState())


# ---------- Create ----------
@bp.get("/customers/create")
@require_login
def customers_create_get():
    return render_template("admin/customers/form.html", customer_id=None, values={}, state=FormState())


@bp.post("/customers/create")
@require_login
def customers_create_post():
    state = create_customer(db_session(), FormState(), request.form)
    if state.redirect_to:
        flash("Customer created.", "success")
        return redirect(state.redirect_to)
    return render_template("admin/customers/form.html", customer_id=None, values=request.form, state=state)


# ---------- Edit ----------
@bp.get("/customers/<uuid:customer_id>/edit")
@require_login
def customers_edit_get(customer_id: uuid.UUID):
    customer = get_customer_by_id(db_session(), customer_id)
    if not customer:
        abort(404)
    values = {"name": customer.name, "email": customer.email, "image_url": customer.image_url}
    return render_template("admin/customers/form.html", customer_id=customer.id, values=values, state=FormState())


@bp.post("/customers/<uuid:customer_id>/edit")
@require_login
def customers_edit_post(customer_id: uuid.UUID):
    state = update_customer(db_session(), customer_id, FormState(), request.form)
    if state.redirect_to:
        flash("Customer updated.", "success")
        return redirect(state.redirect_to)
    return render_template("admin/customers/form.html", customer_id=customer_id, values=request.form, state=state)


# ---------- Delete ----------
@bp.post("/customers/delete")
@require_login
def customers_delete():
    # Invoked from the listing itself: re-render in place, no redirect.
    state = delete_customer(db_session(), FormState(), request.form)
    return _render_list(state)
