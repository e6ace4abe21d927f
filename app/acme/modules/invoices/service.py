from __future__ import annotations

import math
import uuid
from datetime import date
from typing import Any, Mapping

from sqlalchemy import String, cast, delete, func, insert, or_, select, update
from sqlalchemy.orm import Session

from app.acme.actions import FormState, StoreMessages, execute_mutation, validation_failed
from app.acme.cache import cached_listing
from app.acme.constants import CUSTOMERS_PATH, INVOICES_PATH, ITEMS_PER_PAGE
from app.acme.modules.customers.models import Customer
from app.acme.modules.invoices.forms import DeleteInvoiceForm, InvoiceForm, to_cents
from app.acme.modules.invoices.models import Invoice
from app.acme.validation import parse_form


_CREATE_MESSAGES = StoreMessages(
    default="Database Error: Failed to Create Invoice.",
    reference="Database Error: Selected customer does not exist.",
)
_UPDATE_MESSAGES = StoreMessages(
    default="Database Error: Failed to Update Invoice.",
    reference="Database Error: Selected customer does not exist.",
    not_found="Database Error: Invoice not found.",
)
_DELETE_MESSAGES = StoreMessages(
    default="Database Error: Failed to Delete Invoice.",
    not_found="Database Error: Invoice not found.",
)


def _row_to_dict(row) -> dict[str, Any]:
    return {
        "id": str(row.id),
        "customer_id": str(row.customer_id),
        "name": row.name,
        "email": row.email,
        "image_url": row.image_url,
        "amount": int(row.amount),
        "status": row.status,
        "date": row.date.isoformat() if row.date else None,
    }


def _listing_select():
    return (
        select(
            Invoice.id,
            Invoice.customer_id,
            Invoice.amount,
            Invoice.status,
            Invoice.date,
            Customer.name,
            Customer.email,
            Customer.image_url,
        )
        .join(Customer, Invoice.customer_id == Customer.id)
    )


def _search_clause(query: str):
    like = f"%{query}%"
    return or_(
        Customer.name.ilike(like),
        Customer.email.ilike(like),
        cast(Invoice.amount, String).ilike(like),
        cast(Invoice.date, String).ilike(like),
        Invoice.status.ilike(like),
    )


def get_invoice_by_id(s: Session, invoice_id: uuid.UUID) -> Invoice | None:
    return s.get(Invoice, invoice_id)


def fetch_filtered_invoices(s: Session, query: str = "", page: int = 1) -> dict[str, Any]:
    """
    Invoices listing projection for one page: ``{"rows": [...], "total_pages": n}``.
    """
    query = (query or "").strip()
    page = max(int(page or 1), 1)

    def _load() -> dict[str, Any]:
        stmt = _listing_select()
        count_stmt = select(func.count(Invoice.id)).select_from(Invoice).join(Customer, Invoice.customer_id == Customer.id)
        if query:
            stmt = stmt.where(_search_clause(query))
            count_stmt = count_stmt.where(_search_clause(query))
        stmt = (
            stmt.order_by(Invoice.date.desc(), Invoice.id.asc())
            .limit(ITEMS_PER_PAGE)
            .offset((page - 1) * ITEMS_PER_PAGE)
        )
        total = int(s.execute(count_stmt).scalar_one() or 0)
        return {
            "rows": [_row_to_dict(row) for row in s.execute(stmt)],
            "total_pages": math.ceil(total / ITEMS_PER_PAGE),
        }

    return cached_listing(INVOICES_PATH, f"q={query.lower()}&page={page}", _load, depends_on=(CUSTOMERS_PATH,))


def fetch_latest_invoices(s: Session, limit: int = 5) -> list[dict[str, Any]]:
    stmt = _listing_select().order_by(Invoice.date.desc(), Invoice.id.asc()).limit(limit)
    return [_row_to_dict(row) for row in s.execute(stmt)]


def fetch_card_data(s: Session) -> dict[str, int]:
    """Overview totals; amounts in cents."""
    invoice_count = s.execute(select(func.count(Invoice.id))).scalar_one()
    customer_count = s.execute(select(func.count(Customer.id))).scalar_one()
    totals = dict(
        s.execute(
            select(Invoice.status, func.coalesce(func.sum(Invoice.amount), 0)).group_by(Invoice.status)
        ).all()
    )
    return {
        "number_of_invoices": int(invoice_count or 0),
        "number_of_customers": int(customer_count or 0),
        "total_paid": int(totals.get("paid") or 0),
        "total_pending": int(totals.get("pending") or 0),
    }


def create_invoice(s: Session, prev_state: FormState | None, form: Mapping[str, Any]) -> FormState:
    parsed = parse_form(InvoiceForm, form)
    if not parsed.ok:
        return validation_failed(parsed.errors, "Missing Fields. Failed to Create Invoice.")

    data = parsed.data
    stmt = insert(Invoice).values(
        customer_id=uuid.UUID(data["customer_id"]),
        amount=to_cents(data["amount"]),
        status=data["status"],
        date=date.today(),
    )
    return execute_mutation(s, stmt, listing_path=INVOICES_PATH, messages=_CREATE_MESSAGES, redirect=True)


def update_invoice(
    s: Session, invoice_id: uuid.UUID, prev_state: FormState | None, form: Mapping[str, Any]
) -> FormState:
    parsed = parse_form(InvoiceForm, form)
    if not parsed.ok:
        return validation_failed(parsed.errors, "Missing Fields. Failed to Update Invoice.")

    data = parsed.data
    stmt = (
        update(Invoice)
        .where(Invoice.id == invoice_id)
        .values(
            customer_id=uuid.UUID(data["customer_id"]),
            amount=to_cents(data["amount"]),
            status=data["status"],
        )
        .execution_options(synchronize_session=False)
    )
    return execute_mutation(s, stmt, listing_path=INVOICES_PATH, messages=_UPDATE_MESSAGES, redirect=True)


def delete_invoice(s: Session, prev_state: FormState | None, form: Mapping[str, Any]) -> FormState:
    parsed = parse_form(DeleteInvoiceForm, form)
    if not parsed.ok:
        return validation_failed(parsed.errors, "Invalid Invoice ID. Failed to Delete Invoice.")

    stmt = (
        delete(Invoice)
        .where(Invoice.id == uuid.UUID(parsed.data["id"]))
        .execution_options(synchronize_session=False)
    )
    return execute_mutation(
        s,
        stmt,
        listing_path=INVOICES_PATH,
        messages=_DELETE_MESSAGES,
        redirect=False,
        success_message="Deleted Invoice.",
    )
