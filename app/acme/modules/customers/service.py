from __future__ import annotations

import uuid
from typing import Any, Mapping

from sqlalchemy import case, delete, func, insert, or_, select, update
from sqlalchemy.orm import Session

from app.acme.actions import FormState, StoreMessages, execute_mutation, validation_failed
from app.acme.cache import cached_listing
from app.acme.constants import CUSTOMERS_PATH, INVOICES_PATH
from app.acme.modules.customers.forms import CustomerForm, DeleteCustomerForm
from app.acme.modules.customers.models import Customer
from app.acme.modules.invoices.models import Invoice
from app.acme.validation import parse_form


_CREATE_MESSAGES = StoreMessages(
    default="Database Error: Failed to Create Customer.",
    duplicate="Database Error: Email address already exists.",
)
_UPDATE_MESSAGES = StoreMessages(
    default="Database Error: Failed to Update Customer.",
    duplicate="Database Error: Email address already exists.",
    not_found="Database Error: Customer not found.",
)
_DELETE_MESSAGES = StoreMessages(
    default="Database Error: Failed to Delete Customer.",
    reference="Database Error: Cannot delete customer with existing invoices.",
    not_found="Database Error: Customer not found.",
)


def get_customer_by_id(s: Session, customer_id: uuid.UUID) -> Customer | None:
    return s.get(Customer, customer_id)


def list_customer_choices(s: Session) -> list[Customer]:
    """Customers for the invoice form's select box."""
    return list(s.scalars(select(Customer).order_by(Customer.name.asc())))


def fetch_filtered_customers(s: Session, query: str = "") -> list[dict[str, Any]]:
    """
    Customers listing projection: one row per customer with invoice totals (cents).
    Served through the listing cache; rows are plain dicts so any cache backend can
    hold them.
    """
    query = (query or "").strip()

    def _load() -> list[dict[str, Any]]:
        stmt = (
            select(
                Customer.id,
                Customer.name,
                Customer.email,
                Customer.image_url,
                func.count(Invoice.id).label("total_invoices"),
                func.coalesce(func.sum(case((Invoice.status == "pending", Invoice.amount), else_=0)), 0).label("total_pending"),
                func.coalesce(func.sum(case((Invoice.status == "paid", Invoice.amount), else_=0)), 0).label("total_paid"),
            )
            .outerjoin(Invoice, Invoice.customer_id == Customer.id)
            .group_by(Customer.id, Customer.name, Customer.email, Customer.image_url)
            .order_by(Customer.name.asc())
        )
        if query:
            like = f"%{query}%"
            stmt = stmt.where(or_(Customer.name.ilike(like), Customer.email.ilike(like)))
        return [
            {
                "id": str(row.id),
                "name": row.name,
                "email": row.email,
                "image_url": row.image_url,
                "total_invoices": int(row.total_invoices or 0),
                "total_pending": int(row.total_pending or 0),
                "total_paid": int(row.total_paid or 0),
            }
            for row in s.execute(stmt)
        ]

    return cached_listing(CUSTOMERS_PATH, f"q={query.lower()}", _load, depends_on=(INVOICES_PATH,))


def create_customer(s: Session, prev_state: FormState | None, form: Mapping[str, Any]) -> FormState:
    parsed = parse_form(CustomerForm, form)
    if not parsed.ok:
        return validation_failed(parsed.errors, "Missing or invalid fields. Failed to Create Customer.")

    data = parsed.data
    stmt = insert(Customer).values(name=data["name"], email=data["email"], image_url=data["image_url"])
    return execute_mutation(s, stmt, listing_path=CUSTOMERS_PATH, messages=_CREATE_MESSAGES, redirect=True)


def update_customer(
    s: Session, customer_id: uuid.UUID, prev_state: FormState | None, form: Mapping[str, Any]
) -> FormState:
    parsed = parse_form(CustomerForm, form)
    if not parsed.ok:
        return validation_failed(parsed.errors, "Missing or invalid fields. Failed to Update Customer.")

    data = parsed.data
    stmt = (
        update(Customer)
        .where(Customer.id == customer_id)
        .values(name=data["name"], email=data["email"], image_url=data["image_url"])
        .execution_options(synchronize_session=False)
    )
    return execute_mutation(s, stmt, listing_path=CUSTOMERS_PATH, messages=_UPDATE_MESSAGES, redirect=True)


def delete_customer(s: Session, prev_state: FormState | None, form: Mapping[str, Any]) -> FormState:
    parsed = parse_form(DeleteCustomerForm, form)
    if not parsed.ok:
        return validation_failed(parsed.errors, "Invalid Customer ID. Failed to Delete Customer.")

    stmt = (
        delete(Customer)
        .where(Customer.id == uuid.UUID(parsed.data["id"]))
        .execution_options(synchronize_session=False)
    )
    return execute_mutation(
        s,
        stmt,
        listing_path=CUSTOMERS_PATH,
        messages=_DELETE_MESSAGES,
        redirect=False,
        success_message="Customer Deleted Successfully.",
    )
