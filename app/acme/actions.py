"""
Shared plumbing for form-post mutations.

A mutation handler takes the previous ``FormState`` plus the raw form and returns
the next ``FormState``. Validation failures never reach the store; a store call is
exactly one statement followed by exactly one listing revalidation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.acme.cache import revalidate_path
from app.acme.errors import DuplicateValueError, ReferentialIntegrityError, StoreError, classify_store_error

logger = logging.getLogger(__name__)


@dataclass
class FormState:
    errors: dict[str, list[str]] = field(default_factory=dict)
    message: str | None = None
    # Navigation target after a successful create/update; not part of the rendered state.
    redirect_to: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"errors": self.errors, "message": self.message}


@dataclass(frozen=True)
class StoreMessages:
    default: str
    duplicate: str | None = None
    reference: str | None = None
    not_found: str | None = None

    def for_error(self, err: StoreError) -> str:
        if isinstance(err, DuplicateValueError) and self.duplicate:
            return self.duplicate
        if isinstance(err, ReferentialIntegrityError) and self.reference:
            return self.reference
        return self.default


def validation_failed(errors: dict[str, list[str]], message: str) -> FormState:
    logger.info("Validation failed: %s", errors)
    return FormState(errors=errors, message=message)


def execute_mutation(
    s: Session,
    stmt: Any,
    *,
    listing_path: str,
    messages: StoreMessages,
    redirect: bool,
    success_message: str | None = None,
) -> FormState:
    """
    Run one INSERT/UPDATE/DELETE, commit, revalidate ``listing_path``.

    Store failures are rolled back, classified and returned as a message; they do
    not propagate. ``messages.not_found`` turns a zero-row UPDATE/DELETE into a
    failure as well.
    """
    try:
        result = s.execute(stmt)
        if messages.not_found and result.rowcount == 0:
            s.rollback()
            return FormState(message=messages.not_found)
        s.commit()
    except SQLAlchemyError as e:
        s.rollback()
        err = classify_store_error(e)
        if type(err) is StoreError:
            logger.exception("Database error on %s", listing_path)
        else:
            logger.warning("Constraint violation on %s: %s", listing_path, err)
        return FormState(message=messages.for_error(err))

    revalidate_path(listing_path)
    if redirect:
        return FormState(redirect_to=listing_path)
    return FormState(message=success_message)
