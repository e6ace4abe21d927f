"""
Store error taxonomy.

Drivers only give us free text, so classification is substring based and kept in
this one place. Postgres says "violates unique constraint" / "violates foreign key
constraint", SQLite says "UNIQUE constraint failed" / "FOREIGN KEY constraint
failed"; matching is case-insensitive so both land in the same bucket.
"""

from __future__ import annotations


class StoreError(Exception):
    """Unclassified store failure."""

    def __init__(self, message: str, original: BaseException | None = None):
        super().__init__(message)
        self.original = original


class StoreConstraintError(StoreError):
    pass


class DuplicateValueError(StoreConstraintError):
    pass


class ReferentialIntegrityError(StoreConstraintError):
    pass


def classify_store_error(exc: BaseException) -> StoreError:
    message = str(exc)
    lowered = message.lower()
    if "unique constraint" in lowered:
        return DuplicateValueError(message, exc)
    if "foreign key constraint" in lowered:
        return ReferentialIntegrityError(message, exc)
    return StoreError(message, exc)
