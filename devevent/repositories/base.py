"""
Helpers shared by the repositories.
"""

from sqlalchemy.exc import IntegrityError


def _message(exc: IntegrityError) -> str:
    return str(exc.orig if exc.orig is not None else exc).lower()


def is_unique_violation(exc: IntegrityError) -> bool:
    # PostgreSQL: "duplicate key value violates unique constraint ..."
    # SQLite:     "UNIQUE constraint failed: ..."
    return "unique" in _message(exc)


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    return "foreign key" in _message(exc)
