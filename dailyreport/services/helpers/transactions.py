"""
Unit-of-work helper for service-layer writes.

Every mutating service operation runs inside exactly one ``unit_of_work()``
block: business rules are checked first, rows are added/flushed, and the
block commits once on exit. Any failure rolls the whole block back so a
report is never left half-written.

    IntegrityError (unique)  -> ``conflict`` error if given, else InternalError
    IntegrityError (FK)      -> ``in_use`` error if given, else InternalError
    IntegrityError (other)   -> InternalError
    SQLAlchemyError          -> InternalError (logged with traceback)
    AppError                 -> re-raised unchanged after rollback

Usage:
    with unit_of_work(conflict=lambda: DuplicateEntryError(...)):
        db.session.add(report)
        db.session.flush()
        db.session.add_all(visits)
"""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from dailyreport.core.exceptions import AppError, InternalError
from dailyreport.models import db

logger = logging.getLogger(__name__)

_UNIQUE_MARKERS = ("unique constraint", "duplicate key", "uq_")
_FOREIGN_KEY_MARKERS = ("foreign key constraint",)


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the driver reports a unique-constraint violation."""
    orig = getattr(exc, "orig", None)
    if getattr(orig, "pgcode", None) == "23505":
        return True
    text = str(orig if orig is not None else exc).lower()
    return any(marker in text for marker in _UNIQUE_MARKERS)


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    if getattr(orig, "pgcode", None) == "23503":
        return True
    text = str(orig if orig is not None else exc).lower()
    return any(marker in text for marker in _FOREIGN_KEY_MARKERS)


@contextmanager
def unit_of_work(conflict=None, in_use=None):
    """Commit the session on success, roll back and translate on failure.

    Args:
        conflict: Optional zero-arg callable returning the AppError to raise
            when the store rejects the write with a unique violation (a
            concurrent insert that slipped past the pre-check).
        in_use: Optional zero-arg callable returning the AppError to raise
            when a delete is blocked by a foreign key that still points at
            the row.
    """
    try:
        yield db.session
        db.session.commit()
    except AppError:
        db.session.rollback()
        raise
    except IntegrityError as exc:
        db.session.rollback()
        if conflict is not None and is_unique_violation(exc):
            logger.warning("Unique violation on commit: %s", exc.orig)
            raise conflict() from exc
        if in_use is not None and is_foreign_key_violation(exc):
            logger.warning("Foreign key violation on commit: %s", exc.orig)
            raise in_use() from exc
        logger.exception("Integrity error on commit")
        raise InternalError() from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Database error on commit")
        raise InternalError() from exc
