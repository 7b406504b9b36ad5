"""
More Than Trip Core — Database Error Translation
==================================================

What:  Turns SQLAlchemy IntegrityError into the application's exception types,
       and wraps CRUD writes (flush_changes, execute_write) with that mapping.
Why:   Services need "unknown reference" and "duplicate" as distinct outcomes
       instead of a generic failure.
How:   Reads the PostgreSQL SQLSTATE from the driver exception
       (23503 foreign_key_violation, 23505 unique_violation). Falls back to
       the message text for drivers that don't expose a code.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Executable

from morethantrip.exceptions import (
    ConflictError,
    DatabaseError,
    ForeignKeyViolationError,
    InvalidInputError,
    MoreThanTripError,
)

logger = logging.getLogger(__name__)

FOREIGN_KEY_VIOLATION = "23503"
UNIQUE_VIOLATION = "23505"


def _sqlstate(exc: IntegrityError) -> Optional[str]:
    orig = exc.orig
    for attr in ("sqlstate", "pgcode"):
        code = getattr(orig, attr, None)
        if code:
            return str(code)
    return None


def translate_integrity_error(exc: IntegrityError, resource: str) -> MoreThanTripError:
    """
    Map an IntegrityError raised while writing `resource` to our exceptions.

    Returns the exception rather than raising it so callers can write
    `raise translate_integrity_error(e, "photo") from e`.
    """
    code = _sqlstate(exc)
    text = str(exc.orig).lower()

    if code == FOREIGN_KEY_VIOLATION or (code is None and "foreign key" in text):
        return ForeignKeyViolationError(
            message=f"The {resource} references a record that does not exist",
            context={"resource": resource, "detail": str(exc.orig)},
        )
    if code == UNIQUE_VIOLATION or (code is None and "unique" in text):
        return ConflictError(
            message=f"A {resource} with the same unique value already exists",
            context={"resource": resource},
        )
    return DatabaseError(context={"resource": resource, "error_type": type(exc.orig).__name__})


def _crud_error(exc: SQLAlchemyError, resource: str, deleting: bool = False) -> MoreThanTripError:
    # On plain CRUD paths an unknown reference is the client's mistake, so
    # the foreign-key case becomes InvalidInputError (400) rather than the
    # ForeignKeyViolationError the upload workflow reacts to. On a delete it
    # means other rows still point at this one (409). Driver text stays in
    # the log; the client only sees the resource name.
    if not isinstance(exc, IntegrityError):
        return DatabaseError(context={"resource": resource, "error_type": type(exc).__name__})
    error = translate_integrity_error(exc, resource)
    if isinstance(error, ForeignKeyViolationError):
        logger.warning("Foreign key violation on %s: %s", resource, error.context.get("detail"))
        if deleting:
            return ConflictError(
                message=f"The {resource} is still referenced by other records and cannot be deleted",
                context={"resource": resource},
            )
        return InvalidInputError(
            message=f"The {resource} references a region, trip, user or tag that does not exist",
            context={"resource": resource},
        )
    return error


async def flush_changes(db: AsyncSession, resource: str, deleting: bool = False) -> None:
    """
    Flush pending ORM writes for a CRUD operation, translating failures.

    Pass deleting=True after db.delete() so a foreign-key violation reads
    as "still referenced" (409) instead of "unknown reference" (400).
    """
    try:
        await db.flush()
    except SQLAlchemyError as e:
        raise _crud_error(e, resource, deleting=deleting) from e


async def execute_write(db: AsyncSession, statement: Executable, resource: str) -> None:
    """Execute a Core INSERT/UPDATE/DELETE for a CRUD operation, translating failures."""
    try:
        await db.execute(statement)
    except SQLAlchemyError as e:
        raise _crud_error(e, resource) from e
