"""Transaction helper used by every service that mutates shared rows.

``locked_transaction`` opens (or nests into) an atomic block, bounds how long
PostgreSQL waits on a contended row lock, and maps database failures onto the
domain error taxonomy.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from django.conf import settings
from django.db import DatabaseError as DjangoDatabaseError
from django.db import IntegrityError, OperationalError, connection, transaction

from core.domain.errors import ConflictError, DatabaseError, ErrorCode

logger = logging.getLogger(__name__)

LOCK_NOT_AVAILABLE = "55P03"


def _lock_timeout_ms() -> int:
    return int(settings.COMMERCE.get("LOCK_TIMEOUT_MS", 5000))


def _is_lock_timeout(exc: OperationalError) -> bool:
    cause = exc.__cause__
    if getattr(cause, "pgcode", None) == LOCK_NOT_AVAILABLE:
        return True
    if getattr(cause, "sqlstate", None) == LOCK_NOT_AVAILABLE:
        return True
    return "database is locked" in str(exc)


@contextmanager
def locked_transaction(conflict: ConflictError | None = None) -> Iterator[None]:
    """Run the body atomically with a bounded lock wait.

    ``conflict`` is raised in place of a generic ConflictError when a
    constraint rejects the write.

    Raises:
        ConflictError: On integrity violations, or (retryable) when the lock
            wait timed out.
        DatabaseError: On any other database failure.
    """
    try:
        with transaction.atomic():
            if connection.vendor == "postgresql":
                with connection.cursor() as cursor:
                    cursor.execute(
                        "SELECT set_config('lock_timeout', %s, true)",
                        [f"{_lock_timeout_ms()}ms"],
                    )
            yield
    except IntegrityError as exc:
        logger.warning("Integrity violation", extra={"error": str(exc)})
        raise (conflict or ConflictError(message="Conflicting update")) from exc
    except OperationalError as exc:
        if _is_lock_timeout(exc):
            logger.warning("Lock wait timed out", extra={"error": str(exc)})
            raise ConflictError(
                code=ErrorCode.LOCK_TIMEOUT,
                message="Resource is busy, please retry",
                retryable=True,
            ) from exc
        logger.exception("Database operation failed")
        raise DatabaseError() from exc
    except DjangoDatabaseError as exc:
        logger.exception("Database operation failed")
        raise DatabaseError() from exc
