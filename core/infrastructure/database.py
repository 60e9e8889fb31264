"""
Database utilities and transaction management.
"""
import contextlib
import logging
from typing import Iterator

from django.db import DatabaseError, IntegrityError, transaction

from core.domain.exceptions import ConflictError, DomainException, StorageFailureError
from core.domain.value_objects import PageRequest

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def atomic_operation(operation: str, **context) -> Iterator[None]:
    """
    Run a mutation and its audit record in one database transaction.

    Domain exceptions raised inside the block roll the transaction back and
    propagate unchanged. Storage errors are translated: a unique constraint
    firing becomes ConflictError, anything else StorageFailureError. The
    driver error is logged with the operation context and not re-exposed.

    Usage:
        with atomic_operation("add_device", actor_id=actor.user_id):
            # Database operations
            pass

    Args:
        operation: Operation name used in logs
        **context: Extra log context (actor_id, product_id, entity ids)
    """
    log_extra = {"operation": operation, **context}
    try:
        with transaction.atomic():
            yield
    except DomainException as exc:
        logger.info(
            "Transaction rolled back: %s", exc.code, extra={**log_extra, "error_code": exc.code}
        )
        raise
    except IntegrityError as exc:
        logger.warning("Constraint violation: %s", exc, extra=log_extra)
        raise ConflictError() from exc
    except DatabaseError as exc:
        logger.error("Storage failure: %s", exc, extra=log_extra, exc_info=True)
        raise StorageFailureError() from exc


def paginate(queryset, page_request: PageRequest):
    """Return (total, rows) for one page of an ordered queryset."""
    total = queryset.count()
    start = page_request.offset
    return total, list(queryset[start : start + page_request.page_size])
