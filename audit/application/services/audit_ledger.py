"""
AuditLedger - couples every mutation to its audit record.

Handlers call ``record()`` as the last step inside their atomic block.
A failure here raises AuditFailureError, which unwinds the enclosing
transaction: the mutation is discarded rather than committed unrecorded.
"""
import json
import logging
from typing import Any, Dict, Optional

from django.core.serializers.json import DjangoJSONEncoder
from django.db import DatabaseError, transaction

from audit.domain.audit_entry import AuditLogEntry
from audit.ports.audit_log_repository import AuditLogRepository
from core.domain.exceptions import AuditFailureError
from core.domain.value_objects import Actor, AuditAction, AuditModule
from core.metrics import audit_failures_total, audit_records_total, mutations_total

logger = logging.getLogger(__name__)


class AuditLedger:
    """Writes audit records inside the caller's open transaction."""

    def __init__(self, audit_log_repository: AuditLogRepository):
        """Initialize ledger with its repository."""
        self.audit_log_repository = audit_log_repository

    def record(
        self,
        actor: Actor,
        module: AuditModule,
        action: AuditAction,
        product_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> AuditLogEntry:
        """
        Append one audit record to the current transaction.

        Args:
            actor: Acting identity, supplies operator id and ip
            module: Module of the mutated entity
            action: Kind of mutation
            product_id: Owning product, None when the product itself was deleted
            details: JSON-serializable details document

        Returns:
            The stored entry

        Raises:
            AuditFailureError: If called outside a transaction, or if the
                details cannot be serialized or the insert fails
        """
        log_extra = {
            "operator_id": actor.user_id,
            "audit_module": module.value,
            "action": action.value,
            "product_id": product_id,
        }

        if not transaction.get_connection().in_atomic_block:
            audit_failures_total.labels(module=module.value).inc()
            logger.error("Audit record requested outside a transaction", extra=log_extra)
            raise AuditFailureError()

        try:
            document = json.dumps(
                details or {}, cls=DjangoJSONEncoder, ensure_ascii=False, sort_keys=True
            )
        except (TypeError, ValueError) as exc:
            audit_failures_total.labels(module=module.value).inc()
            logger.error("Audit details not serializable: %s", exc, extra=log_extra)
            raise AuditFailureError() from exc

        entry = AuditLogEntry.create(
            operator_id=actor.user_id,
            module=module,
            action=action,
            details=document,
            product_id=product_id,
            ip_address=actor.ip_address,
        )

        try:
            with transaction.atomic():
                stored = self.audit_log_repository.append(entry)
        except DatabaseError as exc:
            audit_failures_total.labels(module=module.value).inc()
            logger.error("Audit insert failed: %s", exc, extra=log_extra, exc_info=True)
            raise AuditFailureError() from exc

        audit_records_total.labels(module=module.value, action=action.value).inc()
        mutations_total.labels(module=module.value, action=action.value).inc()
        logger.info("Audit record written", extra={**log_extra, "audit_id": stored.id})
        return stored
