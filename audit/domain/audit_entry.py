"""
AuditLogEntry domain entity.

An entry is immutable once written; the ledger only ever appends.
"""
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from django.utils import timezone

from core.domain.value_objects import AuditAction, AuditModule


@dataclass(frozen=True)
class AuditLogEntry:
    """
    Audit ledger entry.

    ``details`` holds the serialized JSON document exactly as stored.
    """

    id: Optional[int]
    operator_id: int
    module: AuditModule
    action: AuditAction
    product_id: Optional[int]
    details: str
    ip_address: str
    created_at: datetime

    def __post_init__(self):
        """Validate audit entry."""
        if not self.operator_id:
            raise ValueError("Audit entry requires an operator")

    @classmethod
    def create(
        cls,
        operator_id: int,
        module: AuditModule,
        action: AuditAction,
        details: str,
        product_id: Optional[int] = None,
        ip_address: str = "",
    ) -> "AuditLogEntry":
        """
        Create a new, not yet persisted, AuditLogEntry.

        Args:
            operator_id: Acting user id (may be the anonymous actor id)
            module: Module the mutated entity belongs to
            action: Kind of mutation
            details: Serialized JSON details document
            product_id: Owning product, None for product deletions and global events
            ip_address: Client address of the request

        Returns:
            AuditLogEntry entity instance
        """
        return cls(
            id=None,
            operator_id=operator_id,
            module=module,
            action=action,
            product_id=product_id,
            details=details,
            ip_address=ip_address or "",
            created_at=timezone.now(),
        )

    @property
    def document(self) -> Dict[str, Any]:
        """Parsed details document."""
        return json.loads(self.details) if self.details else {}
