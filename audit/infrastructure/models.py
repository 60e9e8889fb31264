"""
Audit ledger model.
"""
from django.db import models

from core.domain.value_objects import AuditAction, AuditModule


class AuditLogEntry(models.Model):
    """
    One row per mutation, written in the same transaction as the mutation.

    ``operator_id`` and ``product_id`` are plain integers rather than foreign
    keys: the operator may be the reserved anonymous actor and entries must
    outlive the products they describe.
    """

    operator_id = models.BigIntegerField(help_text="Acting user id")
    module = models.CharField(
        max_length=32,
        choices=[(module.value, module.value) for module in AuditModule],
    )
    action = models.CharField(
        max_length=32,
        choices=[(action.value, action.value) for action in AuditAction],
    )
    product_id = models.BigIntegerField(null=True, blank=True, help_text="Owning product")
    details = models.TextField(default="{}", help_text="JSON details document")
    ip_address = models.CharField(max_length=64, blank=True, default="")
    created_at = models.DateTimeField(db_index=True)

    class Meta:
        db_table = "audit_logs"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["module", "action"]),
            models.Index(fields=["operator_id"]),
            models.Index(fields=["product_id", "created_at"]),
        ]

    def __str__(self):
        return f"{self.module}/{self.action} by {self.operator_id} at {self.created_at}"
