"""
Django implementation of AuditLogRepository port.
"""
from typing import List, Tuple

from audit.domain.audit_entry import AuditLogEntry
from audit.infrastructure.models import AuditLogEntry as AuditLogEntryModel
from audit.ports.audit_log_repository import AuditLogFilter, AuditLogRepository
from core.domain.value_objects import AuditAction, AuditModule, PageRequest
from core.infrastructure.database import paginate


class DjangoAuditLogRepository(AuditLogRepository):
    """Django ORM implementation of AuditLogRepository."""

    def _to_domain(self, model: AuditLogEntryModel) -> AuditLogEntry:
        return AuditLogEntry(
            id=model.id,
            operator_id=model.operator_id,
            module=AuditModule(model.module),
            action=AuditAction(model.action),
            product_id=model.product_id,
            details=model.details,
            ip_address=model.ip_address,
            created_at=model.created_at,
        )

    def append(self, entry: AuditLogEntry) -> AuditLogEntry:
        model = AuditLogEntryModel.objects.create(
            operator_id=entry.operator_id,
            module=entry.module.value,
            action=entry.action.value,
            product_id=entry.product_id,
            details=entry.details,
            ip_address=entry.ip_address,
            created_at=entry.created_at,
        )
        return self._to_domain(model)

    def query(
        self, filters: AuditLogFilter, page_request: PageRequest
    ) -> Tuple[int, List[AuditLogEntry]]:
        queryset = AuditLogEntryModel.objects.all()
        if filters.start_time:
            queryset = queryset.filter(created_at__gte=filters.start_time)
        if filters.end_time:
            queryset = queryset.filter(created_at__lte=filters.end_time)
        if filters.module:
            queryset = queryset.filter(module=filters.module)
        if filters.action:
            queryset = queryset.filter(action=filters.action)
        if filters.operator_id:
            queryset = queryset.filter(operator_id=filters.operator_id)
        if filters.product_id:
            queryset = queryset.filter(product_id=filters.product_id)
        if filters.product_scope is not None:
            queryset = queryset.filter(product_id__in=list(filters.product_scope))

        total, models = paginate(queryset.order_by("-created_at", "-id"), page_request)
        return total, [self._to_domain(model) for model in models]
