"""
List audit logs handler.

Reads go straight to the ledger; they never write audit records.
"""
from audit.application.queries.list_audit_logs import ListAuditLogsQuery
from audit.domain.audit_entry import AuditLogEntry
from audit.ports.audit_log_repository import AuditLogFilter, AuditLogRepository
from core.domain.exceptions import InvalidInputError
from core.domain.value_objects import AccessLevel, Page, PageRequest
from products.domain.services import ProductAuthorizer


class ListAuditLogsHandler:
    """Handler for ListAuditLogsQuery."""

    def __init__(self, audit_log_repository: AuditLogRepository, authorizer: ProductAuthorizer):
        """Initialize handler with repositories."""
        self.audit_log_repository = audit_log_repository
        self.authorizer = authorizer

    def handle(self, query: ListAuditLogsQuery) -> Page[AuditLogEntry]:
        """
        Handle list audit logs query.

        The super-admin sees the whole ledger. Other actors see entries of
        the products they manage; asking for another product is denied.

        Raises:
            InvalidInputError: If start_time is after end_time
            PermissionDeniedError: If product_id is given and not readable
        """
        if query.start_time and query.end_time and query.start_time > query.end_time:
            raise InvalidInputError("start_time must not be after end_time")

        scope = None
        if query.product_id:
            self.authorizer.authorize(query.actor, query.product_id, AccessLevel.READ)
        else:
            scope = self.authorizer.readable_product_ids(query.actor)

        filters = AuditLogFilter(
            start_time=query.start_time,
            end_time=query.end_time,
            module=query.module or None,
            action=query.action or None,
            operator_id=query.operator_id or None,
            product_id=query.product_id or None,
            product_scope=scope,
        )
        total, entries = self.audit_log_repository.query(
            filters, PageRequest(query.page, query.page_size)
        )
        return Page(items=entries, total=total, page=query.page, page_size=query.page_size)
