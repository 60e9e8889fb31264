from audit.infrastructure.models import AuditLogEntry  # noqa: F401
