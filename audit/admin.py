"""
Django admin configuration for audit app.
"""
from django.contrib import admin

from audit.infrastructure.models import AuditLogEntry


@admin.register(AuditLogEntry)
class AuditLogEntryAdmin(admin.ModelAdmin):
    """Read-only admin for the append-only ledger."""

    list_display = ["created_at", "operator_id", "module", "action", "product_id", "ip_address"]
    list_filter = ["module", "action", "created_at"]
    search_fields = ["operator_id", "product_id", "details"]
    readonly_fields = [field.name for field in AuditLogEntry._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
