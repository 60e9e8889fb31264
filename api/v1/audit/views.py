"""
Audit log API views.
"""

from typing import Any, Dict

from drf_spectacular.utils import extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.audit.serializers import (
    AuditLogPageSerializer,
    AuditLogQuerySerializer,
    AuditLogSerializer,
)
from api.v1.common import audit_log_repo, authorizer, get_actor, validated
from audit.application.handlers.list_audit_logs_handler import ListAuditLogsHandler
from audit.application.queries.list_audit_logs import ListAuditLogsQuery
from audit.domain.audit_entry import AuditLogEntry
from core.instrumentation import Status, StatusCode, get_tracer

tracer = get_tracer(__name__)


def _entry_payload(entry: AuditLogEntry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "operator_id": entry.operator_id,
        "module": entry.module.value,
        "action": entry.action.value,
        "product_id": entry.product_id,
        "details": entry.document,
        "ip_address": entry.ip_address,
        "created_at": entry.created_at,
    }


class AuditLogListView(APIView):
    """View for reading the audit ledger."""

    @extend_schema(
        operation_id="list_audit_logs",
        summary="List Audit Logs",
        description=(
            "Filtered ledger entries, newest first. The super-admin sees every "
            "entry; other callers see entries of the products they manage."
        ),
        tags=["Audit"],
        parameters=[AuditLogQuerySerializer],
        responses={200: AuditLogPageSerializer, 400: {"description": "Invalid time range"}},
    )
    def get(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_audit_logs") as span:
            actor = get_actor(request)
            params = validated(AuditLogQuerySerializer, request.query_params)
            span.set_attribute("actor.id", actor.user_id)

            handler = ListAuditLogsHandler(audit_log_repository=audit_log_repo, authorizer=authorizer)
            page = handler.handle(
                ListAuditLogsQuery(
                    actor=actor,
                    start_time=params.get("start_time"),
                    end_time=params.get("end_time"),
                    module=params.get("module"),
                    action=params.get("action"),
                    operator_id=params.get("operator_id"),
                    product_id=params.get("product_id"),
                    page=params["page"],
                    page_size=params["page_size"],
                )
            )

            span.set_attribute("audit.total", page.total)
            span.set_status(Status(StatusCode.OK))
            return Response(
                {
                    "items": AuditLogSerializer(
                        [_entry_payload(entry) for entry in page.items], many=True
                    ).data,
                    "total": page.total,
                    "page": page.page,
                    "page_size": page.page_size,
                }
            )
