"""
Serializers for audit log API endpoints.
"""

from rest_framework import serializers

from api.v1.common import PageQuerySerializer, PageSerializer
from core.domain.value_objects import AuditAction, AuditModule


class AuditLogQuerySerializer(PageQuerySerializer):
    """Audit log filters; times are inclusive bounds on ``created_at``."""

    start_time = serializers.DateTimeField(required=False)
    end_time = serializers.DateTimeField(required=False)
    module = serializers.ChoiceField(choices=[module.value for module in AuditModule], required=False)
    action = serializers.ChoiceField(choices=[action.value for action in AuditAction], required=False)
    operator_id = serializers.IntegerField(required=False, min_value=1)
    product_id = serializers.IntegerField(required=False, min_value=1)


class AuditLogSerializer(serializers.Serializer):
    """Serializer for AuditLogEntry; ``details`` is the parsed JSON document."""

    id = serializers.IntegerField()
    operator_id = serializers.IntegerField()
    module = serializers.CharField()
    action = serializers.CharField()
    product_id = serializers.IntegerField(allow_null=True)
    details = serializers.JSONField()
    ip_address = serializers.CharField()
    created_at = serializers.DateTimeField()


class AuditLogPageSerializer(PageSerializer):
    items = AuditLogSerializer(many=True)
