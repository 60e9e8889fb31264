"""
Serializers for firmware and software version API endpoints.

``release_date`` accepts "YYYY-MM-DD HH:MM" as well as ISO 8601.
"""

from rest_framework import ISO_8601, serializers

from api.v1.common import PageSerializer

RELEASE_DATE_FORMATS = ["%Y-%m-%d %H:%M", ISO_8601]


def _release_date(**kwargs):
    return serializers.DateTimeField(input_formats=RELEASE_DATE_FORMATS, **kwargs)


def _id_list(**kwargs):
    return serializers.ListField(child=serializers.IntegerField(min_value=1), **kwargs)


class AddFirmwareVersionRequestSerializer(serializers.Serializer):
    """Serializer for add firmware version request."""

    product_id = serializers.IntegerField(min_value=1)
    version = serializers.CharField(max_length=64)
    release_date = _release_date()
    remark = serializers.CharField(required=False, allow_blank=True, default="")


class ModifyFirmwareVersionRequestSerializer(serializers.Serializer):
    """Omitted fields are left unchanged."""

    version = serializers.CharField(required=False, max_length=64)
    release_date = _release_date(required=False)
    remark = serializers.CharField(required=False, allow_blank=True)


class FirmwareVersionSerializer(serializers.Serializer):
    """Serializer for FirmwareVersionDTO."""

    id = serializers.IntegerField()
    product_id = serializers.IntegerField()
    version = serializers.CharField()
    release_date = serializers.DateTimeField()
    remark = serializers.CharField()
    created_by = serializers.IntegerField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class FirmwareVersionPageSerializer(PageSerializer):
    items = FirmwareVersionSerializer(many=True)


class AddSoftwareVersionRequestSerializer(serializers.Serializer):
    """Serializer for add software version request."""

    product_id = serializers.IntegerField(min_value=1)
    version = serializers.CharField(max_length=64)
    release_date = _release_date()
    update_log = serializers.CharField(required=False, allow_blank=True, default="")
    remark = serializers.CharField(required=False, allow_blank=True, default="")
    feature_ids = _id_list(required=False, default=list)
    firmware_version_ids = _id_list(required=False, default=list)


class ModifySoftwareVersionRequestSerializer(serializers.Serializer):
    """
    Omitted fields are left unchanged.

    A given association list replaces the stored one; ``[]`` clears it.
    """

    version = serializers.CharField(required=False, max_length=64)
    release_date = _release_date(required=False)
    update_log = serializers.CharField(required=False, allow_blank=True)
    remark = serializers.CharField(required=False, allow_blank=True)
    feature_ids = _id_list(required=False, allow_empty=True)
    firmware_version_ids = _id_list(required=False, allow_empty=True)


class SoftwareVersionSerializer(serializers.Serializer):
    """Serializer for SoftwareVersionDTO."""

    id = serializers.IntegerField()
    product_id = serializers.IntegerField()
    version = serializers.CharField()
    release_date = serializers.DateTimeField()
    update_log = serializers.CharField()
    remark = serializers.CharField()
    created_by = serializers.IntegerField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()
    feature_ids = serializers.ListField(child=serializers.IntegerField())
    firmware_version_ids = serializers.ListField(child=serializers.IntegerField())


class SoftwareVersionPageSerializer(PageSerializer):
    items = SoftwareVersionSerializer(many=True)
