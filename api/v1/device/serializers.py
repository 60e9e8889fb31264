"""
Serializers for device API endpoints.
"""

from rest_framework import serializers

from api.v1.common import PageQuerySerializer, PageSerializer


class AddDeviceRequestSerializer(serializers.Serializer):
    """Serializer for add device request."""

    product_id = serializers.IntegerField(min_value=1)
    sn = serializers.CharField(max_length=128)
    license_type_id = serializers.IntegerField(min_value=1)
    oem_tag = serializers.CharField(required=False, allow_blank=True, max_length=64, default="")
    remark = serializers.CharField(required=False, allow_blank=True, max_length=255, default="")


class BatchAddDevicesRequestSerializer(serializers.Serializer):
    """
    Serializer for batch add request.

    Blank and repeated serial numbers are dropped before registration.
    """

    product_id = serializers.IntegerField(min_value=1)
    license_type_id = serializers.IntegerField(min_value=1)
    sns = serializers.ListField(child=serializers.CharField(max_length=128, allow_blank=True))
    oem_tag = serializers.CharField(required=False, allow_blank=True, max_length=64, default="")
    remark = serializers.CharField(required=False, allow_blank=True, max_length=255, default="")


class UpdateDeviceRequestSerializer(serializers.Serializer):
    license_type_id = serializers.IntegerField(min_value=1)
    oem_tag = serializers.CharField(required=False, allow_blank=True, max_length=64, default="")
    remark = serializers.CharField(required=False, allow_blank=True, max_length=255, default="")


class BatchUpdateLicenseTypeRequestSerializer(serializers.Serializer):
    """Omitting ``remark`` keeps each device's remark."""

    device_ids = serializers.ListField(child=serializers.IntegerField(min_value=1))
    license_type_id = serializers.IntegerField(min_value=1)
    remark = serializers.CharField(required=False, allow_blank=True, max_length=255)


class DeviceQuerySerializer(PageQuerySerializer):
    """Device list filters."""

    product_id = serializers.IntegerField(required=False, min_value=1)
    license_type_id = serializers.IntegerField(required=False, min_value=1)
    sn = serializers.CharField(required=False, allow_blank=True, default="")
    oem_tag = serializers.CharField(required=False, allow_blank=True, default="")


class DeviceSerializer(serializers.Serializer):
    """Serializer for DeviceDTO."""

    id = serializers.IntegerField()
    sn = serializers.CharField()
    product_id = serializers.IntegerField()
    product_name = serializers.CharField()
    license_type_id = serializers.IntegerField()
    license_type_name = serializers.CharField()
    license_code = serializers.CharField()
    oem_tag = serializers.CharField()
    remark = serializers.CharField()
    created_by = serializers.IntegerField()
    created_at = serializers.DateTimeField()
    updated_by = serializers.IntegerField()
    updated_at = serializers.DateTimeField()


class DevicePageSerializer(PageSerializer):
    items = DeviceSerializer(many=True)


class DeviceProductSummarySerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    product_name = serializers.CharField()
    count = serializers.IntegerField()


class DeviceProductSummaryPageSerializer(PageSerializer):
    items = DeviceProductSummarySerializer(many=True)


class BatchResultSerializer(serializers.Serializer):
    count = serializers.IntegerField()
