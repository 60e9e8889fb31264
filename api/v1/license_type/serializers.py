"""
Serializers for license type API endpoints.
"""

from rest_framework import serializers

from api.v1.common import PageSerializer
from api.v1.feature.serializers import FeatureSerializer


class AddLicenseTypeRequestSerializer(serializers.Serializer):
    """Serializer for add license type request."""

    product_id = serializers.IntegerField(min_value=1)
    type_name = serializers.CharField(max_length=128)
    license_code = serializers.CharField(max_length=64)
    feature_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1), required=False, default=list
    )


class ModifyLicenseTypeRequestSerializer(serializers.Serializer):
    type_name = serializers.CharField(max_length=128)


class UpdateLicenseTypeFeaturesRequestSerializer(serializers.Serializer):
    """The complete feature set; an empty list clears it."""

    feature_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=True)


class LicenseTypeSerializer(serializers.Serializer):
    """Serializer for LicenseTypeDTO."""

    id = serializers.IntegerField()
    product_id = serializers.IntegerField()
    type_name = serializers.CharField()
    license_code = serializers.CharField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()
    features = FeatureSerializer(many=True)


class LicenseTypePageSerializer(PageSerializer):
    items = LicenseTypeSerializer(many=True)
