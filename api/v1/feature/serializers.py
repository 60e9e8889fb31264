"""
Serializers for feature API endpoints.
"""

from rest_framework import serializers

from api.v1.common import PageSerializer


class AddFeatureRequestSerializer(serializers.Serializer):
    """Serializer for add feature request."""

    product_id = serializers.IntegerField(min_value=1)
    feature_name = serializers.CharField(max_length=128)
    feature_code = serializers.CharField(max_length=64)


class ModifyFeatureRequestSerializer(serializers.Serializer):
    feature_name = serializers.CharField(max_length=128)


class FeatureSerializer(serializers.Serializer):
    """Serializer for FeatureDTO."""

    id = serializers.IntegerField()
    product_id = serializers.IntegerField()
    feature_name = serializers.CharField()
    feature_code = serializers.CharField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class FeaturePageSerializer(PageSerializer):
    items = FeatureSerializer(many=True)
