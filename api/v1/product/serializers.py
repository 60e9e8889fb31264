"""
Serializers for product API endpoints.
"""

from rest_framework import serializers

from api.v1.common import PageSerializer
from core.domain.value_objects import ManagerPermission

PERMISSION_CHOICES = [permission.value for permission in ManagerPermission]


class AddProductRequestSerializer(serializers.Serializer):
    """Serializer for add product request."""

    code = serializers.CharField(required=True, max_length=64)
    name = serializers.CharField(required=True, max_length=128)
    product_type = serializers.CharField(required=False, allow_blank=True, max_length=64, default="")


class ManagerUpdateSerializer(serializers.Serializer):
    user_id = serializers.IntegerField(min_value=1)
    permission = serializers.ChoiceField(choices=PERMISSION_CHOICES, required=False)
    remark = serializers.CharField(required=False, allow_blank=True, max_length=255)


class ModifyProductRequestSerializer(serializers.Serializer):
    """
    Serializer for modify product request.

    ``main_user_id`` transfers the main role to an existing manager.
    """

    name = serializers.CharField(required=False, max_length=128)
    product_type = serializers.CharField(required=False, allow_blank=True, max_length=64)
    main_user_id = serializers.IntegerField(required=False, min_value=1)
    managers = ManagerUpdateSerializer(many=True, required=False, default=list)


class AddManagerRequestSerializer(serializers.Serializer):
    email = serializers.EmailField(required=True)
    permission = serializers.ChoiceField(choices=PERMISSION_CHOICES, required=False)
    remark = serializers.CharField(required=False, allow_blank=True, max_length=255, default="")


class ManagerSerializer(serializers.Serializer):
    """Serializer for ManagerDTO."""

    user_id = serializers.IntegerField()
    role = serializers.CharField()
    permission = serializers.CharField()
    remark = serializers.CharField()


class ProductSerializer(serializers.Serializer):
    """Serializer for ProductDTO."""

    id = serializers.IntegerField()
    code = serializers.CharField()
    name = serializers.CharField()
    product_type = serializers.CharField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()
    managers = ManagerSerializer(many=True)


class ProductPageSerializer(PageSerializer):
    items = ProductSerializer(many=True)
