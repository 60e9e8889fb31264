"""
Helpers shared by the v1 views.

Repositories and services are module-level singletons (in production,
use a DI container); views build handlers from them per request.
"""

from dataclasses import asdict
from typing import Any, Dict

from django.conf import settings
from rest_framework import serializers
from rest_framework.request import Request

from api.exceptions import ActorRequired
from audit.application.services.audit_ledger import AuditLedger
from audit.infrastructure.repositories.django_audit_log_repository import DjangoAuditLogRepository
from core.domain.value_objects import Actor, Page
from devices.infrastructure.repositories.django_device_repository import DjangoDeviceRepository
from licenses.infrastructure.repositories.django_feature_repository import DjangoFeatureRepository
from licenses.infrastructure.repositories.django_license_type_repository import (
    DjangoLicenseTypeRepository,
)
from products.domain.services import ProductAuthorizer
from products.infrastructure.repositories.django_product_manager_repository import (
    DjangoProductManagerRepository,
)
from products.infrastructure.repositories.django_product_repository import DjangoProductRepository
from products.infrastructure.repositories.django_user_directory import DjangoUserDirectory
from versions.infrastructure.repositories.django_version_repository import (
    DjangoFirmwareVersionRepository,
    DjangoSoftwareVersionRepository,
)

product_repo = DjangoProductRepository()
product_manager_repo = DjangoProductManagerRepository()
user_directory = DjangoUserDirectory()
license_type_repo = DjangoLicenseTypeRepository()
feature_repo = DjangoFeatureRepository()
firmware_version_repo = DjangoFirmwareVersionRepository()
software_version_repo = DjangoSoftwareVersionRepository()
device_repo = DjangoDeviceRepository()
audit_log_repo = DjangoAuditLogRepository()

audit_ledger = AuditLedger(audit_log_repo)
authorizer = ProductAuthorizer(product_manager_repo)


def get_actor(request: Request) -> Actor:
    """
    The acting user of a request, as resolved by ActorMiddleware.

    Raises:
        ActorRequired: If the request is unauthenticated (rendered as 401)
    """
    actor_id = getattr(request, "actor_id", 0)
    if not actor_id:
        raise ActorRequired()
    return Actor(user_id=actor_id, ip_address=getattr(request, "client_ip", ""))


def validated(serializer_class, data) -> Dict[str, Any]:
    """
    Validate request data.

    Raises:
        ValidationError: Rendered as INVALID_PARAMETER by the exception handler
    """
    serializer = serializer_class(data=data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


def page_payload(page: Page, item_serializer_class) -> Dict[str, Any]:
    return {
        "items": item_serializer_class([asdict(item) for item in page.items], many=True).data,
        "total": page.total,
        "page": page.page,
        "page_size": page.page_size,
    }


class PageQuerySerializer(serializers.Serializer):
    """Pagination query parameters."""

    page = serializers.IntegerField(required=False, min_value=1, default=1)
    page_size = serializers.IntegerField(
        required=False, min_value=1, max_value=settings.MAX_PAGE_SIZE, default=settings.DEFAULT_PAGE_SIZE
    )


class ProductPageQuerySerializer(PageQuerySerializer):
    product_id = serializers.IntegerField(required=True, min_value=1)


class PageSerializer(serializers.Serializer):
    """Envelope of every paginated response."""

    total = serializers.IntegerField()
    page = serializers.IntegerField()
    page_size = serializers.IntegerField()
