"""
Device API views.

These endpoints are used by product managers to:
- Register devices one at a time or in all-or-nothing batches
- Reassign license types, including across products
- Download the signed, encrypted activation file of a device
"""

import logging
from dataclasses import asdict

from django.core.exceptions import ImproperlyConfigured
from django.http import HttpResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.common import (
    PageQuerySerializer,
    audit_ledger,
    authorizer,
    device_repo,
    get_actor,
    license_type_repo,
    page_payload,
    product_repo,
    validated,
)
from api.v1.device.serializers import (
    AddDeviceRequestSerializer,
    BatchAddDevicesRequestSerializer,
    BatchResultSerializer,
    BatchUpdateLicenseTypeRequestSerializer,
    DevicePageSerializer,
    DeviceProductSummaryPageSerializer,
    DeviceProductSummarySerializer,
    DeviceQuerySerializer,
    DeviceSerializer,
    UpdateDeviceRequestSerializer,
)
from core.domain.exceptions import CryptoFailureError
from core.instrumentation import Status, StatusCode, get_tracer
from devices.application.commands.device_commands import (
    AddDeviceCommand,
    BatchAddDevicesCommand,
    BatchUpdateLicenseTypeCommand,
    DeleteDeviceCommand,
    UpdateDeviceCommand,
)
from devices.application.handlers.device_handlers import (
    AddDeviceHandler,
    BatchAddDevicesHandler,
    BatchUpdateLicenseTypeHandler,
    DeleteDeviceHandler,
    UpdateDeviceHandler,
)
from devices.application.handlers.device_query_handlers import (
    GetDeviceBySNHandler,
    ListDeviceProductsHandler,
    ListDevicesHandler,
)
from devices.application.handlers.issue_artifact_handler import IssueActivationArtifactHandler
from devices.application.queries.device_queries import (
    GetDeviceBySNQuery,
    IssueActivationArtifactQuery,
    ListDeviceProductsQuery,
    ListDevicesQuery,
)
from devices.application.services.artifact_pipeline import ArtifactPipeline
from devices.infrastructure.crypto import get_artifact_keys

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


def _mutation_repositories():
    return {
        "device_repository": device_repo,
        "license_type_repository": license_type_repo,
        "audit_ledger": audit_ledger,
        "authorizer": authorizer,
    }


def _query_repositories():
    return {
        "device_repository": device_repo,
        "product_repository": product_repo,
        "license_type_repository": license_type_repo,
        "authorizer": authorizer,
    }


def _artifact_pipeline() -> ArtifactPipeline:
    try:
        keys = get_artifact_keys()
    except ImproperlyConfigured as exc:
        logger.error("Activation key material unavailable: %s", exc)
        raise CryptoFailureError() from exc
    return ArtifactPipeline(keys)


class DeviceListView(APIView):
    """View for listing and registering devices."""

    @extend_schema(
        operation_id="list_devices",
        summary="List Devices",
        description=(
            "Devices of the products the caller may read, newest first. "
            "sn and oem_tag filter by substring."
        ),
        tags=["Devices"],
        parameters=[DeviceQuerySerializer],
        responses={200: DevicePageSerializer},
    )
    def get(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_devices") as span:
            actor = get_actor(request)
            params = validated(DeviceQuerySerializer, request.query_params)
            span.set_attribute("actor.id", actor.user_id)

            handler = ListDevicesHandler(**_query_repositories())
            page = handler.handle(
                ListDevicesQuery(
                    actor=actor,
                    product_id=params.get("product_id"),
                    license_type_id=params.get("license_type_id"),
                    sn=params["sn"],
                    oem_tag=params["oem_tag"],
                    page=params["page"],
                    page_size=params["page_size"],
                )
            )

            span.set_attribute("devices.total", page.total)
            span.set_status(Status(StatusCode.OK))
            return Response(page_payload(page, DeviceSerializer))

    @extend_schema(
        operation_id="add_device",
        summary="Add Device",
        description="Register one device. Serial numbers are unique across all products.",
        tags=["Devices"],
        request=AddDeviceRequestSerializer,
        responses={
            201: DeviceSerializer,
            404: {"description": "Product or license type not found"},
            409: {"description": "Serial number already registered"},
        },
    )
    def post(self, request: Request) -> Response:
        with tracer.start_as_current_span("add_device") as span:
            actor = get_actor(request)
            data = validated(AddDeviceRequestSerializer, request.data)
            span.set_attribute("product.id", data["product_id"])
            span.set_attribute("device.sn", data["sn"])

            handler = AddDeviceHandler(product_repository=product_repo, **_mutation_repositories())
            result = handler.handle(
                AddDeviceCommand(
                    actor=actor,
                    product_id=data["product_id"],
                    sn=data["sn"],
                    license_type_id=data["license_type_id"],
                    oem_tag=data["oem_tag"],
                    remark=data["remark"],
                )
            )

            span.set_attribute("device.id", result.id)
            span.set_status(Status(StatusCode.OK))
            return Response(DeviceSerializer(asdict(result)).data, status=status.HTTP_201_CREATED)


class DeviceBatchView(APIView):
    """View for registering devices in one all-or-nothing batch."""

    @extend_schema(
        operation_id="batch_add_devices",
        summary="Batch Add Devices",
        description=(
            "Register several serial numbers under one license type. If any "
            "serial number already exists nothing is registered."
        ),
        tags=["Devices"],
        request=BatchAddDevicesRequestSerializer,
        responses={
            201: BatchResultSerializer,
            400: {"description": "No serial numbers given"},
            409: {"description": "A serial number already exists"},
        },
    )
    def post(self, request: Request) -> Response:
        with tracer.start_as_current_span("batch_add_devices") as span:
            actor = get_actor(request)
            data = validated(BatchAddDevicesRequestSerializer, request.data)
            span.set_attribute("product.id", data["product_id"])
            span.set_attribute("batch.requested", len(data["sns"]))

            handler = BatchAddDevicesHandler(
                product_repository=product_repo, **_mutation_repositories()
            )
            result = handler.handle(
                BatchAddDevicesCommand(
                    actor=actor,
                    product_id=data["product_id"],
                    license_type_id=data["license_type_id"],
                    sns=data["sns"],
                    oem_tag=data["oem_tag"],
                    remark=data["remark"],
                )
            )

            span.set_attribute("batch.count", result.count)
            span.set_status(Status(StatusCode.OK))
            return Response(BatchResultSerializer(asdict(result)).data, status=status.HTTP_201_CREATED)


class DeviceBatchLicenseView(APIView):
    """View for moving many devices to one license type."""

    @extend_schema(
        operation_id="batch_update_license_type",
        summary="Batch Update License Type",
        description=(
            "Move devices to one license type. Devices may span several "
            "products; the license type must exist in each of them."
        ),
        tags=["Devices"],
        request=BatchUpdateLicenseTypeRequestSerializer,
        responses={
            200: BatchResultSerializer,
            403: {"description": "A touched product is not mutable by the caller"},
            404: {"description": "Device or license type not found"},
        },
    )
    def post(self, request: Request) -> Response:
        with tracer.start_as_current_span("batch_update_license_type") as span:
            actor = get_actor(request)
            data = validated(BatchUpdateLicenseTypeRequestSerializer, request.data)
            span.set_attribute("license_type.id", data["license_type_id"])
            span.set_attribute("batch.requested", len(data["device_ids"]))

            handler = BatchUpdateLicenseTypeHandler(**_mutation_repositories())
            result = handler.handle(
                BatchUpdateLicenseTypeCommand(
                    actor=actor,
                    license_type_id=data["license_type_id"],
                    device_ids=data["device_ids"],
                    remark=data.get("remark"),
                )
            )

            span.set_attribute("batch.count", result.count)
            span.set_status(Status(StatusCode.OK))
            return Response(BatchResultSerializer(asdict(result)).data)


class DeviceDetailView(APIView):
    """View for updating and deleting one device."""

    @extend_schema(
        operation_id="update_device",
        summary="Update Device",
        tags=["Devices"],
        request=UpdateDeviceRequestSerializer,
        responses={200: DeviceSerializer, 404: {"description": "Device or license type not found"}},
    )
    def patch(self, request: Request, device_id: int) -> Response:
        with tracer.start_as_current_span("update_device") as span:
            actor = get_actor(request)
            data = validated(UpdateDeviceRequestSerializer, request.data)
            span.set_attribute("device.id", device_id)

            handler = UpdateDeviceHandler(**_mutation_repositories())
            result = handler.handle(
                UpdateDeviceCommand(
                    actor=actor,
                    device_id=device_id,
                    license_type_id=data["license_type_id"],
                    oem_tag=data["oem_tag"],
                    remark=data["remark"],
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(DeviceSerializer(asdict(result)).data)

    @extend_schema(
        operation_id="delete_device",
        summary="Delete Device",
        description="Delete a device. Requires the main manager.",
        tags=["Devices"],
        responses={204: {"description": "Device deleted"}, 403: {"description": "Forbidden"}},
    )
    def delete(self, request: Request, device_id: int) -> Response:
        with tracer.start_as_current_span("delete_device") as span:
            actor = get_actor(request)
            span.set_attribute("device.id", device_id)

            handler = DeleteDeviceHandler(**_mutation_repositories())
            handler.handle(DeleteDeviceCommand(actor, device_id))

            span.set_status(Status(StatusCode.OK))
            return Response(status=status.HTTP_204_NO_CONTENT)


class DeviceBySNView(APIView):
    """View for looking a device up by serial number."""

    @extend_schema(
        operation_id="get_device_by_sn",
        summary="Get Device by Serial Number",
        tags=["Devices"],
        responses={200: DeviceSerializer, 404: {"description": "Device not found"}},
    )
    def get(self, request: Request, sn: str) -> Response:
        with tracer.start_as_current_span("get_device_by_sn") as span:
            actor = get_actor(request)
            span.set_attribute("device.sn", sn)

            handler = GetDeviceBySNHandler(**_query_repositories())
            result = handler.handle(GetDeviceBySNQuery(actor, sn))

            span.set_status(Status(StatusCode.OK))
            return Response(DeviceSerializer(asdict(result)).data)


class DeviceProductListView(APIView):
    """View for per-product device counts."""

    @extend_schema(
        operation_id="list_device_products",
        summary="List Device Products",
        description="Readable products with the number of devices registered under each.",
        tags=["Devices"],
        parameters=[PageQuerySerializer],
        responses={200: DeviceProductSummaryPageSerializer},
    )
    def get(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_device_products") as span:
            actor = get_actor(request)
            params = validated(PageQuerySerializer, request.query_params)

            handler = ListDeviceProductsHandler(
                product_repository=product_repo, device_repository=device_repo, authorizer=authorizer
            )
            page = handler.handle(
                ListDeviceProductsQuery(actor, params["page"], params["page_size"])
            )

            span.set_attribute("products.total", page.total)
            span.set_status(Status(StatusCode.OK))
            return Response(page_payload(page, DeviceProductSummarySerializer))


class ActivationFileView(APIView):
    """View for downloading a device's activation file."""

    @extend_schema(
        operation_id="issue_activation_file",
        summary="Download Activation File",
        description=(
            "Build the activation file of a device from its current license "
            "type and features: signed with the server's RSA key and sealed "
            "with AES-GCM. Layout is nonce (12 bytes), ciphertext, tag (16 bytes)."
        ),
        tags=["Devices"],
        responses={
            200: OpenApiResponse(response=OpenApiTypes.BINARY, description="Activation file"),
            404: {"description": "Device not found"},
            500: {"description": "Activation file could not be built"},
        },
    )
    def get(self, request: Request, sn: str) -> HttpResponse:
        with tracer.start_as_current_span("issue_activation_file") as span:
            actor = get_actor(request)
            span.set_attribute("device.sn", sn)

            handler = IssueActivationArtifactHandler(
                device_repository=device_repo,
                license_type_repository=license_type_repo,
                authorizer=authorizer,
                pipeline=_artifact_pipeline(),
            )
            artifact = handler.handle(IssueActivationArtifactQuery(actor, sn))

            span.set_attribute("artifact.size", len(artifact.content))
            span.set_status(Status(StatusCode.OK))
            response = HttpResponse(artifact.content, content_type=artifact.content_type)
            response["Content-Disposition"] = f'attachment; filename="{artifact.filename}"'
            return response
