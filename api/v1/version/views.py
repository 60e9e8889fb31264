"""
Firmware and software version API views.
"""

from dataclasses import asdict

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.common import (
    ProductPageQuerySerializer,
    audit_ledger,
    authorizer,
    feature_repo,
    firmware_version_repo,
    get_actor,
    page_payload,
    product_repo,
    software_version_repo,
    validated,
)
from api.v1.version.serializers import (
    AddFirmwareVersionRequestSerializer,
    AddSoftwareVersionRequestSerializer,
    FirmwareVersionPageSerializer,
    FirmwareVersionSerializer,
    ModifyFirmwareVersionRequestSerializer,
    ModifySoftwareVersionRequestSerializer,
    SoftwareVersionPageSerializer,
    SoftwareVersionSerializer,
)
from core.instrumentation import Status, StatusCode, get_tracer
from versions.application.commands.version_commands import (
    AddFirmwareVersionCommand,
    AddSoftwareVersionCommand,
    DeleteFirmwareVersionCommand,
    DeleteSoftwareVersionCommand,
    ModifyFirmwareVersionCommand,
    ModifySoftwareVersionCommand,
)
from versions.application.handlers.firmware_version_handlers import (
    AddFirmwareVersionHandler,
    DeleteFirmwareVersionHandler,
    ListFirmwareVersionsHandler,
    ModifyFirmwareVersionHandler,
)
from versions.application.handlers.software_version_handlers import (
    AddSoftwareVersionHandler,
    DeleteSoftwareVersionHandler,
    ListSoftwareVersionsHandler,
    ModifySoftwareVersionHandler,
)
from versions.application.queries.list_versions import ListVersionsQuery

tracer = get_tracer(__name__)


def _firmware_repositories():
    return {
        "firmware_version_repository": firmware_version_repo,
        "audit_ledger": audit_ledger,
        "authorizer": authorizer,
    }


def _software_repositories():
    return {
        "software_version_repository": software_version_repo,
        "firmware_version_repository": firmware_version_repo,
        "feature_repository": feature_repo,
        "audit_ledger": audit_ledger,
        "authorizer": authorizer,
    }


class FirmwareVersionListView(APIView):
    """View for listing and creating firmware versions."""

    @extend_schema(
        operation_id="list_firmware_versions",
        summary="List Firmware Versions",
        description="Firmware versions of one product, newest release first.",
        tags=["Versions"],
        parameters=[ProductPageQuerySerializer],
        responses={200: FirmwareVersionPageSerializer},
    )
    def get(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_firmware_versions") as span:
            actor = get_actor(request)
            params = validated(ProductPageQuerySerializer, request.query_params)
            span.set_attribute("product.id", params["product_id"])

            handler = ListFirmwareVersionsHandler(
                firmware_version_repository=firmware_version_repo, authorizer=authorizer
            )
            page = handler.handle(
                ListVersionsQuery(actor, params["product_id"], params["page"], params["page_size"])
            )

            span.set_status(Status(StatusCode.OK))
            return Response(page_payload(page, FirmwareVersionSerializer))

    @extend_schema(
        operation_id="add_firmware_version",
        summary="Add Firmware Version",
        tags=["Versions"],
        request=AddFirmwareVersionRequestSerializer,
        responses={
            201: FirmwareVersionSerializer,
            404: {"description": "Product not found"},
            409: {"description": "Version already exists in the product"},
        },
    )
    def post(self, request: Request) -> Response:
        with tracer.start_as_current_span("add_firmware_version") as span:
            actor = get_actor(request)
            data = validated(AddFirmwareVersionRequestSerializer, request.data)
            span.set_attribute("product.id", data["product_id"])
            span.set_attribute("version", data["version"])

            handler = AddFirmwareVersionHandler(
                product_repository=product_repo, **_firmware_repositories()
            )
            result = handler.handle(
                AddFirmwareVersionCommand(
                    actor=actor,
                    product_id=data["product_id"],
                    version=data["version"],
                    release_date=data["release_date"],
                    remark=data["remark"],
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(
                FirmwareVersionSerializer(asdict(result)).data, status=status.HTTP_201_CREATED
            )


class FirmwareVersionDetailView(APIView):
    """View for modifying and deleting a firmware version."""

    @extend_schema(
        operation_id="modify_firmware_version",
        summary="Modify Firmware Version",
        description="Change the given fields. A request that changes nothing is not audited.",
        tags=["Versions"],
        request=ModifyFirmwareVersionRequestSerializer,
        responses={200: FirmwareVersionSerializer, 409: {"description": "Version already exists"}},
    )
    def patch(self, request: Request, firmware_version_id: int) -> Response:
        with tracer.start_as_current_span("modify_firmware_version") as span:
            actor = get_actor(request)
            data = validated(ModifyFirmwareVersionRequestSerializer, request.data)
            span.set_attribute("firmware_version.id", firmware_version_id)

            handler = ModifyFirmwareVersionHandler(**_firmware_repositories())
            result = handler.handle(
                ModifyFirmwareVersionCommand(
                    actor=actor,
                    firmware_version_id=firmware_version_id,
                    version=data.get("version"),
                    release_date=data.get("release_date"),
                    remark=data.get("remark"),
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(FirmwareVersionSerializer(asdict(result)).data)

    @extend_schema(
        operation_id="delete_firmware_version",
        summary="Delete Firmware Version",
        description="Delete a firmware version and its software compatibility links.",
        tags=["Versions"],
        responses={204: {"description": "Firmware version deleted"}},
    )
    def delete(self, request: Request, firmware_version_id: int) -> Response:
        with tracer.start_as_current_span("delete_firmware_version") as span:
            actor = get_actor(request)
            span.set_attribute("firmware_version.id", firmware_version_id)

            handler = DeleteFirmwareVersionHandler(**_firmware_repositories())
            handler.handle(DeleteFirmwareVersionCommand(actor, firmware_version_id))

            span.set_status(Status(StatusCode.OK))
            return Response(status=status.HTTP_204_NO_CONTENT)


class SoftwareVersionListView(APIView):
    """View for listing and creating software versions."""

    @extend_schema(
        operation_id="list_software_versions",
        summary="List Software Versions",
        description="Software versions of one product with their associations.",
        tags=["Versions"],
        parameters=[ProductPageQuerySerializer],
        responses={200: SoftwareVersionPageSerializer},
    )
    def get(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_software_versions") as span:
            actor = get_actor(request)
            params = validated(ProductPageQuerySerializer, request.query_params)
            span.set_attribute("product.id", params["product_id"])

            handler = ListSoftwareVersionsHandler(
                software_version_repository=software_version_repo, authorizer=authorizer
            )
            page = handler.handle(
                ListVersionsQuery(actor, params["product_id"], params["page"], params["page_size"])
            )

            span.set_status(Status(StatusCode.OK))
            return Response(page_payload(page, SoftwareVersionSerializer))

    @extend_schema(
        operation_id="add_software_version",
        summary="Add Software Version",
        description=(
            "Create a software version. Linked features and firmware versions "
            "must belong to the same product."
        ),
        tags=["Versions"],
        request=AddSoftwareVersionRequestSerializer,
        responses={
            201: SoftwareVersionSerializer,
            400: {"description": "Association of another product"},
            409: {"description": "Version already exists in the product"},
        },
    )
    def post(self, request: Request) -> Response:
        with tracer.start_as_current_span("add_software_version") as span:
            actor = get_actor(request)
            data = validated(AddSoftwareVersionRequestSerializer, request.data)
            span.set_attribute("product.id", data["product_id"])
            span.set_attribute("version", data["version"])

            handler = AddSoftwareVersionHandler(
                product_repository=product_repo, **_software_repositories()
            )
            result = handler.handle(
                AddSoftwareVersionCommand(
                    actor=actor,
                    product_id=data["product_id"],
                    version=data["version"],
                    release_date=data["release_date"],
                    update_log=data["update_log"],
                    remark=data["remark"],
                    feature_ids=data["feature_ids"],
                    firmware_version_ids=data["firmware_version_ids"],
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(
                SoftwareVersionSerializer(asdict(result)).data, status=status.HTTP_201_CREATED
            )


class SoftwareVersionDetailView(APIView):
    """View for modifying and deleting a software version."""

    @extend_schema(
        operation_id="modify_software_version",
        summary="Modify Software Version",
        description=(
            "Change the given fields. Association lists replace the stored sets. "
            "A request that changes nothing is not audited."
        ),
        tags=["Versions"],
        request=ModifySoftwareVersionRequestSerializer,
        responses={200: SoftwareVersionSerializer},
    )
    def patch(self, request: Request, software_version_id: int) -> Response:
        with tracer.start_as_current_span("modify_software_version") as span:
            actor = get_actor(request)
            data = validated(ModifySoftwareVersionRequestSerializer, request.data)
            span.set_attribute("software_version.id", software_version_id)

            handler = ModifySoftwareVersionHandler(**_software_repositories())
            result = handler.handle(
                ModifySoftwareVersionCommand(
                    actor=actor,
                    software_version_id=software_version_id,
                    version=data.get("version"),
                    release_date=data.get("release_date"),
                    update_log=data.get("update_log"),
                    remark=data.get("remark"),
                    feature_ids=data.get("feature_ids"),
                    firmware_version_ids=data.get("firmware_version_ids"),
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(SoftwareVersionSerializer(asdict(result)).data)

    @extend_schema(
        operation_id="delete_software_version",
        summary="Delete Software Version",
        tags=["Versions"],
        responses={204: {"description": "Software version deleted"}},
    )
    def delete(self, request: Request, software_version_id: int) -> Response:
        with tracer.start_as_current_span("delete_software_version") as span:
            actor = get_actor(request)
            span.set_attribute("software_version.id", software_version_id)

            handler = DeleteSoftwareVersionHandler(**_software_repositories())
            handler.handle(DeleteSoftwareVersionCommand(actor, software_version_id))

            span.set_status(Status(StatusCode.OK))
            return Response(status=status.HTTP_204_NO_CONTENT)
