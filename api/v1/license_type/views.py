"""
License type API views.
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
    get_actor,
    license_type_repo,
    page_payload,
    product_repo,
    validated,
)
from api.v1.license_type.serializers import (
    AddLicenseTypeRequestSerializer,
    LicenseTypePageSerializer,
    LicenseTypeSerializer,
    ModifyLicenseTypeRequestSerializer,
    UpdateLicenseTypeFeaturesRequestSerializer,
)
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.license_type_commands import (
    AddLicenseTypeCommand,
    DeleteLicenseTypeCommand,
    ModifyLicenseTypeCommand,
    UpdateLicenseTypeFeaturesCommand,
)
from licenses.application.handlers.license_type_handlers import (
    AddLicenseTypeHandler,
    DeleteLicenseTypeHandler,
    ListLicenseTypesHandler,
    ModifyLicenseTypeHandler,
    UpdateLicenseTypeFeaturesHandler,
)
from licenses.application.queries.list_license_types import ListLicenseTypesQuery

tracer = get_tracer(__name__)


def _repositories():
    return {
        "license_type_repository": license_type_repo,
        "feature_repository": feature_repo,
        "audit_ledger": audit_ledger,
        "authorizer": authorizer,
    }


class LicenseTypeListView(APIView):
    """View for listing and creating license types of a product."""

    @extend_schema(
        operation_id="list_license_types",
        summary="List License Types",
        description="License types of one product, each with its feature set.",
        tags=["License Types"],
        parameters=[ProductPageQuerySerializer],
        responses={200: LicenseTypePageSerializer, 403: {"description": "Forbidden"}},
    )
    def get(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_license_types") as span:
            actor = get_actor(request)
            params = validated(ProductPageQuerySerializer, request.query_params)
            span.set_attribute("product.id", params["product_id"])

            handler = ListLicenseTypesHandler(**_repositories())
            page = handler.handle(
                ListLicenseTypesQuery(
                    actor, params["product_id"], params["page"], params["page_size"]
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(page_payload(page, LicenseTypeSerializer))

    @extend_schema(
        operation_id="add_license_type",
        summary="Add License Type",
        description=(
            "Create a license type. Bundled features must belong to the same product."
        ),
        tags=["License Types"],
        request=AddLicenseTypeRequestSerializer,
        responses={
            201: LicenseTypeSerializer,
            400: {"description": "Feature of another product"},
            404: {"description": "Product or feature not found"},
            409: {"description": "Type name or license code already exists"},
        },
    )
    def post(self, request: Request) -> Response:
        with tracer.start_as_current_span("add_license_type") as span:
            actor = get_actor(request)
            data = validated(AddLicenseTypeRequestSerializer, request.data)
            span.set_attribute("actor.id", actor.user_id)
            span.set_attribute("product.id", data["product_id"])

            handler = AddLicenseTypeHandler(product_repository=product_repo, **_repositories())
            result = handler.handle(
                AddLicenseTypeCommand(
                    actor=actor,
                    product_id=data["product_id"],
                    type_name=data["type_name"],
                    license_code=data["license_code"],
                    feature_ids=data["feature_ids"],
                )
            )

            span.set_attribute("license_type.id", result.id)
            span.set_status(Status(StatusCode.OK))
            return Response(
                LicenseTypeSerializer(asdict(result)).data, status=status.HTTP_201_CREATED
            )


class LicenseTypeDetailView(APIView):
    """View for renaming and deleting a license type."""

    @extend_schema(
        operation_id="modify_license_type",
        summary="Modify License Type",
        description="Rename a license type. The license code cannot change.",
        tags=["License Types"],
        request=ModifyLicenseTypeRequestSerializer,
        responses={200: LicenseTypeSerializer, 409: {"description": "Type name already exists"}},
    )
    def patch(self, request: Request, license_type_id: int) -> Response:
        with tracer.start_as_current_span("modify_license_type") as span:
            actor = get_actor(request)
            data = validated(ModifyLicenseTypeRequestSerializer, request.data)
            span.set_attribute("license_type.id", license_type_id)

            handler = ModifyLicenseTypeHandler(**_repositories())
            result = handler.handle(
                ModifyLicenseTypeCommand(actor, license_type_id, data["type_name"])
            )

            span.set_status(Status(StatusCode.OK))
            return Response(LicenseTypeSerializer(asdict(result)).data)

    @extend_schema(
        operation_id="delete_license_type",
        summary="Delete License Type",
        description="Delete a license type no device is assigned to.",
        tags=["License Types"],
        responses={
            204: {"description": "License type deleted"},
            409: {"description": "Devices still use the license type"},
        },
    )
    def delete(self, request: Request, license_type_id: int) -> Response:
        with tracer.start_as_current_span("delete_license_type") as span:
            actor = get_actor(request)
            span.set_attribute("license_type.id", license_type_id)

            handler = DeleteLicenseTypeHandler(**_repositories())
            handler.handle(DeleteLicenseTypeCommand(actor, license_type_id))

            span.set_status(Status(StatusCode.OK))
            return Response(status=status.HTTP_204_NO_CONTENT)


class LicenseTypeFeaturesView(APIView):
    """View for replacing the feature set of a license type."""

    @extend_schema(
        operation_id="update_license_type_features",
        summary="Update License Type Features",
        description="Replace the complete feature set. The previous set is discarded.",
        tags=["License Types"],
        request=UpdateLicenseTypeFeaturesRequestSerializer,
        responses={200: LicenseTypeSerializer, 400: {"description": "Feature of another product"}},
    )
    def put(self, request: Request, license_type_id: int) -> Response:
        with tracer.start_as_current_span("update_license_type_features") as span:
            actor = get_actor(request)
            data = validated(UpdateLicenseTypeFeaturesRequestSerializer, request.data)
            span.set_attribute("license_type.id", license_type_id)
            span.set_attribute("features.count", len(data["feature_ids"]))

            handler = UpdateLicenseTypeFeaturesHandler(**_repositories())
            result = handler.handle(
                UpdateLicenseTypeFeaturesCommand(actor, license_type_id, data["feature_ids"])
            )

            span.set_status(Status(StatusCode.OK))
            return Response(LicenseTypeSerializer(asdict(result)).data)
