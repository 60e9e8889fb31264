"""
Product feature API views.
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
    page_payload,
    product_repo,
    validated,
)
from api.v1.feature.serializers import (
    AddFeatureRequestSerializer,
    FeaturePageSerializer,
    FeatureSerializer,
    ModifyFeatureRequestSerializer,
)
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.feature_commands import (
    AddFeatureCommand,
    DeleteFeatureCommand,
    ModifyFeatureCommand,
)
from licenses.application.handlers.feature_handlers import (
    AddFeatureHandler,
    DeleteFeatureHandler,
    ListFeaturesHandler,
    ModifyFeatureHandler,
)
from licenses.application.queries.list_license_types import ListFeaturesQuery

tracer = get_tracer(__name__)


class FeatureListView(APIView):
    """View for listing and creating features of a product."""

    @extend_schema(
        operation_id="list_features",
        summary="List Features",
        tags=["Features"],
        parameters=[ProductPageQuerySerializer],
        responses={200: FeaturePageSerializer},
    )
    def get(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_features") as span:
            actor = get_actor(request)
            params = validated(ProductPageQuerySerializer, request.query_params)
            span.set_attribute("product.id", params["product_id"])

            handler = ListFeaturesHandler(feature_repository=feature_repo, authorizer=authorizer)
            page = handler.handle(
                ListFeaturesQuery(actor, params["product_id"], params["page"], params["page_size"])
            )

            span.set_status(Status(StatusCode.OK))
            return Response(page_payload(page, FeatureSerializer))

    @extend_schema(
        operation_id="add_feature",
        summary="Add Feature",
        description="Create a feature. Name and code are unique within the product.",
        tags=["Features"],
        request=AddFeatureRequestSerializer,
        responses={
            201: FeatureSerializer,
            404: {"description": "Product not found"},
            409: {"description": "Feature name or code already exists"},
        },
    )
    def post(self, request: Request) -> Response:
        with tracer.start_as_current_span("add_feature") as span:
            actor = get_actor(request)
            data = validated(AddFeatureRequestSerializer, request.data)
            span.set_attribute("product.id", data["product_id"])

            handler = AddFeatureHandler(
                product_repository=product_repo,
                feature_repository=feature_repo,
                audit_ledger=audit_ledger,
                authorizer=authorizer,
            )
            result = handler.handle(
                AddFeatureCommand(
                    actor, data["product_id"], data["feature_name"], data["feature_code"]
                )
            )

            span.set_attribute("feature.id", result.id)
            span.set_status(Status(StatusCode.OK))
            return Response(FeatureSerializer(asdict(result)).data, status=status.HTTP_201_CREATED)


class FeatureDetailView(APIView):
    """View for renaming and deleting a feature."""

    @extend_schema(
        operation_id="modify_feature",
        summary="Modify Feature",
        description="Rename a feature. The feature code cannot change.",
        tags=["Features"],
        request=ModifyFeatureRequestSerializer,
        responses={200: FeatureSerializer, 409: {"description": "Feature name already exists"}},
    )
    def patch(self, request: Request, feature_id: int) -> Response:
        with tracer.start_as_current_span("modify_feature") as span:
            actor = get_actor(request)
            data = validated(ModifyFeatureRequestSerializer, request.data)
            span.set_attribute("feature.id", feature_id)

            handler = ModifyFeatureHandler(
                feature_repository=feature_repo, audit_ledger=audit_ledger, authorizer=authorizer
            )
            result = handler.handle(ModifyFeatureCommand(actor, feature_id, data["feature_name"]))

            span.set_status(Status(StatusCode.OK))
            return Response(FeatureSerializer(asdict(result)).data)

    @extend_schema(
        operation_id="delete_feature",
        summary="Delete Feature",
        description="Delete a feature, detaching it from license types and software versions.",
        tags=["Features"],
        responses={204: {"description": "Feature deleted"}, 404: {"description": "Not found"}},
    )
    def delete(self, request: Request, feature_id: int) -> Response:
        with tracer.start_as_current_span("delete_feature") as span:
            actor = get_actor(request)
            span.set_attribute("feature.id", feature_id)

            handler = DeleteFeatureHandler(
                feature_repository=feature_repo, audit_ledger=audit_ledger, authorizer=authorizer
            )
            handler.handle(DeleteFeatureCommand(actor, feature_id))

            span.set_status(Status(StatusCode.OK))
            return Response(status=status.HTTP_204_NO_CONTENT)
