"""
Product API views.

These endpoints are used by product managers to:
- Create and list products
- Rename products and transfer the main manager role
- Add and remove assistant managers
- Delete products without dependents
"""

from dataclasses import asdict

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.common import (
    PageQuerySerializer,
    audit_ledger,
    authorizer,
    get_actor,
    page_payload,
    product_manager_repo,
    product_repo,
    user_directory,
    validated,
)
from api.v1.product.serializers import (
    AddManagerRequestSerializer,
    AddProductRequestSerializer,
    ManagerSerializer,
    ModifyProductRequestSerializer,
    ProductPageSerializer,
    ProductSerializer,
)
from core.domain.value_objects import ManagerPermission
from core.instrumentation import Status, StatusCode, get_tracer
from products.application.commands.manager_commands import (
    AddManagerCommand,
    RemoveManagerCommand,
)
from products.application.commands.product_commands import (
    AddProductCommand,
    DeleteProductCommand,
    ManagerUpdate,
    ModifyProductCommand,
)
from products.application.handlers.list_products_handler import ListProductsHandler
from products.application.handlers.manager_handlers import AddManagerHandler, RemoveManagerHandler
from products.application.handlers.product_handlers import (
    AddProductHandler,
    DeleteProductHandler,
    ModifyProductHandler,
)
from products.application.queries.list_products import ListProductsQuery

tracer = get_tracer(__name__)


def _permission(value):
    return ManagerPermission(value) if value else None


class ProductListView(APIView):
    """View for listing and creating products."""

    @extend_schema(
        operation_id="list_products",
        summary="List Products",
        description=(
            "List the products the caller manages, with their managers. "
            "The super-admin sees every product."
        ),
        tags=["Products"],
        parameters=[PageQuerySerializer],
        responses={200: ProductPageSerializer, 401: {"description": "Unauthenticated"}},
    )
    def get(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_products") as span:
            actor = get_actor(request)
            params = validated(PageQuerySerializer, request.query_params)
            span.set_attribute("actor.id", actor.user_id)

            handler = ListProductsHandler(
                product_repository=product_repo,
                product_manager_repository=product_manager_repo,
                authorizer=authorizer,
            )
            page = handler.handle(ListProductsQuery(actor, params["page"], params["page_size"]))

            span.set_attribute("products.total", page.total)
            span.set_status(Status(StatusCode.OK))
            return Response(page_payload(page, ProductSerializer))

    @extend_schema(
        operation_id="add_product",
        summary="Add Product",
        description=(
            "Create a product. The caller becomes its main manager in the same "
            "transaction that writes the audit record."
        ),
        tags=["Products"],
        request=AddProductRequestSerializer,
        responses={
            201: ProductSerializer,
            400: {"description": "Bad Request"},
            409: {"description": "Product code or name already exists"},
        },
    )
    def post(self, request: Request) -> Response:
        with tracer.start_as_current_span("add_product") as span:
            actor = get_actor(request)
            data = validated(AddProductRequestSerializer, request.data)
            span.set_attribute("actor.id", actor.user_id)
            span.set_attribute("product.code", data["code"])

            handler = AddProductHandler(
                product_repository=product_repo,
                product_manager_repository=product_manager_repo,
                audit_ledger=audit_ledger,
            )
            result = handler.handle(
                AddProductCommand(actor, data["code"], data["name"], data["product_type"])
            )

            span.set_attribute("product.id", result.id)
            span.set_status(Status(StatusCode.OK))
            return Response(ProductSerializer(asdict(result)).data, status=status.HTTP_201_CREATED)


class ProductDetailView(APIView):
    """View for modifying and deleting one product."""

    @extend_schema(
        operation_id="modify_product",
        summary="Modify Product",
        description=(
            "Rename or retype a product, transfer the main manager role, and "
            "update assistant permissions. Requires the main manager."
        ),
        tags=["Products"],
        request=ModifyProductRequestSerializer,
        responses={
            200: ProductSerializer,
            403: {"description": "Caller is not the main manager"},
            404: {"description": "Product or manager not found"},
            409: {"description": "Product name already exists"},
        },
    )
    def patch(self, request: Request, product_id: int) -> Response:
        with tracer.start_as_current_span("modify_product") as span:
            actor = get_actor(request)
            data = validated(ModifyProductRequestSerializer, request.data)
            span.set_attribute("actor.id", actor.user_id)
            span.set_attribute("product.id", product_id)

            handler = ModifyProductHandler(
                product_repository=product_repo,
                product_manager_repository=product_manager_repo,
                audit_ledger=audit_ledger,
                authorizer=authorizer,
            )
            command = ModifyProductCommand(
                actor=actor,
                product_id=product_id,
                name=data.get("name"),
                product_type=data.get("product_type"),
                main_user_id=data.get("main_user_id"),
                managers=[
                    ManagerUpdate(
                        user_id=item["user_id"],
                        permission=_permission(item.get("permission")),
                        remark=item.get("remark"),
                    )
                    for item in data["managers"]
                ],
            )
            result = handler.handle(command)

            span.set_status(Status(StatusCode.OK))
            return Response(ProductSerializer(asdict(result)).data)

    @extend_schema(
        operation_id="delete_product",
        summary="Delete Product",
        description=(
            "Delete a product. Refused while license types, features or "
            "versions still reference it."
        ),
        tags=["Products"],
        responses={
            204: {"description": "Product deleted"},
            403: {"description": "Caller is not the main manager"},
            404: {"description": "Product not found"},
            409: {"description": "Product still has dependents"},
        },
    )
    def delete(self, request: Request, product_id: int) -> Response:
        with tracer.start_as_current_span("delete_product") as span:
            actor = get_actor(request)
            span.set_attribute("actor.id", actor.user_id)
            span.set_attribute("product.id", product_id)

            handler = DeleteProductHandler(
                product_repository=product_repo,
                product_manager_repository=product_manager_repo,
                audit_ledger=audit_ledger,
                authorizer=authorizer,
            )
            handler.handle(DeleteProductCommand(actor, product_id))

            span.set_status(Status(StatusCode.OK))
            return Response(status=status.HTTP_204_NO_CONTENT)


class ProductManagerListView(APIView):
    """View for adding assistant managers."""

    @extend_schema(
        operation_id="add_product_manager",
        summary="Add Manager",
        description="Add an assistant manager, looked up by email. Requires the main manager.",
        tags=["Products"],
        request=AddManagerRequestSerializer,
        responses={
            201: ManagerSerializer,
            404: {"description": "Product or user not found"},
            409: {"description": "User already manages this product"},
        },
    )
    def post(self, request: Request, product_id: int) -> Response:
        with tracer.start_as_current_span("add_product_manager") as span:
            actor = get_actor(request)
            data = validated(AddManagerRequestSerializer, request.data)
            span.set_attribute("actor.id", actor.user_id)
            span.set_attribute("product.id", product_id)

            handler = AddManagerHandler(
                product_repository=product_repo,
                product_manager_repository=product_manager_repo,
                user_directory=user_directory,
                audit_ledger=audit_ledger,
                authorizer=authorizer,
            )
            result = handler.handle(
                AddManagerCommand(
                    actor=actor,
                    product_id=product_id,
                    email=data["email"],
                    permission=_permission(data.get("permission")),
                    remark=data["remark"],
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(ManagerSerializer(asdict(result)).data, status=status.HTTP_201_CREATED)


class ProductManagerDetailView(APIView):
    """View for removing one assistant manager."""

    @extend_schema(
        operation_id="remove_product_manager",
        summary="Remove Manager",
        description="Remove an assistant manager. The main manager cannot be removed.",
        tags=["Products"],
        parameters=[
            OpenApiParameter(name="user_id", type=int, location=OpenApiParameter.PATH),
        ],
        responses={
            204: {"description": "Manager removed"},
            400: {"description": "Target is the main manager"},
            404: {"description": "Manager not found"},
        },
    )
    def delete(self, request: Request, product_id: int, user_id: int) -> Response:
        with tracer.start_as_current_span("remove_product_manager") as span:
            actor = get_actor(request)
            span.set_attribute("actor.id", actor.user_id)
            span.set_attribute("product.id", product_id)
            span.set_attribute("manager.user_id", user_id)

            handler = RemoveManagerHandler(
                product_manager_repository=product_manager_repo,
                audit_ledger=audit_ledger,
                authorizer=authorizer,
            )
            handler.handle(RemoveManagerCommand(actor, product_id, user_id))

            span.set_status(Status(StatusCode.OK))
            return Response(status=status.HTTP_204_NO_CONTENT)
