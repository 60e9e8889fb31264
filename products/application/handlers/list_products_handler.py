"""
List products handler.
"""
from core.domain.value_objects import Page, PageRequest
from products.application.dto.product_dto import ProductDTO
from products.application.queries.list_products import ListProductsQuery
from products.domain.services import ProductAuthorizer
from products.ports.product_manager_repository import ProductManagerRepository
from products.ports.product_repository import ProductRepository


class ListProductsHandler:
    """Handler for ListProductsQuery."""

    def __init__(
        self,
        product_repository: ProductRepository,
        product_manager_repository: ProductManagerRepository,
        authorizer: ProductAuthorizer,
    ):
        """Initialize handler with repositories."""
        self.product_repository = product_repository
        self.product_manager_repository = product_manager_repository
        self.authorizer = authorizer

    def handle(self, query: ListProductsQuery) -> Page[ProductDTO]:
        scope = self.authorizer.readable_product_ids(query.actor)
        page_request = PageRequest(query.page, query.page_size)
        total, products = self.product_repository.list(scope, page_request)
        items = [
            ProductDTO.from_domain(
                product, self.product_manager_repository.list_for_product(product.id)
            )
            for product in products
        ]
        return Page(items=items, total=total, page=query.page, page_size=query.page_size)
