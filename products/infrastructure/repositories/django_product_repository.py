"""
Django implementation of ProductRepository port.

This adapter converts between domain entities and Django ORM models.
"""
from typing import Dict, Iterable, List, Optional, Tuple

from core.domain.value_objects import PageRequest
from core.infrastructure.database import paginate
from products.domain.product import Product
from products.infrastructure.models import Product as ProductModel
from products.ports.product_repository import ProductRepository

# Reverse relations that block product deletion
BLOCKING_RELATIONS = ("license_types", "features", "software_versions", "firmware_versions")


class DjangoProductRepository(ProductRepository):
    """Django ORM implementation of ProductRepository."""

    def _to_domain(self, model: ProductModel) -> Product:
        return Product(
            id=model.id,
            code=model.code,
            name=model.name,
            product_type=model.product_type,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def save(self, product: Product) -> Product:
        if product.id is None:
            model = ProductModel.objects.create(
                code=product.code,
                name=product.name,
                product_type=product.product_type,
                created_at=product.created_at,
                updated_at=product.updated_at,
            )
            return self._to_domain(model)

        ProductModel.objects.filter(id=product.id).update(
            name=product.name,
            product_type=product.product_type,
            updated_at=product.updated_at,
        )
        return product

    def find_by_id(self, product_id: int) -> Optional[Product]:
        try:
            return self._to_domain(ProductModel.objects.get(id=product_id))
        except ProductModel.DoesNotExist:
            return None

    def code_exists(self, code: str) -> bool:
        return ProductModel.objects.filter(code=code).exists()

    def name_exists(self, name: str, exclude_id: Optional[int] = None) -> bool:
        queryset = ProductModel.objects.filter(name=name)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    def dependents(self, product_id: int) -> Dict[str, int]:
        model = ProductModel.objects.get(id=product_id)
        counts = {}
        for relation in BLOCKING_RELATIONS:
            count = getattr(model, relation).count()
            if count:
                counts[relation] = count
        return counts

    def delete(self, product_id: int) -> None:
        ProductModel.objects.filter(id=product_id).delete()

    def list(
        self, product_ids: Optional[Iterable[int]], page_request: PageRequest
    ) -> Tuple[int, List[Product]]:
        queryset = ProductModel.objects.all()
        if product_ids is not None:
            queryset = queryset.filter(id__in=list(product_ids))
        total, models = paginate(queryset.order_by("-created_at", "-id"), page_request)
        return total, [self._to_domain(model) for model in models]

    def names_by_id(self, product_ids: Iterable[int]) -> Dict[int, str]:
        return dict(
            ProductModel.objects.filter(id__in=list(product_ids)).values_list("id", "name")
        )
