"""
Django implementation of ProductManagerRepository port.
"""
from typing import List, Optional

from django.db.models import Case, IntegerField, Value, When

from core.domain.value_objects import ManagerPermission, ManagerRole
from products.domain.product_manager import ProductManager
from products.infrastructure.models import ProductManager as ProductManagerModel
from products.ports.product_manager_repository import ProductManagerRepository


class DjangoProductManagerRepository(ProductManagerRepository):
    """Django ORM implementation of ProductManagerRepository."""

    def _to_domain(self, model: ProductManagerModel) -> ProductManager:
        return ProductManager(
            id=model.id,
            product_id=model.product_id,
            user_id=model.user_id,
            role=ManagerRole(model.role),
            permission=ManagerPermission(model.permission),
            remark=model.remark,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def find(self, product_id: int, user_id: int) -> Optional[ProductManager]:
        model = ProductManagerModel.objects.filter(product_id=product_id, user_id=user_id).first()
        return self._to_domain(model) if model else None

    def list_for_product(self, product_id: int, for_update: bool = False) -> List[ProductManager]:
        queryset = ProductManagerModel.objects.filter(product_id=product_id)
        if for_update:
            queryset = queryset.select_for_update()
        queryset = queryset.annotate(
            main_first=Case(
                When(role=ManagerRole.MAIN.value, then=Value(0)),
                default=Value(1),
                output_field=IntegerField(),
            )
        ).order_by("main_first", "id")
        return [self._to_domain(model) for model in queryset]

    def product_ids_for_user(self, user_id: int) -> List[int]:
        return list(
            ProductManagerModel.objects.filter(user_id=user_id).values_list("product_id", flat=True)
        )

    def save(self, manager: ProductManager) -> ProductManager:
        if manager.id is None:
            model = ProductManagerModel.objects.create(
                product_id=manager.product_id,
                user_id=manager.user_id,
                role=manager.role.value,
                permission=manager.permission.value,
                remark=manager.remark,
                created_at=manager.created_at,
                updated_at=manager.updated_at,
            )
            return self._to_domain(model)

        ProductManagerModel.objects.filter(id=manager.id).update(
            role=manager.role.value,
            permission=manager.permission.value,
            remark=manager.remark,
            updated_at=manager.updated_at,
        )
        return manager

    def delete(self, manager_id: int) -> None:
        ProductManagerModel.objects.filter(id=manager_id).delete()

    def delete_for_product(self, product_id: int) -> int:
        deleted, _ = ProductManagerModel.objects.filter(product_id=product_id).delete()
        return deleted
