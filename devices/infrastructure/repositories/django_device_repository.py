"""
Django implementation of DeviceRepository port.

This adapter converts between domain entities and Django ORM models.
"""
from typing import Dict, Iterable, List, Optional, Tuple

from django.db.models import Count

from core.domain.value_objects import PageRequest
from core.infrastructure.database import paginate
from devices.domain.device import Device
from devices.infrastructure.models import Device as DeviceModel
from devices.ports.device_repository import DeviceFilter, DeviceRepository


class DjangoDeviceRepository(DeviceRepository):
    """Django ORM implementation of DeviceRepository."""

    def _to_domain(self, model: DeviceModel) -> Device:
        return Device(
            id=model.id,
            sn=model.sn,
            product_id=model.product_id,
            license_type_id=model.license_type_id,
            oem_tag=model.oem_tag,
            remark=model.remark,
            created_by=model.created_by,
            created_at=model.created_at,
            updated_by=model.updated_by,
            updated_at=model.updated_at,
        )

    def save(self, device: Device) -> Device:
        if device.id is None:
            model = DeviceModel.objects.create(
                sn=device.sn,
                product_id=device.product_id,
                license_type_id=device.license_type_id,
                oem_tag=device.oem_tag,
                remark=device.remark,
                created_by=device.created_by,
                created_at=device.created_at,
                updated_by=device.updated_by,
                updated_at=device.updated_at,
            )
            return self._to_domain(model)

        DeviceModel.objects.filter(id=device.id).update(
            license_type_id=device.license_type_id,
            oem_tag=device.oem_tag,
            remark=device.remark,
            updated_by=device.updated_by,
            updated_at=device.updated_at,
        )
        return device

    def find_by_id(self, device_id: int) -> Optional[Device]:
        try:
            return self._to_domain(DeviceModel.objects.get(id=device_id))
        except DeviceModel.DoesNotExist:
            return None

    def find_many(self, device_ids: Iterable[int]) -> List[Device]:
        models = DeviceModel.objects.filter(id__in=list(device_ids)).order_by("id")
        return [self._to_domain(model) for model in models]

    def find_by_sn(self, sn: str) -> Optional[Device]:
        try:
            return self._to_domain(DeviceModel.objects.get(sn=sn))
        except DeviceModel.DoesNotExist:
            return None

    def existing_sns(self, sns: Iterable[str]) -> List[str]:
        return list(
            DeviceModel.objects.filter(sn__in=list(sns)).order_by("sn").values_list("sn", flat=True)
        )

    def delete(self, device_id: int) -> None:
        DeviceModel.objects.filter(id=device_id).delete()

    def list(
        self, filters: DeviceFilter, page_request: PageRequest
    ) -> Tuple[int, List[Device]]:
        queryset = DeviceModel.objects.all()
        if filters.product_id:
            queryset = queryset.filter(product_id=filters.product_id)
        if filters.license_type_id:
            queryset = queryset.filter(license_type_id=filters.license_type_id)
        if filters.sn:
            queryset = queryset.filter(sn__icontains=filters.sn)
        if filters.oem_tag:
            queryset = queryset.filter(oem_tag__icontains=filters.oem_tag)
        if filters.product_scope is not None:
            queryset = queryset.filter(product_id__in=list(filters.product_scope))

        total, models = paginate(queryset.order_by("-created_at", "-id"), page_request)
        return total, [self._to_domain(model) for model in models]

    def count_by_product(self, product_ids: Iterable[int]) -> Dict[int, int]:
        product_ids = list(product_ids)
        counts = dict.fromkeys(product_ids, 0)
        rows = (
            DeviceModel.objects.filter(product_id__in=product_ids)
            .values("product_id")
            .annotate(count=Count("id"))
            .order_by()
        )
        for row in rows:
            counts[row["product_id"]] = row["count"]
        return counts
