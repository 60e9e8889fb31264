"""
Device query handlers.
"""
from typing import List

from core.domain.exceptions import DeviceNotFoundError
from core.domain.value_objects import AccessLevel, Page, PageRequest
from devices.application.dto.device_dto import DeviceDTO, DeviceProductSummaryDTO
from devices.application.queries.device_queries import (
    GetDeviceBySNQuery,
    ListDeviceProductsQuery,
    ListDevicesQuery,
)
from devices.domain.device import Device
from devices.ports.device_repository import DeviceFilter, DeviceRepository
from licenses.ports.license_type_repository import LicenseTypeRepository
from products.domain.services import ProductAuthorizer
from products.ports.product_repository import ProductRepository


class _DeviceQueryHandler:
    def __init__(
        self,
        device_repository: DeviceRepository,
        product_repository: ProductRepository,
        license_type_repository: LicenseTypeRepository,
        authorizer: ProductAuthorizer,
    ):
        """Initialize handler with repositories."""
        self.device_repository = device_repository
        self.product_repository = product_repository
        self.license_type_repository = license_type_repository
        self.authorizer = authorizer

    def _to_dtos(self, devices: List[Device]) -> List[DeviceDTO]:
        product_names = self.product_repository.names_by_id(
            {device.product_id for device in devices}
        )
        license_types = self.license_type_repository.find_many(
            {device.license_type_id for device in devices}
        )
        return [
            DeviceDTO.from_domain(
                device,
                product_names.get(device.product_id, ""),
                license_types.get(device.license_type_id),
            )
            for device in devices
        ]


class ListDevicesHandler(_DeviceQueryHandler):
    """Handler for ListDevicesQuery."""

    def handle(self, query: ListDevicesQuery) -> Page[DeviceDTO]:
        """
        List devices.

        With ``product_id`` the actor needs Read on that product; without it
        the listing covers every product the actor may read.
        """
        if query.product_id:
            self.authorizer.authorize(query.actor, query.product_id, AccessLevel.READ)
            scope = None
        else:
            scope = self.authorizer.readable_product_ids(query.actor)

        filters = DeviceFilter(
            product_id=query.product_id,
            license_type_id=query.license_type_id,
            sn=(query.sn or "").strip(),
            oem_tag=(query.oem_tag or "").strip(),
            product_scope=scope,
        )
        total, devices = self.device_repository.list(
            filters, PageRequest(query.page, query.page_size)
        )
        return Page(
            items=self._to_dtos(devices),
            total=total,
            page=query.page,
            page_size=query.page_size,
        )


class GetDeviceBySNHandler(_DeviceQueryHandler):
    """Handler for GetDeviceBySNQuery."""

    def handle(self, query: GetDeviceBySNQuery) -> DeviceDTO:
        device = self.device_repository.find_by_sn((query.sn or "").strip())
        if not device:
            raise DeviceNotFoundError()
        self.authorizer.authorize(query.actor, device.product_id, AccessLevel.READ)
        return self._to_dtos([device])[0]


class ListDeviceProductsHandler:
    """Handler for ListDeviceProductsQuery."""

    def __init__(
        self,
        product_repository: ProductRepository,
        device_repository: DeviceRepository,
        authorizer: ProductAuthorizer,
    ):
        """Initialize handler with repositories."""
        self.product_repository = product_repository
        self.device_repository = device_repository
        self.authorizer = authorizer

    def handle(self, query: ListDeviceProductsQuery) -> Page[DeviceProductSummaryDTO]:
        scope = self.authorizer.readable_product_ids(query.actor)
        total, products = self.product_repository.list(
            scope, PageRequest(query.page, query.page_size)
        )
        counts = self.device_repository.count_by_product(product.id for product in products)
        items = [
            DeviceProductSummaryDTO(
                product_id=product.id,
                product_name=product.name,
                count=counts.get(product.id, 0),
            )
            for product in products
        ]
        return Page(items=items, total=total, page=query.page, page_size=query.page_size)
