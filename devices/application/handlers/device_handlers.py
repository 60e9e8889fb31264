"""
Device mutation handlers.

Every handler authorizes first, validates the referenced product and
license type, and only then opens the transaction that writes the device
rows together with their audit records.
"""
import logging
from collections import defaultdict
from typing import Dict, List, Tuple

from audit.application.services.audit_ledger import AuditLedger
from audit.domain import details
from core.domain.exceptions import (
    DeviceNotFoundError,
    DeviceSNExistsError,
    InvalidInputError,
    LicenseTypeNotFoundError,
    ProductNotFoundError,
)
from core.domain.value_objects import AccessLevel, AuditAction, AuditModule
from core.infrastructure.database import atomic_operation
from devices.application.commands.device_commands import (
    AddDeviceCommand,
    BatchAddDevicesCommand,
    BatchUpdateLicenseTypeCommand,
    DeleteDeviceCommand,
    UpdateDeviceCommand,
)
from devices.application.dto.device_dto import BatchResultDTO, DeviceDTO
from devices.domain.device import Device
from devices.domain.services import normalize_serial_numbers
from devices.ports.device_repository import DeviceRepository
from licenses.domain.license_type import LicenseType
from licenses.ports.license_type_repository import LicenseTypeRepository
from products.domain.product import Product
from products.domain.services import ProductAuthorizer
from products.ports.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class _DeviceHandler:
    """Shared wiring of the device handlers."""

    def __init__(
        self,
        device_repository: DeviceRepository,
        license_type_repository: LicenseTypeRepository,
        audit_ledger: AuditLedger,
        authorizer: ProductAuthorizer,
    ):
        """Initialize handler with repositories."""
        self.device_repository = device_repository
        self.license_type_repository = license_type_repository
        self.audit_ledger = audit_ledger
        self.authorizer = authorizer

    def _load(self, device_id: int) -> Device:
        device = self.device_repository.find_by_id(device_id)
        if not device:
            raise DeviceNotFoundError()
        return device

    def _license_type_of_product(self, license_type_id: int, product_id: int) -> LicenseType:
        """The license type, which must exist within ``product_id``."""
        license_type = self.license_type_repository.find_by_id(license_type_id)
        if not license_type or license_type.product_id != product_id:
            raise LicenseTypeNotFoundError()
        return license_type


class _RegisterDevicesHandler(_DeviceHandler):
    def __init__(self, product_repository: ProductRepository, **kwargs):
        """Initialize handler with repositories."""
        super().__init__(**kwargs)
        self.product_repository = product_repository

    def _check_target(self, command) -> Tuple[Product, LicenseType]:
        self.authorizer.authorize(command.actor, command.product_id, AccessLevel.MUTATE)
        product = self.product_repository.find_by_id(command.product_id)
        if not product:
            raise ProductNotFoundError()
        return product, self._license_type_of_product(command.license_type_id, command.product_id)


class AddDeviceHandler(_RegisterDevicesHandler):
    """Handler for AddDeviceCommand."""

    def handle(self, command: AddDeviceCommand) -> DeviceDTO:
        """
        Handle add device command.

        Raises:
            PermissionDeniedError: If the actor may not mutate the product
            ProductNotFoundError: If the product does not exist
            LicenseTypeNotFoundError: If the license type is not in the product
            DeviceSNExistsError: If the serial number exists on any product
        """
        actor = command.actor
        product, license_type = self._check_target(command)

        try:
            device = Device.create(
                command.sn,
                command.product_id,
                command.license_type_id,
                created_by=actor.user_id,
                oem_tag=command.oem_tag,
                remark=command.remark,
            )
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc

        if self.device_repository.existing_sns([device.sn]):
            raise DeviceSNExistsError()

        with atomic_operation("add_device", actor_id=actor.user_id, product_id=device.product_id):
            device = self.device_repository.save(device)
            self.audit_ledger.record(
                actor,
                AuditModule.DEVICE,
                AuditAction.CREATE,
                product_id=device.product_id,
                details=details.created("device", device),
            )

        return DeviceDTO.from_domain(device, product.name, license_type)


class BatchAddDevicesHandler(_RegisterDevicesHandler):
    """Handler for BatchAddDevicesCommand."""

    def handle(self, command: BatchAddDevicesCommand) -> BatchResultDTO:
        """
        Handle batch add devices command.

        Serial numbers are trimmed; blanks and repeats within the request
        are dropped. If any remaining serial number is already registered
        nothing is written.

        Raises:
            InvalidInputError: If no usable serial number remains
            DeviceSNExistsError: If any serial number is already registered
        """
        actor = command.actor
        self._check_target(command)

        sns = normalize_serial_numbers(command.sns)
        if not sns:
            raise InvalidInputError("No serial numbers given")

        try:
            devices = [
                Device.create(
                    sn,
                    command.product_id,
                    command.license_type_id,
                    created_by=actor.user_id,
                    oem_tag=command.oem_tag,
                    remark=command.remark,
                )
                for sn in sns
            ]
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc

        existing = self.device_repository.existing_sns(sns)
        if existing:
            logger.info(
                "Batch rejected, serial numbers already registered",
                extra={"actor_id": actor.user_id, "product_id": command.product_id, "sns": existing},
            )
            raise DeviceSNExistsError()

        with atomic_operation(
            "batch_add_devices",
            actor_id=actor.user_id,
            product_id=command.product_id,
            count=len(devices),
        ):
            saved = [self.device_repository.save(device) for device in devices]
            self.audit_ledger.record(
                actor,
                AuditModule.DEVICE,
                AuditAction.BATCH_CREATE,
                product_id=command.product_id,
                details=details.batch_created("devices", saved),
            )

        return BatchResultDTO(count=len(saved))


class UpdateDeviceHandler(_DeviceHandler):
    """Handler for UpdateDeviceCommand."""

    def handle(self, command: UpdateDeviceCommand) -> DeviceDTO:
        actor = command.actor
        old = self._load(command.device_id)
        self.authorizer.authorize(actor, old.product_id, AccessLevel.MUTATE)
        license_type = self._license_type_of_product(command.license_type_id, old.product_id)

        try:
            new = old.update(license_type.id, command.oem_tag, command.remark, actor.user_id)
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc

        with atomic_operation("update_device", actor_id=actor.user_id, device_id=old.id):
            new = self.device_repository.save(new)
            self.audit_ledger.record(
                actor,
                AuditModule.DEVICE,
                AuditAction.UPDATE,
                product_id=old.product_id,
                details=details.updated("device", old, new),
            )

        return DeviceDTO.from_domain(new, license_type=license_type)


class DeleteDeviceHandler(_DeviceHandler):
    """Handler for DeleteDeviceCommand; only the main manager may delete."""

    def handle(self, command: DeleteDeviceCommand) -> None:
        actor = command.actor
        device = self._load(command.device_id)
        self.authorizer.authorize(actor, device.product_id, AccessLevel.ADMINISTER)

        with atomic_operation("delete_device", actor_id=actor.user_id, device_id=device.id):
            self.device_repository.delete(device.id)
            self.audit_ledger.record(
                actor,
                AuditModule.DEVICE,
                AuditAction.DELETE,
                product_id=device.product_id,
                details=details.deleted("device", device),
            )


class BatchUpdateLicenseTypeHandler(_DeviceHandler):
    """Handler for BatchUpdateLicenseTypeCommand."""

    def handle(self, command: BatchUpdateLicenseTypeCommand) -> BatchResultDTO:
        """
        Handle batch license type reassignment.

        Devices are grouped by product. The actor must be allowed to mutate
        every product touched and the license type must belong to each of
        them; only then are the devices updated, one audit record each, in
        a single transaction.

        Raises:
            InvalidInputError: If no device ids are given
            DeviceNotFoundError: If any id is unknown
            PermissionDeniedError: If any touched product is not mutable
            LicenseTypeNotFoundError: If the license type is missing from a product
        """
        actor = command.actor
        device_ids = list(dict.fromkeys(command.device_ids))
        if not device_ids:
            raise InvalidInputError("No devices given")

        devices = self.device_repository.find_many(device_ids)
        if len(devices) != len(device_ids):
            raise DeviceNotFoundError()

        by_product: Dict[int, List[Device]] = defaultdict(list)
        for device in devices:
            by_product[device.product_id].append(device)

        for product_id in sorted(by_product):
            self.authorizer.authorize(actor, product_id, AccessLevel.MUTATE)
            self._license_type_of_product(command.license_type_id, product_id)

        try:
            moved = [
                (old, old.reassign_license(command.license_type_id, actor.user_id, command.remark))
                for old in devices
            ]
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc

        with atomic_operation(
            "batch_update_license_type",
            actor_id=actor.user_id,
            license_type_id=command.license_type_id,
            count=len(devices),
        ):
            for old, new in moved:
                new = self.device_repository.save(new)
                self.audit_ledger.record(
                    actor,
                    AuditModule.DEVICE,
                    AuditAction.BATCH_UPDATE_LICENSE,
                    product_id=old.product_id,
                    details=details.updated("device", old, new),
                )

        return BatchResultDTO(count=len(devices))
