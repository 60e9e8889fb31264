"""
Firmware version handlers.
"""
from audit.application.services.audit_ledger import AuditLedger
from audit.domain import details
from core.domain.exceptions import (
    FirmwareVersionExistsError,
    FirmwareVersionNotFoundError,
    InvalidInputError,
    ProductNotFoundError,
)
from core.domain.value_objects import AccessLevel, AuditAction, AuditModule, Page, PageRequest
from core.infrastructure.database import atomic_operation
from products.domain.services import ProductAuthorizer
from products.ports.product_repository import ProductRepository
from versions.application.commands.version_commands import (
    AddFirmwareVersionCommand,
    DeleteFirmwareVersionCommand,
    ModifyFirmwareVersionCommand,
)
from versions.application.dto.version_dto import FirmwareVersionDTO
from versions.application.queries.list_versions import ListVersionsQuery
from versions.domain.version import FirmwareVersion
from versions.ports.version_repository import FirmwareVersionRepository


class _FirmwareVersionHandler:
    """Shared wiring of the firmware version handlers."""

    def __init__(
        self,
        firmware_version_repository: FirmwareVersionRepository,
        audit_ledger: AuditLedger,
        authorizer: ProductAuthorizer,
    ):
        """Initialize handler with repositories."""
        self.firmware_version_repository = firmware_version_repository
        self.audit_ledger = audit_ledger
        self.authorizer = authorizer

    def _load(self, firmware_version_id: int) -> FirmwareVersion:
        firmware = self.firmware_version_repository.find_by_id(firmware_version_id)
        if not firmware:
            raise FirmwareVersionNotFoundError()
        return firmware


class AddFirmwareVersionHandler(_FirmwareVersionHandler):
    """Handler for AddFirmwareVersionCommand."""

    def __init__(self, product_repository: ProductRepository, **kwargs):
        """Initialize handler with repositories."""
        super().__init__(**kwargs)
        self.product_repository = product_repository

    def handle(self, command: AddFirmwareVersionCommand) -> FirmwareVersionDTO:
        """
        Handle add firmware version command.

        Raises:
            FirmwareVersionExistsError: If the version string is taken in the product
        """
        actor = command.actor
        self.authorizer.authorize(actor, command.product_id, AccessLevel.MUTATE)
        if not self.product_repository.find_by_id(command.product_id):
            raise ProductNotFoundError()

        try:
            firmware = FirmwareVersion.create(
                command.product_id,
                command.version,
                command.release_date,
                command.remark,
                created_by=actor.user_id,
            )
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc

        if self.firmware_version_repository.version_exists(firmware.product_id, firmware.version):
            raise FirmwareVersionExistsError()

        with atomic_operation(
            "add_firmware_version", actor_id=actor.user_id, product_id=firmware.product_id
        ):
            firmware = self.firmware_version_repository.save(firmware)
            self.audit_ledger.record(
                actor,
                AuditModule.FIRMWARE_VERSION,
                AuditAction.CREATE,
                product_id=firmware.product_id,
                details=details.created("firmware_version", firmware),
            )
        return FirmwareVersionDTO.from_domain(firmware)


class ModifyFirmwareVersionHandler(_FirmwareVersionHandler):
    """Handler for ModifyFirmwareVersionCommand."""

    def handle(self, command: ModifyFirmwareVersionCommand) -> FirmwareVersionDTO:
        """Modify a firmware version; an unchanged request writes nothing."""
        actor = command.actor
        old = self._load(command.firmware_version_id)
        self.authorizer.authorize(actor, old.product_id, AccessLevel.MUTATE)

        try:
            new = old.with_changes(command.version, command.release_date, command.remark)
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc
        if new is old:
            return FirmwareVersionDTO.from_domain(old)

        if new.version != old.version and self.firmware_version_repository.version_exists(
            old.product_id, new.version, exclude_id=old.id
        ):
            raise FirmwareVersionExistsError()

        with atomic_operation("modify_firmware_version", actor_id=actor.user_id, id=old.id):
            new = self.firmware_version_repository.save(new)
            self.audit_ledger.record(
                actor,
                AuditModule.FIRMWARE_VERSION,
                AuditAction.UPDATE,
                product_id=old.product_id,
                details=details.updated("firmware_version", old, new),
            )
        return FirmwareVersionDTO.from_domain(new)


class DeleteFirmwareVersionHandler(_FirmwareVersionHandler):
    """Handler for DeleteFirmwareVersionCommand."""

    def handle(self, command: DeleteFirmwareVersionCommand) -> None:
        actor = command.actor
        firmware = self._load(command.firmware_version_id)
        self.authorizer.authorize(actor, firmware.product_id, AccessLevel.MUTATE)

        with atomic_operation("delete_firmware_version", actor_id=actor.user_id, id=firmware.id):
            self.firmware_version_repository.delete(firmware.id)
            self.audit_ledger.record(
                actor,
                AuditModule.FIRMWARE_VERSION,
                AuditAction.DELETE,
                product_id=firmware.product_id,
                details=details.deleted("firmware_version", firmware),
            )


class ListFirmwareVersionsHandler:
    """Handler for ListVersionsQuery over firmware."""

    def __init__(
        self, firmware_version_repository: FirmwareVersionRepository, authorizer: ProductAuthorizer
    ):
        """Initialize handler with repositories."""
        self.firmware_version_repository = firmware_version_repository
        self.authorizer = authorizer

    def handle(self, query: ListVersionsQuery) -> Page[FirmwareVersionDTO]:
        self.authorizer.authorize(query.actor, query.product_id, AccessLevel.READ)
        total, versions = self.firmware_version_repository.list_for_product(
            query.product_id, PageRequest(query.page, query.page_size)
        )
        return Page(
            items=[FirmwareVersionDTO.from_domain(version) for version in versions],
            total=total,
            page=query.page,
            page_size=query.page_size,
        )
