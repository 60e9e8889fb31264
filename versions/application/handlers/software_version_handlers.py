"""
Software version handlers.

Feature and firmware associations use replace-all semantics: whatever set
the request names becomes the complete set.
"""
from typing import List, Optional

from audit.application.services.audit_ledger import AuditLedger
from audit.domain import details
from core.domain.exceptions import (
    FirmwareVersionNotFoundError,
    InvalidInputError,
    ProductNotFoundError,
    SoftwareVersionExistsError,
    SoftwareVersionNotFoundError,
)
from core.domain.value_objects import AccessLevel, AuditAction, AuditModule, Page, PageRequest
from core.infrastructure.database import atomic_operation
from licenses.domain.services import FeatureSetValidator
from licenses.ports.feature_repository import FeatureRepository
from products.domain.services import ProductAuthorizer
from products.ports.product_repository import ProductRepository
from versions.application.commands.version_commands import (
    AddSoftwareVersionCommand,
    DeleteSoftwareVersionCommand,
    ModifySoftwareVersionCommand,
)
from versions.application.dto.version_dto import SoftwareVersionDTO
from versions.application.queries.list_versions import ListVersionsQuery
from versions.domain.version import SoftwareVersion
from versions.ports.version_repository import (
    FirmwareVersionRepository,
    SoftwareVersionRepository,
)


class _SoftwareVersionHandler:
    """Shared wiring of the software version handlers."""

    def __init__(
        self,
        software_version_repository: SoftwareVersionRepository,
        firmware_version_repository: FirmwareVersionRepository,
        feature_repository: FeatureRepository,
        audit_ledger: AuditLedger,
        authorizer: ProductAuthorizer,
    ):
        """Initialize handler with repositories."""
        self.software_version_repository = software_version_repository
        self.firmware_version_repository = firmware_version_repository
        self.feature_repository = feature_repository
        self.audit_ledger = audit_ledger
        self.authorizer = authorizer

    def _load(self, software_version_id: int) -> SoftwareVersion:
        software = self.software_version_repository.find_by_id(software_version_id)
        if not software:
            raise SoftwareVersionNotFoundError()
        return software

    def _validate_associations(
        self,
        product_id: int,
        feature_ids: Optional[List[int]],
        firmware_version_ids: Optional[List[int]],
    ) -> None:
        if feature_ids:
            FeatureSetValidator.validate(
                product_id, feature_ids, self.feature_repository.find_many(feature_ids)
            )
        if firmware_version_ids:
            found = {
                firmware.id: firmware
                for firmware in self.firmware_version_repository.find_many(firmware_version_ids)
            }
            if any(firmware_id not in found for firmware_id in firmware_version_ids):
                raise FirmwareVersionNotFoundError()
            if any(firmware.product_id != product_id for firmware in found.values()):
                raise InvalidInputError("Firmware versions must belong to the same product")


class AddSoftwareVersionHandler(_SoftwareVersionHandler):
    """Handler for AddSoftwareVersionCommand."""

    def __init__(self, product_repository: ProductRepository, **kwargs):
        """Initialize handler with repositories."""
        super().__init__(**kwargs)
        self.product_repository = product_repository

    def handle(self, command: AddSoftwareVersionCommand) -> SoftwareVersionDTO:
        """
        Handle add software version command.

        Raises:
            SoftwareVersionExistsError: If the version string is taken in the product
            FeatureNotFoundError / FirmwareVersionNotFoundError: For unknown ids
            InvalidInputError: For ids owned by another product
        """
        actor = command.actor
        self.authorizer.authorize(actor, command.product_id, AccessLevel.MUTATE)
        if not self.product_repository.find_by_id(command.product_id):
            raise ProductNotFoundError()

        try:
            software = SoftwareVersion.create(
                command.product_id,
                command.version,
                command.release_date,
                created_by=actor.user_id,
                update_log=command.update_log,
                remark=command.remark,
                feature_ids=command.feature_ids,
                firmware_version_ids=command.firmware_version_ids,
            )
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc

        if self.software_version_repository.version_exists(software.product_id, software.version):
            raise SoftwareVersionExistsError()
        self._validate_associations(
            software.product_id, command.feature_ids, command.firmware_version_ids
        )

        with atomic_operation(
            "add_software_version", actor_id=actor.user_id, product_id=software.product_id
        ):
            software = self.software_version_repository.save(software)
            self.audit_ledger.record(
                actor,
                AuditModule.SOFTWARE_VERSION,
                AuditAction.CREATE,
                product_id=software.product_id,
                details=details.created("software_version", software),
            )
        return SoftwareVersionDTO.from_domain(software)


class ModifySoftwareVersionHandler(_SoftwareVersionHandler):
    """Handler for ModifySoftwareVersionCommand."""

    def handle(self, command: ModifySoftwareVersionCommand) -> SoftwareVersionDTO:
        """Modify a software version; an unchanged request writes nothing."""
        actor = command.actor
        old = self._load(command.software_version_id)
        self.authorizer.authorize(actor, old.product_id, AccessLevel.MUTATE)

        try:
            new = old.with_changes(
                version=command.version,
                release_date=command.release_date,
                update_log=command.update_log,
                remark=command.remark,
                feature_ids=command.feature_ids,
                firmware_version_ids=command.firmware_version_ids,
            )
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc
        if new is old:
            return SoftwareVersionDTO.from_domain(old)

        if new.version != old.version and self.software_version_repository.version_exists(
            old.product_id, new.version, exclude_id=old.id
        ):
            raise SoftwareVersionExistsError()
        self._validate_associations(old.product_id, command.feature_ids, command.firmware_version_ids)

        with atomic_operation("modify_software_version", actor_id=actor.user_id, id=old.id):
            new = self.software_version_repository.save(new)
            self.audit_ledger.record(
                actor,
                AuditModule.SOFTWARE_VERSION,
                AuditAction.UPDATE,
                product_id=old.product_id,
                details=details.updated("software_version", old, new),
            )
        return SoftwareVersionDTO.from_domain(new)


class DeleteSoftwareVersionHandler(_SoftwareVersionHandler):
    """Handler for DeleteSoftwareVersionCommand."""

    def handle(self, command: DeleteSoftwareVersionCommand) -> None:
        actor = command.actor
        software = self._load(command.software_version_id)
        self.authorizer.authorize(actor, software.product_id, AccessLevel.MUTATE)

        with atomic_operation("delete_software_version", actor_id=actor.user_id, id=software.id):
            self.software_version_repository.delete(software.id)
            self.audit_ledger.record(
                actor,
                AuditModule.SOFTWARE_VERSION,
                AuditAction.DELETE,
                product_id=software.product_id,
                details=details.deleted("software_version", software),
            )


class ListSoftwareVersionsHandler:
    """Handler for ListVersionsQuery over software."""

    def __init__(
        self, software_version_repository: SoftwareVersionRepository, authorizer: ProductAuthorizer
    ):
        """Initialize handler with repositories."""
        self.software_version_repository = software_version_repository
        self.authorizer = authorizer

    def handle(self, query: ListVersionsQuery) -> Page[SoftwareVersionDTO]:
        self.authorizer.authorize(query.actor, query.product_id, AccessLevel.READ)
        total, versions = self.software_version_repository.list_for_product(
            query.product_id, PageRequest(query.page, query.page_size)
        )
        return Page(
            items=[SoftwareVersionDTO.from_domain(version) for version in versions],
            total=total,
            page=query.page,
            page_size=query.page_size,
        )
