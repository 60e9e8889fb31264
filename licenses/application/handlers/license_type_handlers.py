"""
License type handlers.

Handlers for creating, renaming, re-featuring, deleting and listing
license types.
"""
import logging
from typing import List

from audit.application.services.audit_ledger import AuditLedger
from audit.domain import details
from core.domain.exceptions import (
    InvalidInputError,
    LicenseCodeExistsError,
    LicenseTypeInUseError,
    LicenseTypeNameExistsError,
    LicenseTypeNotFoundError,
    ProductNotFoundError,
)
from core.domain.value_objects import AccessLevel, AuditAction, AuditModule, Page, PageRequest
from core.infrastructure.database import atomic_operation
from licenses.application.commands.license_type_commands import (
    AddLicenseTypeCommand,
    DeleteLicenseTypeCommand,
    ModifyLicenseTypeCommand,
    UpdateLicenseTypeFeaturesCommand,
)
from licenses.application.dto.license_dto import LicenseTypeDTO
from licenses.application.queries.list_license_types import ListLicenseTypesQuery
from licenses.domain.license_type import LicenseType
from licenses.domain.services import FeatureSetValidator
from licenses.ports.feature_repository import FeatureRepository
from licenses.ports.license_type_repository import LicenseTypeRepository
from products.domain.services import ProductAuthorizer
from products.ports.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class _LicenseTypeHandler:
    """Shared wiring of the license type handlers."""

    def __init__(
        self,
        license_type_repository: LicenseTypeRepository,
        feature_repository: FeatureRepository,
        audit_ledger: AuditLedger,
        authorizer: ProductAuthorizer,
    ):
        """Initialize handler with repositories."""
        self.license_type_repository = license_type_repository
        self.feature_repository = feature_repository
        self.audit_ledger = audit_ledger
        self.authorizer = authorizer

    def _load(self, license_type_id: int) -> LicenseType:
        license_type = self.license_type_repository.find_by_id(license_type_id)
        if not license_type:
            raise LicenseTypeNotFoundError()
        return license_type

    def _validated_feature_ids(self, product_id: int, feature_ids: List[int]) -> List[int]:
        found = self.feature_repository.find_many(feature_ids)
        return FeatureSetValidator.validate(product_id, feature_ids, found)


class AddLicenseTypeHandler(_LicenseTypeHandler):
    """Handler for AddLicenseTypeCommand."""

    def __init__(self, product_repository: ProductRepository, **kwargs):
        """Initialize handler with repositories."""
        super().__init__(**kwargs)
        self.product_repository = product_repository

    def handle(self, command: AddLicenseTypeCommand) -> LicenseTypeDTO:
        """
        Handle add license type command.

        Raises:
            PermissionDeniedError: If the actor may not mutate the product
            ProductNotFoundError: If the product does not exist
            LicenseTypeNameExistsError: If type_name is taken in the product
            LicenseCodeExistsError: If license_code is taken in the product
            FeatureNotFoundError / InvalidInputError: For bad feature ids
        """
        actor = command.actor
        self.authorizer.authorize(actor, command.product_id, AccessLevel.MUTATE)
        if not self.product_repository.find_by_id(command.product_id):
            raise ProductNotFoundError()

        try:
            license_type = LicenseType.create(
                command.product_id, command.type_name, command.license_code
            )
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc

        if self.license_type_repository.type_name_exists(
            license_type.product_id, license_type.type_name
        ):
            raise LicenseTypeNameExistsError()
        if self.license_type_repository.license_code_exists(
            license_type.product_id, license_type.license_code
        ):
            raise LicenseCodeExistsError()

        feature_ids = self._validated_feature_ids(command.product_id, command.feature_ids)

        with atomic_operation(
            "add_license_type", actor_id=actor.user_id, product_id=command.product_id
        ):
            license_type = self.license_type_repository.save(license_type)
            if feature_ids:
                self.license_type_repository.replace_features(license_type.id, feature_ids)
            self.audit_ledger.record(
                actor,
                AuditModule.LICENSE_TYPE,
                AuditAction.CREATE,
                product_id=license_type.product_id,
                details={**details.created("license_type", license_type), "features": feature_ids},
            )

        return LicenseTypeDTO.from_domain(
            license_type, self.feature_repository.find_many(feature_ids)
        )


class ModifyLicenseTypeHandler(_LicenseTypeHandler):
    """Handler for ModifyLicenseTypeCommand."""

    def handle(self, command: ModifyLicenseTypeCommand) -> LicenseTypeDTO:
        actor = command.actor
        old = self._load(command.license_type_id)
        self.authorizer.authorize(actor, old.product_id, AccessLevel.MUTATE)

        if not command.type_name or not command.type_name.strip():
            raise InvalidInputError("License type name cannot be empty")
        new = old.rename(command.type_name)
        if new.type_name != old.type_name and self.license_type_repository.type_name_exists(
            old.product_id, new.type_name, exclude_id=old.id
        ):
            raise LicenseTypeNameExistsError()

        with atomic_operation(
            "modify_license_type", actor_id=actor.user_id, license_type_id=old.id
        ):
            new = self.license_type_repository.save(new)
            self.audit_ledger.record(
                actor,
                AuditModule.LICENSE_TYPE,
                AuditAction.UPDATE,
                product_id=old.product_id,
                details=details.updated("license_type", old, new),
            )

        feature_ids = self.license_type_repository.feature_ids(new.id)
        return LicenseTypeDTO.from_domain(new, self.feature_repository.find_many(feature_ids))


class UpdateLicenseTypeFeaturesHandler(_LicenseTypeHandler):
    """Handler for UpdateLicenseTypeFeaturesCommand."""

    def handle(self, command: UpdateLicenseTypeFeaturesCommand) -> LicenseTypeDTO:
        """
        Handle update features command with replace-all semantics.

        The previous set is cleared and the requested set inserted; the
        result is exactly the requested set.
        """
        actor = command.actor
        license_type = self._load(command.license_type_id)
        self.authorizer.authorize(actor, license_type.product_id, AccessLevel.MUTATE)

        feature_ids = self._validated_feature_ids(license_type.product_id, command.feature_ids)

        with atomic_operation(
            "update_license_type_features",
            actor_id=actor.user_id,
            license_type_id=license_type.id,
        ):
            old_feature_ids = self.license_type_repository.feature_ids(license_type.id)
            self.license_type_repository.replace_features(license_type.id, feature_ids)
            self.audit_ledger.record(
                actor,
                AuditModule.LICENSE_TYPE,
                AuditAction.UPDATE,
                product_id=license_type.product_id,
                details={
                    "license_type": details.snapshot(license_type),
                    "old_features": old_feature_ids,
                    "new_features": sorted(feature_ids),
                },
            )

        return LicenseTypeDTO.from_domain(
            license_type, self.feature_repository.find_many(feature_ids)
        )


class DeleteLicenseTypeHandler(_LicenseTypeHandler):
    """Handler for DeleteLicenseTypeCommand."""

    def handle(self, command: DeleteLicenseTypeCommand) -> None:
        """
        Handle delete license type command.

        Clears the feature associations, then deletes the license type.

        Raises:
            LicenseTypeInUseError: If devices are still assigned to it
        """
        actor = command.actor
        license_type = self._load(command.license_type_id)
        self.authorizer.authorize(actor, license_type.product_id, AccessLevel.MUTATE)

        if self.license_type_repository.device_count(license_type.id):
            raise LicenseTypeInUseError()

        with atomic_operation(
            "delete_license_type", actor_id=actor.user_id, license_type_id=license_type.id
        ):
            feature_ids = self.license_type_repository.feature_ids(license_type.id)
            self.license_type_repository.clear_features(license_type.id)
            self.license_type_repository.delete(license_type.id)
            self.audit_ledger.record(
                actor,
                AuditModule.LICENSE_TYPE,
                AuditAction.DELETE,
                product_id=license_type.product_id,
                details={**details.deleted("license_type", license_type), "features": feature_ids},
            )


class ListLicenseTypesHandler(_LicenseTypeHandler):
    """Handler for ListLicenseTypesQuery."""

    def handle(self, query: ListLicenseTypesQuery) -> Page[LicenseTypeDTO]:
        self.authorizer.authorize(query.actor, query.product_id, AccessLevel.READ)
        total, license_types = self.license_type_repository.list_for_product(
            query.product_id, PageRequest(query.page, query.page_size)
        )
        items = [
            LicenseTypeDTO.from_domain(
                license_type,
                self.feature_repository.find_many(
                    self.license_type_repository.feature_ids(license_type.id)
                ),
            )
            for license_type in license_types
        ]
        return Page(items=items, total=total, page=query.page, page_size=query.page_size)
