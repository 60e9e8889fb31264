"""
Product feature handlers.
"""
from audit.application.services.audit_ledger import AuditLedger
from audit.domain import details
from core.domain.exceptions import (
    FeatureCodeExistsError,
    FeatureNameExistsError,
    FeatureNotFoundError,
    InvalidInputError,
    ProductNotFoundError,
)
from core.domain.value_objects import AccessLevel, AuditAction, AuditModule, Page, PageRequest
from core.infrastructure.database import atomic_operation
from licenses.application.commands.feature_commands import (
    AddFeatureCommand,
    DeleteFeatureCommand,
    ModifyFeatureCommand,
)
from licenses.application.dto.license_dto import FeatureDTO
from licenses.application.queries.list_license_types import ListFeaturesQuery
from licenses.domain.product_feature import ProductFeature
from licenses.ports.feature_repository import FeatureRepository
from products.domain.services import ProductAuthorizer
from products.ports.product_repository import ProductRepository


class AddFeatureHandler:
    """Handler for AddFeatureCommand."""

    def __init__(
        self,
        product_repository: ProductRepository,
        feature_repository: FeatureRepository,
        audit_ledger: AuditLedger,
        authorizer: ProductAuthorizer,
    ):
        """Initialize handler with repositories."""
        self.product_repository = product_repository
        self.feature_repository = feature_repository
        self.audit_ledger = audit_ledger
        self.authorizer = authorizer

    def handle(self, command: AddFeatureCommand) -> FeatureDTO:
        """
        Handle add feature command.

        Raises:
            FeatureNameExistsError: If feature_name is taken in the product
            FeatureCodeExistsError: If feature_code is taken in the product
        """
        actor = command.actor
        self.authorizer.authorize(actor, command.product_id, AccessLevel.MUTATE)
        if not self.product_repository.find_by_id(command.product_id):
            raise ProductNotFoundError()

        try:
            feature = ProductFeature.create(
                command.product_id, command.feature_name, command.feature_code
            )
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc

        if self.feature_repository.feature_name_exists(feature.product_id, feature.feature_name):
            raise FeatureNameExistsError()
        if self.feature_repository.feature_code_exists(feature.product_id, feature.feature_code):
            raise FeatureCodeExistsError()

        with atomic_operation("add_feature", actor_id=actor.user_id, product_id=feature.product_id):
            feature = self.feature_repository.save(feature)
            self.audit_ledger.record(
                actor,
                AuditModule.FEATURE,
                AuditAction.CREATE,
                product_id=feature.product_id,
                details=details.created("feature", feature),
            )

        return FeatureDTO.from_domain(feature)


class ModifyFeatureHandler:
    """Handler for ModifyFeatureCommand."""

    def __init__(
        self,
        feature_repository: FeatureRepository,
        audit_ledger: AuditLedger,
        authorizer: ProductAuthorizer,
    ):
        """Initialize handler with repositories."""
        self.feature_repository = feature_repository
        self.audit_ledger = audit_ledger
        self.authorizer = authorizer

    def handle(self, command: ModifyFeatureCommand) -> FeatureDTO:
        actor = command.actor
        old = self.feature_repository.find_by_id(command.feature_id)
        if not old:
            raise FeatureNotFoundError()
        self.authorizer.authorize(actor, old.product_id, AccessLevel.MUTATE)

        if not command.feature_name or not command.feature_name.strip():
            raise InvalidInputError("Feature name cannot be empty")
        new = old.rename(command.feature_name)
        if new.feature_name != old.feature_name and self.feature_repository.feature_name_exists(
            old.product_id, new.feature_name, exclude_id=old.id
        ):
            raise FeatureNameExistsError()

        with atomic_operation("modify_feature", actor_id=actor.user_id, feature_id=old.id):
            new = self.feature_repository.save(new)
            self.audit_ledger.record(
                actor,
                AuditModule.FEATURE,
                AuditAction.UPDATE,
                product_id=old.product_id,
                details=details.updated("feature", old, new),
            )

        return FeatureDTO.from_domain(new)


class DeleteFeatureHandler:
    """Handler for DeleteFeatureCommand."""

    def __init__(
        self,
        feature_repository: FeatureRepository,
        audit_ledger: AuditLedger,
        authorizer: ProductAuthorizer,
    ):
        """Initialize handler with repositories."""
        self.feature_repository = feature_repository
        self.audit_ledger = audit_ledger
        self.authorizer = authorizer

    def handle(self, command: DeleteFeatureCommand) -> None:
        """
        Handle delete feature command.

        Two steps in one transaction: detach the feature from every license
        type and software version, then delete it.
        """
        actor = command.actor
        feature = self.feature_repository.find_by_id(command.feature_id)
        if not feature:
            raise FeatureNotFoundError()
        self.authorizer.authorize(actor, feature.product_id, AccessLevel.MUTATE)

        with atomic_operation("delete_feature", actor_id=actor.user_id, feature_id=feature.id):
            self.feature_repository.clear_associations(feature.id)
            self.feature_repository.delete(feature.id)
            self.audit_ledger.record(
                actor,
                AuditModule.FEATURE,
                AuditAction.DELETE,
                product_id=feature.product_id,
                details=details.deleted("feature", feature),
            )


class ListFeaturesHandler:
    """Handler for ListFeaturesQuery."""

    def __init__(self, feature_repository: FeatureRepository, authorizer: ProductAuthorizer):
        """Initialize handler with repositories."""
        self.feature_repository = feature_repository
        self.authorizer = authorizer

    def handle(self, query: ListFeaturesQuery) -> Page[FeatureDTO]:
        self.authorizer.authorize(query.actor, query.product_id, AccessLevel.READ)
        total, features = self.feature_repository.list_for_product(
            query.product_id, PageRequest(query.page, query.page_size)
        )
        return Page(
            items=[FeatureDTO.from_domain(feature) for feature in features],
            total=total,
            page=query.page,
            page_size=query.page_size,
        )
