"""
Product handlers.

Handlers for add, modify and delete product commands. Each mutation runs
authorize -> validate -> transaction(mutate, audit) -> commit.
"""
import logging

from audit.application.services.audit_ledger import AuditLedger
from audit.domain import details
from core.domain.exceptions import (
    InvalidInputError,
    ManagerNotFoundError,
    ProductCodeExistsError,
    ProductNameExistsError,
    ProductNotFoundError,
    RelationsExistError,
)
from core.domain.value_objects import AccessLevel, AuditAction, AuditModule
from core.infrastructure.database import atomic_operation
from products.application.commands.product_commands import (
    AddProductCommand,
    DeleteProductCommand,
    ModifyProductCommand,
)
from products.application.dto.product_dto import ProductDTO
from products.domain.product import Product
from products.domain.product_manager import ProductManager
from products.domain.services import ProductAuthorizer
from products.ports.product_manager_repository import ProductManagerRepository
from products.ports.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class AddProductHandler:
    """Handler for AddProductCommand."""

    def __init__(
        self,
        product_repository: ProductRepository,
        product_manager_repository: ProductManagerRepository,
        audit_ledger: AuditLedger,
    ):
        """Initialize handler with repositories."""
        self.product_repository = product_repository
        self.product_manager_repository = product_manager_repository
        self.audit_ledger = audit_ledger

    def handle(self, command: AddProductCommand) -> ProductDTO:
        """
        Handle add product command.

        Args:
            command: AddProductCommand

        Returns:
            ProductDTO of the created product with its main manager

        Raises:
            InvalidInputError: If code or name is blank
            ProductCodeExistsError: If the code is taken
            ProductNameExistsError: If the name is taken
        """
        try:
            product = Product.create(command.code, command.name, command.product_type)
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc

        if self.product_repository.code_exists(product.code):
            raise ProductCodeExistsError()
        if self.product_repository.name_exists(product.name):
            raise ProductNameExistsError()

        with atomic_operation("add_product", actor_id=command.actor.user_id, code=product.code):
            product = self.product_repository.save(product)
            main = self.product_manager_repository.save(
                ProductManager.create_main(product.id, command.actor.user_id)
            )
            self.audit_ledger.record(
                command.actor,
                AuditModule.PRODUCT,
                AuditAction.CREATE,
                product_id=product.id,
                details={**details.created("product", product), "main_manager": details.snapshot(main)},
            )

        logger.info(
            "Product created",
            extra={"product_id": product.id, "actor_id": command.actor.user_id},
        )
        return ProductDTO.from_domain(product, [main])


class ModifyProductHandler:
    """Handler for ModifyProductCommand."""

    def __init__(
        self,
        product_repository: ProductRepository,
        product_manager_repository: ProductManagerRepository,
        audit_ledger: AuditLedger,
        authorizer: ProductAuthorizer,
    ):
        """Initialize handler with repositories."""
        self.product_repository = product_repository
        self.product_manager_repository = product_manager_repository
        self.audit_ledger = audit_ledger
        self.authorizer = authorizer

    def handle(self, command: ModifyProductCommand) -> ProductDTO:
        """
        Handle modify product command.

        A main transfer demotes the current main manager to assistant with
        the default permission and promotes the target, who must already
        manage the product. Both rows, any assistant changes, the product
        update and the audit record share one transaction.

        Raises:
            PermissionDeniedError: If the actor is not main manager or super-admin
            ProductNotFoundError: If the product does not exist
            ProductNameExistsError: If the new name is taken
            ManagerNotFoundError: If a referenced user does not manage the product
        """
        actor = command.actor
        self.authorizer.authorize(actor, command.product_id, AccessLevel.ADMINISTER)

        old_product = self.product_repository.find_by_id(command.product_id)
        if not old_product:
            raise ProductNotFoundError()

        new_product = old_product.with_changes(command.name, command.product_type)
        if new_product.name != old_product.name and self.product_repository.name_exists(
            new_product.name, exclude_id=old_product.id
        ):
            raise ProductNameExistsError()

        with atomic_operation(
            "modify_product", actor_id=actor.user_id, product_id=command.product_id
        ):
            old_managers = self.product_manager_repository.list_for_product(
                command.product_id, for_update=True
            )
            by_user = {manager.user_id: manager for manager in old_managers}

            if command.main_user_id is not None:
                self._transfer_main(by_user, command.main_user_id)

            for update in command.managers:
                manager = by_user.get(update.user_id)
                if manager is None:
                    raise ManagerNotFoundError()
                if manager.is_main:
                    # main always holds full permission
                    continue
                by_user[update.user_id] = self.product_manager_repository.save(
                    manager.with_settings(update.permission, update.remark)
                )

            new_product = self.product_repository.save(new_product)
            new_managers = self.product_manager_repository.list_for_product(command.product_id)
            self.audit_ledger.record(
                actor,
                AuditModule.PRODUCT,
                AuditAction.UPDATE,
                product_id=command.product_id,
                details=details.updated(
                    "product",
                    old_product,
                    new_product,
                    old_managers=[details.snapshot(m) for m in old_managers],
                    new_managers=[details.snapshot(m) for m in new_managers],
                ),
            )

        return ProductDTO.from_domain(new_product, new_managers)

    def _transfer_main(self, by_user, new_main_user_id: int) -> None:
        target = by_user.get(new_main_user_id)
        if target is None:
            raise ManagerNotFoundError()
        if target.is_main:
            return

        current = next((manager for manager in by_user.values() if manager.is_main), None)
        # demote before promote: storage allows one main row per product
        if current is not None:
            by_user[current.user_id] = self.product_manager_repository.save(current.demote())
        by_user[target.user_id] = self.product_manager_repository.save(target.promote())
        logger.info(
            "Main manager transferred",
            extra={
                "product_id": target.product_id,
                "from_user_id": current.user_id if current else None,
                "to_user_id": target.user_id,
            },
        )


class DeleteProductHandler:
    """Handler for DeleteProductCommand."""

    def __init__(
        self,
        product_repository: ProductRepository,
        product_manager_repository: ProductManagerRepository,
        audit_ledger: AuditLedger,
        authorizer: ProductAuthorizer,
    ):
        """Initialize handler with repositories."""
        self.product_repository = product_repository
        self.product_manager_repository = product_manager_repository
        self.audit_ledger = audit_ledger
        self.authorizer = authorizer

    def handle(self, command: DeleteProductCommand) -> None:
        """
        Handle delete product command.

        Raises:
            PermissionDeniedError: If the actor is not main manager or super-admin
            ProductNotFoundError: If the product does not exist
            RelationsExistError: If license types, features or versions remain
        """
        actor = command.actor
        self.authorizer.authorize(actor, command.product_id, AccessLevel.ADMINISTER)

        product = self.product_repository.find_by_id(command.product_id)
        if not product:
            raise ProductNotFoundError()

        dependents = self.product_repository.dependents(product.id)
        if dependents:
            logger.info(
                "Product delete blocked",
                extra={"product_id": product.id, "dependents": dependents},
            )
            raise RelationsExistError()

        with atomic_operation("delete_product", actor_id=actor.user_id, product_id=product.id):
            managers = self.product_manager_repository.list_for_product(product.id, for_update=True)
            self.product_manager_repository.delete_for_product(product.id)
            self.product_repository.delete(product.id)
            self.audit_ledger.record(
                actor,
                AuditModule.PRODUCT,
                AuditAction.DELETE,
                product_id=None,
                details={
                    **details.deleted("product", product),
                    "managers": [details.snapshot(m) for m in managers],
                },
            )
