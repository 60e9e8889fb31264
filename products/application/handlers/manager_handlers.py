"""
Manager handlers.

Handlers for adding and removing assistant managers of a product.
"""
from audit.application.services.audit_ledger import AuditLedger
from audit.domain import details
from core.domain.exceptions import (
    InvalidInputError,
    ManagerAlreadyExistsError,
    ManagerNotFoundError,
    ProductNotFoundError,
    UserNotFoundError,
)
from core.domain.value_objects import AccessLevel, AuditAction, AuditModule
from core.infrastructure.database import atomic_operation
from products.application.commands.manager_commands import AddManagerCommand, RemoveManagerCommand
from products.application.dto.product_dto import ManagerDTO
from products.domain.product_manager import ProductManager
from products.domain.services import ProductAuthorizer
from products.ports.product_manager_repository import ProductManagerRepository
from products.ports.product_repository import ProductRepository
from products.ports.user_directory import UserDirectory


class AddManagerHandler:
    """Handler for AddManagerCommand."""

    def __init__(
        self,
        product_repository: ProductRepository,
        product_manager_repository: ProductManagerRepository,
        user_directory: UserDirectory,
        audit_ledger: AuditLedger,
        authorizer: ProductAuthorizer,
    ):
        """Initialize handler with repositories."""
        self.product_repository = product_repository
        self.product_manager_repository = product_manager_repository
        self.user_directory = user_directory
        self.audit_ledger = audit_ledger
        self.authorizer = authorizer

    def handle(self, command: AddManagerCommand) -> ManagerDTO:
        """
        Handle add manager command.

        The new manager is always an assistant; permission defaults to read.

        Raises:
            PermissionDeniedError: If the actor is not main manager or super-admin
            ProductNotFoundError: If the product does not exist
            UserNotFoundError: If no account has the email
            ManagerAlreadyExistsError: If the user already manages the product
        """
        actor = command.actor
        self.authorizer.authorize(actor, command.product_id, AccessLevel.ADMINISTER)

        if not self.product_repository.find_by_id(command.product_id):
            raise ProductNotFoundError()

        user_id = self.user_directory.find_id_by_email(command.email)
        if user_id is None:
            raise UserNotFoundError()
        if self.product_manager_repository.find(command.product_id, user_id):
            raise ManagerAlreadyExistsError()

        with atomic_operation(
            "add_manager", actor_id=actor.user_id, product_id=command.product_id, user_id=user_id
        ):
            manager = self.product_manager_repository.save(
                ProductManager.create_assistant(
                    command.product_id, user_id, command.permission, command.remark
                )
            )
            self.audit_ledger.record(
                actor,
                AuditModule.PRODUCT,
                AuditAction.UPDATE,
                product_id=command.product_id,
                details=details.updated("manager", None, manager),
            )

        return ManagerDTO.from_domain(manager)


class RemoveManagerHandler:
    """Handler for RemoveManagerCommand."""

    def __init__(
        self,
        product_manager_repository: ProductManagerRepository,
        audit_ledger: AuditLedger,
        authorizer: ProductAuthorizer,
    ):
        """Initialize handler with repositories."""
        self.product_manager_repository = product_manager_repository
        self.audit_ledger = audit_ledger
        self.authorizer = authorizer

    def handle(self, command: RemoveManagerCommand) -> None:
        """
        Handle remove manager command.

        Raises:
            PermissionDeniedError: If the actor is not main manager or super-admin
            ManagerNotFoundError: If the user does not manage the product
            InvalidInputError: If the user is the main manager
        """
        actor = command.actor
        self.authorizer.authorize(actor, command.product_id, AccessLevel.ADMINISTER)

        manager = self.product_manager_repository.find(command.product_id, command.user_id)
        if manager is None:
            raise ManagerNotFoundError()
        if manager.is_main:
            raise InvalidInputError("The main manager cannot be removed")

        with atomic_operation(
            "remove_manager",
            actor_id=actor.user_id,
            product_id=command.product_id,
            user_id=command.user_id,
        ):
            self.product_manager_repository.delete(manager.id)
            self.audit_ledger.record(
                actor,
                AuditModule.PRODUCT,
                AuditAction.UPDATE,
                product_id=command.product_id,
                details=details.updated("manager", manager, None),
            )
