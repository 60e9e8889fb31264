"""
Product domain services.

The authorization matrix: who may read, mutate or administer a product.
Rules, in priority order:

1. The super-admin is allowed every level on every product.
2. Otherwise the actor needs a manager record on the product.
3. Read needs any record; Mutate needs permission=full or role=main;
   Administer needs role=main.
4. role=main implies full permission whatever the stored value.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from core.domain.exceptions import PermissionDeniedError
from core.domain.value_objects import AccessLevel, Actor, ManagerPermission, super_admin_id
from core.metrics import authorization_denials_total
from products.domain.product_manager import ProductManager
from products.ports.product_manager_repository import ProductManagerRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of an authorization check."""

    allowed: bool
    manager: Optional[ProductManager] = None
    reason: str = ""


class AccessPolicy:
    """Pure decision function of the authorization matrix."""

    @staticmethod
    def decide(
        actor_id: int,
        manager: Optional[ProductManager],
        level: AccessLevel,
        super_admin: Optional[int] = None,
    ) -> AccessDecision:
        """
        Decide whether an actor holds ``level`` on a product.

        Args:
            actor_id: Acting user id
            manager: The actor's manager record on the product, if any
            level: Required access level
            super_admin: Super-admin id, settings.SUPER_ADMIN_ID when None

        Returns:
            AccessDecision; never a partial grant
        """
        if super_admin is None:
            super_admin = super_admin_id()
        if actor_id == super_admin:
            return AccessDecision(allowed=True, manager=manager, reason="super_admin")

        if manager is None or manager.user_id != actor_id:
            return AccessDecision(allowed=False, reason="not_a_manager")

        if level is AccessLevel.READ:
            return AccessDecision(allowed=True, manager=manager)
        if level is AccessLevel.MUTATE:
            if manager.effective_permission is ManagerPermission.FULL:
                return AccessDecision(allowed=True, manager=manager)
            return AccessDecision(allowed=False, manager=manager, reason="read_only")
        if manager.is_main:
            return AccessDecision(allowed=True, manager=manager)
        return AccessDecision(allowed=False, manager=manager, reason="not_main_manager")


class ProductAuthorizer:
    """Applies AccessPolicy to stored manager records."""

    def __init__(self, product_manager_repository: ProductManagerRepository):
        """Initialize authorizer with the manager repository."""
        self.product_manager_repository = product_manager_repository

    def check(self, actor: Actor, product_id: int, level: AccessLevel) -> AccessDecision:
        manager = None
        if not actor.is_super_admin:
            manager = self.product_manager_repository.find(product_id, actor.user_id)
        return AccessPolicy.decide(actor.user_id, manager, level)

    def authorize(
        self, actor: Actor, product_id: int, level: AccessLevel
    ) -> Optional[ProductManager]:
        """
        Require ``level`` on a product.

        Returns:
            The actor's manager record (None for the super-admin)

        Raises:
            PermissionDeniedError: If the decision denies access
        """
        decision = self.check(actor, product_id, level)
        if not decision.allowed:
            authorization_denials_total.labels(level=level.value).inc()
            logger.info(
                "Authorization denied",
                extra={
                    "actor_id": actor.user_id,
                    "product_id": product_id,
                    "level": level.value,
                    "reason": decision.reason,
                },
            )
            raise PermissionDeniedError()
        return decision.manager

    def readable_product_ids(self, actor: Actor) -> Optional[List[int]]:
        """Products the actor may read; None means every product."""
        if actor.is_super_admin:
            return None
        return self.product_manager_repository.product_ids_for_user(actor.user_id)
