"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from abc import ABC
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, TypeVar

from django.conf import settings

# Reserved identities; settings.SUPER_ADMIN_ID / ANONYMOUS_ACTOR_ID override them
SUPER_ADMIN_ID = 1
ANONYMOUS_ID = 100000000

T = TypeVar("T")


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class SerialNumber(ValueObject):
    """Device serial number, the durable identity of a device."""

    value: str

    def __post_init__(self):
        """Validate serial number."""
        if not self.value or not self.value.strip():
            raise ValueError("Serial number cannot be empty")
        if self.value != self.value.strip():
            raise ValueError("Serial number cannot have surrounding whitespace")
        if len(self.value) > 128:
            raise ValueError("Serial number too long")

    def __str__(self) -> str:
        """Return serial number as string."""
        return self.value


def super_admin_id() -> int:
    return getattr(settings, "SUPER_ADMIN_ID", SUPER_ADMIN_ID)


def anonymous_actor_id() -> int:
    return getattr(settings, "ANONYMOUS_ACTOR_ID", ANONYMOUS_ID)


@dataclass(frozen=True)
class Actor(ValueObject):
    """
    The identity a handler acts on behalf of.

    Handlers receive it explicitly; ``ip_address`` only ends up in the
    audit ledger.
    """

    user_id: int
    ip_address: str = ""

    def __post_init__(self):
        """Validate actor identity."""
        if not self.user_id or self.user_id < 0:
            raise ValueError("Actor must be an authenticated user")

    @property
    def is_super_admin(self) -> bool:
        return self.user_id == super_admin_id()

    @classmethod
    def anonymous(cls, ip_address: str = "") -> "Actor":
        """Actor used for audit entries written before authentication."""
        return cls(user_id=anonymous_actor_id(), ip_address=ip_address)


class ManagerRole(Enum):
    """Role of a user within one product."""

    MAIN = "main"
    ASSISTANT = "assistant"

    def __str__(self) -> str:
        return self.value


class ManagerPermission(Enum):
    """Stored permission of a product manager."""

    READ = "read"
    FULL = "full"

    @classmethod
    def default(cls) -> "ManagerPermission":
        return cls.READ

    def __str__(self) -> str:
        return self.value


class AccessLevel(Enum):
    """Level an operation requires on its product."""

    READ = "read"
    MUTATE = "mutate"
    ADMINISTER = "administer"

    def __str__(self) -> str:
        return self.value


class AuditModule(Enum):
    """Module column of the audit ledger."""

    PRODUCT = "product"
    LICENSE_TYPE = "license_type"
    FEATURE = "feature"
    DEVICE = "device"
    FIRMWARE_VERSION = "firmware_version"
    SOFTWARE_VERSION = "software_version"
    USER = "user"
    AUTH = "auth"

    def __str__(self) -> str:
        return self.value


class AuditAction(Enum):
    """Action column of the audit ledger."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    BATCH_CREATE = "batch_create"
    BATCH_UPDATE_LICENSE = "batch_update_license"
    LOGIN = "login"
    REGISTER = "register"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PageRequest(ValueObject):
    """1-based page number and page size."""

    page: int = 1
    page_size: int = 10

    def __post_init__(self):
        """Validate page bounds."""
        if self.page < 1:
            raise ValueError("Page must be at least 1")
        if self.page_size < 1:
            raise ValueError("Page size must be at least 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass
class Page(Generic[T]):
    """One page of a listing."""

    items: List[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 10
