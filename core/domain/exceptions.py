"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions. Every failure surfaced to a caller
belongs to exactly one kind below; the concrete subclasses only pin a
stable machine code and a localized default message.
"""
from django.utils.translation import gettext_lazy as _


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    default_message = _("Operation failed")
    default_code = "OPERATION_FAILED"

    def __init__(self, message: str = None, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        message = str(message if message is not None else self.default_message)
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class NotFoundError(DomainException):
    """A referenced entity does not exist."""

    default_message = _("Resource not found")
    default_code = "NOT_FOUND"


class ProductNotFoundError(NotFoundError):
    default_message = _("Product does not exist")
    default_code = "PRODUCT_NOT_EXIST"


class LicenseTypeNotFoundError(NotFoundError):
    default_message = _("License type does not exist")
    default_code = "LICENSE_TYPE_NOT_EXIST"


class FeatureNotFoundError(NotFoundError):
    default_message = _("Feature does not exist")
    default_code = "FEATURE_NOT_EXIST"


class DeviceNotFoundError(NotFoundError):
    default_message = _("Device does not exist")
    default_code = "DEVICE_NOT_EXIST"


class ManagerNotFoundError(NotFoundError):
    default_message = _("Manager does not exist")
    default_code = "MANAGER_NOT_EXIST"


class UserNotFoundError(NotFoundError):
    default_message = _("User does not exist")
    default_code = "USER_NOT_EXIST"


class FirmwareVersionNotFoundError(NotFoundError):
    default_message = _("Firmware version does not exist")
    default_code = "FIRMWARE_NOT_EXIST"


class SoftwareVersionNotFoundError(NotFoundError):
    default_message = _("Software version does not exist")
    default_code = "SOFTWARE_NOT_EXIST"


class ConflictError(DomainException):
    """A uniqueness rule on code, name, sn or type would be violated."""

    default_message = _("Resource already exists")
    default_code = "CONFLICT"


class ProductCodeExistsError(ConflictError):
    default_message = _("Product code already exists")
    default_code = "PRODUCT_CODE_EXIST"


class ProductNameExistsError(ConflictError):
    default_message = _("Product name already exists")
    default_code = "PRODUCT_NAME_EXIST"


class LicenseTypeNameExistsError(ConflictError):
    default_message = _("License type name already exists")
    default_code = "LICENSE_TYPE_EXIST"


class LicenseCodeExistsError(ConflictError):
    default_message = _("License code already exists")
    default_code = "LICENSE_CODE_EXIST"


class FeatureNameExistsError(ConflictError):
    default_message = _("Feature name already exists")
    default_code = "FEATURE_NAME_EXIST"


class FeatureCodeExistsError(ConflictError):
    default_message = _("Feature code already exists")
    default_code = "FEATURE_CODE_EXIST"


class DeviceSNExistsError(ConflictError):
    default_message = _("Device serial number already exists")
    default_code = "DEVICE_SN_EXIST"


class ManagerAlreadyExistsError(ConflictError):
    default_message = _("User is already a manager of this product")
    default_code = "MANAGER_ALREADY_EXIST"


class FirmwareVersionExistsError(ConflictError):
    default_message = _("Firmware version already exists")
    default_code = "FIRMWARE_VERSION_EXIST"


class SoftwareVersionExistsError(ConflictError):
    default_message = _("Software version already exists")
    default_code = "SOFTWARE_VERSION_EXIST"


class PermissionDeniedError(DomainException):
    """The actor may not perform the operation on the product."""

    default_message = _("No permission")
    default_code = "NO_PERMISSION"


class InvalidInputError(DomainException):
    """The request is well-formed but violates a business rule."""

    default_message = _("Invalid parameter")
    default_code = "INVALID_PARAMETER"


class RelationsExistError(DomainException):
    """A delete is blocked by dependent entities."""

    default_message = _("Entity still has related records")
    default_code = "PRODUCT_HAS_RELATIONS"


class LicenseTypeInUseError(RelationsExistError):
    default_message = _("License type is still assigned to devices")
    default_code = "LICENSE_TYPE_IN_USE"


class StorageFailureError(DomainException):
    """The database rejected or failed an operation."""

    default_message = _("Storage operation failed")
    default_code = "STORAGE_FAILURE"


class AuditFailureError(DomainException):
    """
    The mutation was valid but its audit record could not be written.

    Raising it rolls back the enclosing transaction, so the mutation is
    never observable without its record.
    """

    default_message = _("Failed to record audit log")
    default_code = "ADD_LOG_FAILED"


class CryptoFailureError(DomainException):
    """Serialization, signing or encryption of an artifact failed. Not retryable."""

    default_message = _("Operation failed")
    default_code = "OPERATION_FAILED"
