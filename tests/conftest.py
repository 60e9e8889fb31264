"""
Pytest configuration and shared fixtures.
"""

import base64
import os

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from audit.application.services.audit_ledger import AuditLedger
from audit.infrastructure.repositories.django_audit_log_repository import DjangoAuditLogRepository
from core.domain.value_objects import Actor, ManagerPermission
from devices.application.commands.device_commands import AddDeviceCommand
from devices.application.handlers.device_handlers import AddDeviceHandler
from devices.infrastructure.crypto import get_artifact_keys
from devices.infrastructure.repositories.django_device_repository import DjangoDeviceRepository
from licenses.application.commands.feature_commands import AddFeatureCommand
from licenses.application.commands.license_type_commands import AddLicenseTypeCommand
from licenses.application.handlers.feature_handlers import AddFeatureHandler
from licenses.application.handlers.license_type_handlers import AddLicenseTypeHandler
from licenses.infrastructure.repositories.django_feature_repository import DjangoFeatureRepository
from licenses.infrastructure.repositories.django_license_type_repository import (
    DjangoLicenseTypeRepository,
)
from products.application.commands.product_commands import AddProductCommand
from products.application.handlers.product_handlers import AddProductHandler
from products.domain.product_manager import ProductManager
from products.domain.services import ProductAuthorizer
from products.infrastructure.repositories.django_product_manager_repository import (
    DjangoProductManagerRepository,
)
from products.infrastructure.repositories.django_product_repository import DjangoProductRepository
from versions.infrastructure.repositories.django_version_repository import (
    DjangoFirmwareVersionRepository,
    DjangoSoftwareVersionRepository,
)

SUPER_ADMIN_ID = 1
MAIN_USER_ID = 2001
FULL_ASSISTANT_ID = 2002
READ_ASSISTANT_ID = 2003
OUTSIDER_ID = 2004


@pytest.fixture
def product_repository():
    """Fixture for ProductRepository."""
    return DjangoProductRepository()


@pytest.fixture
def product_manager_repository():
    """Fixture for ProductManagerRepository."""
    return DjangoProductManagerRepository()


@pytest.fixture
def license_type_repository():
    return DjangoLicenseTypeRepository()


@pytest.fixture
def feature_repository():
    return DjangoFeatureRepository()


@pytest.fixture
def firmware_version_repository():
    return DjangoFirmwareVersionRepository()


@pytest.fixture
def software_version_repository():
    return DjangoSoftwareVersionRepository()


@pytest.fixture
def device_repository():
    return DjangoDeviceRepository()


@pytest.fixture
def audit_log_repository():
    return DjangoAuditLogRepository()


@pytest.fixture
def audit_ledger(audit_log_repository):
    """Fixture for the AuditLedger over the Django repository."""
    return AuditLedger(audit_log_repository)


@pytest.fixture
def authorizer(product_manager_repository):
    return ProductAuthorizer(product_manager_repository)


@pytest.fixture(autouse=True)
def _super_admin(settings):
    settings.SUPER_ADMIN_ID = SUPER_ADMIN_ID


@pytest.fixture
def super_admin():
    return Actor(user_id=SUPER_ADMIN_ID, ip_address="10.0.0.1")


@pytest.fixture
def main_actor():
    return Actor(user_id=MAIN_USER_ID, ip_address="10.0.0.2")


@pytest.fixture
def full_assistant():
    return Actor(user_id=FULL_ASSISTANT_ID)


@pytest.fixture
def read_assistant():
    return Actor(user_id=READ_ASSISTANT_ID)


@pytest.fixture
def outsider():
    return Actor(user_id=OUTSIDER_ID)


@pytest.fixture
def db_product(db, main_actor, product_repository, product_manager_repository, audit_ledger):
    """
    Product saved in database.

    MAIN_USER_ID is its main manager; FULL_ASSISTANT_ID and READ_ASSISTANT_ID
    are assistants with full and read permission.
    """
    handler = AddProductHandler(
        product_repository=product_repository,
        product_manager_repository=product_manager_repository,
        audit_ledger=audit_ledger,
    )
    product = handler.handle(AddProductCommand(main_actor, "CAM", "Camera", "hardware"))
    product_manager_repository.save(
        ProductManager.create_assistant(product.id, FULL_ASSISTANT_ID, ManagerPermission.FULL)
    )
    product_manager_repository.save(
        ProductManager.create_assistant(product.id, READ_ASSISTANT_ID, ManagerPermission.READ)
    )
    return product


@pytest.fixture
def other_product(db, super_admin, product_repository, product_manager_repository, audit_ledger):
    """A second product nobody but the super-admin manages."""
    handler = AddProductHandler(
        product_repository=product_repository,
        product_manager_repository=product_manager_repository,
        audit_ledger=audit_ledger,
    )
    return handler.handle(AddProductCommand(super_admin, "NVR", "Recorder"))


@pytest.fixture
def add_feature(product_repository, feature_repository, audit_ledger, authorizer, super_admin):
    """Factory creating features as the super-admin."""
    handler = AddFeatureHandler(
        product_repository=product_repository,
        feature_repository=feature_repository,
        audit_ledger=audit_ledger,
        authorizer=authorizer,
    )

    def _add(product_id, code, name=None):
        return handler.handle(AddFeatureCommand(super_admin, product_id, name or code.title(), code))

    return _add


@pytest.fixture
def add_license_type(
    product_repository, license_type_repository, feature_repository, audit_ledger, authorizer, super_admin
):
    """Factory creating license types as the super-admin."""
    handler = AddLicenseTypeHandler(
        product_repository=product_repository,
        license_type_repository=license_type_repository,
        feature_repository=feature_repository,
        audit_ledger=audit_ledger,
        authorizer=authorizer,
    )

    def _add(product_id, code, feature_ids=(), type_name=None):
        return handler.handle(
            AddLicenseTypeCommand(
                super_admin, product_id, type_name or f"Type {code}", code, list(feature_ids)
            )
        )

    return _add


@pytest.fixture
def db_features(db_product, add_feature):
    """Features REC and AI of db_product, in id order."""
    return [add_feature(db_product.id, "REC"), add_feature(db_product.id, "AI")]


@pytest.fixture
def db_license_type(db_product, db_features, add_license_type):
    """License type STD of db_product bundling both db_features."""
    return add_license_type(db_product.id, "STD", [feature.id for feature in db_features])


@pytest.fixture
def add_device(
    product_repository, device_repository, license_type_repository, audit_ledger, authorizer, super_admin
):
    """Factory registering devices as the super-admin."""
    handler = AddDeviceHandler(
        product_repository=product_repository,
        device_repository=device_repository,
        license_type_repository=license_type_repository,
        audit_ledger=audit_ledger,
        authorizer=authorizer,
    )

    def _add(product_id, license_type_id, sn, oem_tag=""):
        return handler.handle(
            AddDeviceCommand(super_admin, product_id, sn, license_type_id, oem_tag=oem_tag)
        )

    return _add


@pytest.fixture
def db_device(db_product, db_license_type, add_device):
    return add_device(db_product.id, db_license_type.id, "SN-0001", oem_tag="acme")


@pytest.fixture(scope="session")
def rsa_private_key():
    """One signing key per test session."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def symmetric_key():
    return os.urandom(32)


@pytest.fixture
def activation_keys(settings, tmp_path, rsa_private_key, symmetric_key):
    """Point the activation key settings at fresh key material."""
    key_path = tmp_path / "private.pem"
    key_path.write_bytes(
        rsa_private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    settings.ACTIVATION_PRIVATE_KEY_PATH = str(key_path)
    settings.ACTIVATION_SYMMETRIC_KEYS = "k1:" + base64.b64encode(symmetric_key).decode("ascii")
    settings.ACTIVATION_SYMMETRIC_KEY_ID = "k1"
    get_artifact_keys.cache_clear()
    yield get_artifact_keys()
    get_artifact_keys.cache_clear()


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def as_user(api_client):
    """Authenticate the API client as a user id through the actor header."""

    def _as(user_id):
        api_client.credentials(HTTP_X_ACTOR_ID=str(user_id))
        return api_client

    return _as
