"""
Django management command to create test data for development and testing.

Creates:
- A superuser (admin/admin)
- A test product with two features and a license type bundling both
- Optionally, a few test devices

Everything except the superuser goes through the regular handlers, so the
audit ledger records it like any other change.
"""

import logging

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from audit.application.services.audit_ledger import AuditLedger
from audit.infrastructure.repositories.django_audit_log_repository import DjangoAuditLogRepository
from core.domain.value_objects import Actor, super_admin_id
from devices.application.commands.device_commands import BatchAddDevicesCommand
from devices.application.handlers.device_handlers import BatchAddDevicesHandler
from devices.infrastructure.repositories.django_device_repository import DjangoDeviceRepository
from licenses.application.commands.feature_commands import AddFeatureCommand
from licenses.application.commands.license_type_commands import AddLicenseTypeCommand
from licenses.application.handlers.feature_handlers import AddFeatureHandler
from licenses.application.handlers.license_type_handlers import AddLicenseTypeHandler
from licenses.infrastructure.repositories.django_feature_repository import DjangoFeatureRepository
from licenses.infrastructure.repositories.django_license_type_repository import (  # noqa: E501
    DjangoLicenseTypeRepository,
)
from products.application.commands.product_commands import AddProductCommand
from products.application.handlers.product_handlers import AddProductHandler
from products.domain.services import ProductAuthorizer
from products.infrastructure.models import Product as ProductModel
from products.infrastructure.repositories.django_product_manager_repository import (  # noqa: E501
    DjangoProductManagerRepository,
)
from products.infrastructure.repositories.django_product_repository import DjangoProductRepository

logger = logging.getLogger(__name__)
User = get_user_model()


class Command(BaseCommand):
    """Command to create test data."""

    help = "Create test data (superuser, product, features, license type, devices)"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--skip-superuser",
            action="store_true",
            help="Skip creating superuser",
        )
        parser.add_argument(
            "--product-code",
            type=str,
            default="DEMO",
            help="Product code (default: DEMO)",
        )
        parser.add_argument(
            "--product-name",
            type=str,
            default="Demo Product",
            help="Product name (default: Demo Product)",
        )
        parser.add_argument(
            "--devices",
            type=int,
            default=3,
            help="Number of test devices to register (default: 3)",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        if not options["skip_superuser"]:
            self.create_superuser()

        # pylint: disable=no-member
        if ProductModel.objects.filter(code=options["product_code"]).exists():
            self.stdout.write(
                self.style.WARNING(f"Product '{options['product_code']}' already exists")
            )
            return

        actor = Actor(user_id=super_admin_id(), ip_address="127.0.0.1")
        product_repository = DjangoProductRepository()
        product_manager_repository = DjangoProductManagerRepository()
        feature_repository = DjangoFeatureRepository()
        license_type_repository = DjangoLicenseTypeRepository()
        audit_ledger = AuditLedger(DjangoAuditLogRepository())
        authorizer = ProductAuthorizer(product_manager_repository)

        product = AddProductHandler(
            product_repository, product_manager_repository, audit_ledger
        ).handle(AddProductCommand(actor, options["product_code"], options["product_name"]))
        self.stdout.write(self.style.SUCCESS(f"Created product: {product.code} (id {product.id})"))

        add_feature = AddFeatureHandler(
            product_repository, feature_repository, audit_ledger, authorizer
        )
        features = [
            add_feature.handle(AddFeatureCommand(actor, product.id, name, code))
            for name, code in (("Recording", "REC"), ("Remote Access", "REMOTE"))
        ]
        self.stdout.write(
            self.style.SUCCESS(
                "Created features: " + ", ".join(feature.feature_code for feature in features)
            )
        )

        license_type = AddLicenseTypeHandler(
            product_repository=product_repository,
            license_type_repository=license_type_repository,
            feature_repository=feature_repository,
            audit_ledger=audit_ledger,
            authorizer=authorizer,
        ).handle(
            AddLicenseTypeCommand(
                actor,
                product.id,
                "Standard",
                "STD",
                feature_ids=[feature.id for feature in features],
            )
        )
        self.stdout.write(self.style.SUCCESS(f"Created license type: {license_type.license_code}"))

        if options["devices"] > 0:
            sns = [f"{product.code}-{index:04d}" for index in range(1, options["devices"] + 1)]
            result = BatchAddDevicesHandler(
                product_repository=product_repository,
                device_repository=DjangoDeviceRepository(),
                license_type_repository=license_type_repository,
                audit_ledger=audit_ledger,
                authorizer=authorizer,
            ).handle(BatchAddDevicesCommand(actor, product.id, license_type.id, sns=sns))
            self.stdout.write(self.style.SUCCESS(f"Registered {result.count} devices: {sns[0]}..."))

    def create_superuser(self):
        """Create a superuser if it doesn't exist."""
        username = "admin"
        email = "admin@example.com"
        password = "admin"

        if User.objects.filter(username=username).exists():
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING(f"Superuser '{username}' already exists"))
            return

        user = User.objects.create_superuser(username=username, email=email, password=password)
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"Created superuser: {username} / {password}"))
        if user.pk != super_admin_id():
            self.stdout.write(
                self.style.WARNING(
                    f"Superuser id {user.pk} differs from SUPER_ADMIN_ID {super_admin_id()}"
                )
            )
