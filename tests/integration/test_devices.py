"""
Integration tests for device handlers and activation file issue.
"""

import base64
import json

import pytest
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from django.db import DatabaseError

from audit.infrastructure.models import AuditLogEntry as AuditLogEntryModel
from audit.infrastructure.repositories.django_audit_log_repository import DjangoAuditLogRepository
from core.domain.exceptions import (
    AuditFailureError,
    DeviceNotFoundError,
    DeviceSNExistsError,
    InvalidInputError,
    LicenseTypeNotFoundError,
    PermissionDeniedError,
)
from devices.application.commands.device_commands import (
    AddDeviceCommand,
    BatchAddDevicesCommand,
    BatchUpdateLicenseTypeCommand,
    DeleteDeviceCommand,
    UpdateDeviceCommand,
)
from devices.application.handlers.device_handlers import (
    AddDeviceHandler,
    BatchAddDevicesHandler,
    BatchUpdateLicenseTypeHandler,
    DeleteDeviceHandler,
    UpdateDeviceHandler,
)
from devices.application.handlers.device_query_handlers import (
    GetDeviceBySNHandler,
    ListDeviceProductsHandler,
    ListDevicesHandler,
)
from devices.application.handlers.issue_artifact_handler import IssueActivationArtifactHandler
from devices.application.queries.device_queries import (
    GetDeviceBySNQuery,
    IssueActivationArtifactQuery,
    ListDeviceProductsQuery,
    ListDevicesQuery,
)
from devices.application.services.artifact_pipeline import ArtifactPipeline
from devices.domain.artifact import canonical_json
from devices.infrastructure.crypto import NONCE_SIZE
from devices.infrastructure.models import Device as DeviceModel


@pytest.fixture
def device_kwargs(device_repository, license_type_repository, audit_ledger, authorizer):
    return {
        "device_repository": device_repository,
        "license_type_repository": license_type_repository,
        "audit_ledger": audit_ledger,
        "authorizer": authorizer,
    }


@pytest.fixture
def query_kwargs(device_repository, product_repository, license_type_repository, authorizer):
    return {
        "device_repository": device_repository,
        "product_repository": product_repository,
        "license_type_repository": license_type_repository,
        "authorizer": authorizer,
    }


@pytest.fixture
def batch_add(product_repository, device_kwargs):
    return BatchAddDevicesHandler(product_repository=product_repository, **device_kwargs)


@pytest.mark.django_db
@pytest.mark.integration
class TestAddDevice:
    """Tests for AddDeviceHandler."""

    def test_add_writes_one_audit_record(
        self, db_product, db_license_type, product_repository, device_kwargs, full_assistant
    ):
        before = AuditLogEntryModel.objects.count()
        handler = AddDeviceHandler(product_repository=product_repository, **device_kwargs)

        device = handler.handle(
            AddDeviceCommand(full_assistant, db_product.id, " SN-9 ", db_license_type.id)
        )

        assert device.sn == "SN-9"
        assert device.license_code == "STD"
        assert AuditLogEntryModel.objects.count() == before + 1
        entry = AuditLogEntryModel.objects.latest("id")
        assert (entry.module, entry.action, entry.product_id) == ("device", "create", db_product.id)

    def test_sn_unique_across_products(
        self, db_device, other_product, add_license_type, add_device
    ):
        other_type = add_license_type(other_product.id, "STD")
        with pytest.raises(DeviceSNExistsError):
            add_device(other_product.id, other_type.id, db_device.sn)

    def test_license_type_of_other_product(
        self, db_product, other_product, add_license_type, add_device
    ):
        foreign = add_license_type(other_product.id, "PRO")
        with pytest.raises(LicenseTypeNotFoundError):
            add_device(db_product.id, foreign.id, "SN-X")

    def test_read_assistant_denied(
        self, db_product, db_license_type, product_repository, device_kwargs, read_assistant
    ):
        handler = AddDeviceHandler(product_repository=product_repository, **device_kwargs)
        with pytest.raises(PermissionDeniedError):
            handler.handle(AddDeviceCommand(read_assistant, db_product.id, "SN-X", db_license_type.id))

    def test_audit_failure_discards_device(
        self, monkeypatch, db_product, db_license_type, product_repository, device_kwargs, main_actor
    ):
        def failing_append(self, entry):
            raise DatabaseError("audit table unavailable")

        monkeypatch.setattr(DjangoAuditLogRepository, "append", failing_append)
        before = AuditLogEntryModel.objects.count()
        handler = AddDeviceHandler(product_repository=product_repository, **device_kwargs)

        with pytest.raises(AuditFailureError):
            handler.handle(AddDeviceCommand(main_actor, db_product.id, "SN-LOST", db_license_type.id))

        assert not DeviceModel.objects.filter(sn="SN-LOST").exists()
        assert AuditLogEntryModel.objects.count() == before


@pytest.mark.django_db
@pytest.mark.integration
class TestBatchAddDevices:
    """Tests for BatchAddDevicesHandler."""

    def test_batch_is_one_audit_record(self, batch_add, db_product, db_license_type, main_actor):
        before = AuditLogEntryModel.objects.count()

        result = batch_add.handle(
            BatchAddDevicesCommand(
                main_actor, db_product.id, db_license_type.id, ["A", " B ", "", "A", "C"]
            )
        )

        assert result.count == 3
        assert set(DeviceModel.objects.values_list("sn", flat=True)) == {"A", "B", "C"}
        assert AuditLogEntryModel.objects.count() == before + 1
        entry = AuditLogEntryModel.objects.latest("id")
        assert entry.action == "batch_create"
        document = json.loads(entry.details)
        assert document["count"] == 3
        assert [item["sn"] for item in document["devices"]] == ["A", "B", "C"]

    def test_one_existing_sn_aborts_whole_batch(
        self, batch_add, db_device, db_product, db_license_type, main_actor
    ):
        devices_before = DeviceModel.objects.count()
        audits_before = AuditLogEntryModel.objects.count()
        sns = [f"NEW-{i:03d}" for i in range(49)] + [db_device.sn]

        with pytest.raises(DeviceSNExistsError):
            batch_add.handle(BatchAddDevicesCommand(main_actor, db_product.id, db_license_type.id, sns))

        assert DeviceModel.objects.count() == devices_before
        assert AuditLogEntryModel.objects.count() == audits_before

    def test_empty_batch(self, batch_add, db_product, db_license_type, main_actor):
        with pytest.raises(InvalidInputError):
            batch_add.handle(
                BatchAddDevicesCommand(main_actor, db_product.id, db_license_type.id, ["", "  "])
            )


@pytest.mark.django_db
@pytest.mark.integration
class TestUpdateAndDeleteDevice:
    """Tests for UpdateDeviceHandler and DeleteDeviceHandler."""

    def test_update_license_type(
        self, db_device, db_product, add_license_type, device_kwargs, full_assistant
    ):
        pro = add_license_type(db_product.id, "PRO")
        device = UpdateDeviceHandler(**device_kwargs).handle(
            UpdateDeviceCommand(full_assistant, db_device.id, pro.id, "oem-2", "moved")
        )
        assert (device.license_type_id, device.oem_tag, device.remark) == (pro.id, "oem-2", "moved")
        entry = AuditLogEntryModel.objects.latest("id")
        assert '"old_device"' in entry.details and '"new_device"' in entry.details

    def test_overlong_remark_rejected(self, db_device, db_license_type, device_kwargs, main_actor):
        with pytest.raises(InvalidInputError):
            UpdateDeviceHandler(**device_kwargs).handle(
                UpdateDeviceCommand(main_actor, db_device.id, db_license_type.id, "acme", "x" * 256)
            )
        assert DeviceModel.objects.get(id=db_device.id).remark == ""

    def test_delete_requires_main(self, db_device, device_kwargs, full_assistant, main_actor):
        handler = DeleteDeviceHandler(**device_kwargs)
        with pytest.raises(PermissionDeniedError):
            handler.handle(DeleteDeviceCommand(full_assistant, db_device.id))

        handler.handle(DeleteDeviceCommand(main_actor, db_device.id))
        assert not DeviceModel.objects.filter(id=db_device.id).exists()

    def test_delete_unknown(self, db_product, device_kwargs, main_actor):
        with pytest.raises(DeviceNotFoundError):
            DeleteDeviceHandler(**device_kwargs).handle(DeleteDeviceCommand(main_actor, 424242))


@pytest.mark.django_db
@pytest.mark.integration
class TestBatchUpdateLicenseType:
    """Tests for BatchUpdateLicenseTypeHandler."""

    def test_one_audit_record_per_device(
        self, db_product, db_license_type, add_license_type, add_device, device_kwargs, main_actor
    ):
        devices = [add_device(db_product.id, db_license_type.id, f"SN-{i}") for i in range(3)]
        pro = add_license_type(db_product.id, "PRO")
        before = AuditLogEntryModel.objects.count()

        result = BatchUpdateLicenseTypeHandler(**device_kwargs).handle(
            BatchUpdateLicenseTypeCommand(main_actor, pro.id, [d.id for d in devices])
        )

        assert result.count == 3
        assert set(DeviceModel.objects.values_list("license_type_id", flat=True)) == {pro.id}
        assert AuditLogEntryModel.objects.count() == before + 3
        assert AuditLogEntryModel.objects.filter(action="batch_update_license").count() == 3

    def test_license_type_missing_in_one_product_changes_nothing(
        self,
        db_device,
        db_license_type,
        other_product,
        add_license_type,
        add_device,
        device_kwargs,
        super_admin,
    ):
        other_type = add_license_type(other_product.id, "STD")
        other_device = add_device(other_product.id, other_type.id, "SN-OTHER")
        before = AuditLogEntryModel.objects.count()

        with pytest.raises(LicenseTypeNotFoundError):
            BatchUpdateLicenseTypeHandler(**device_kwargs).handle(
                BatchUpdateLicenseTypeCommand(
                    super_admin, db_license_type.id, [db_device.id, other_device.id]
                )
            )

        assert DeviceModel.objects.get(id=other_device.id).license_type_id == other_type.id
        assert AuditLogEntryModel.objects.count() == before

    def test_unmanaged_product_denied(
        self,
        db_device,
        db_license_type,
        other_product,
        add_license_type,
        add_device,
        device_kwargs,
        main_actor,
    ):
        other_type = add_license_type(other_product.id, "STD")
        other_device = add_device(other_product.id, other_type.id, "SN-OTHER")

        with pytest.raises(PermissionDeniedError):
            BatchUpdateLicenseTypeHandler(**device_kwargs).handle(
                BatchUpdateLicenseTypeCommand(
                    main_actor, db_license_type.id, [db_device.id, other_device.id]
                )
            )

    def test_overlong_remark_rejected(
        self, db_device, db_product, add_license_type, device_kwargs, main_actor
    ):
        pro = add_license_type(db_product.id, "PRO")
        before = AuditLogEntryModel.objects.count()

        with pytest.raises(InvalidInputError):
            BatchUpdateLicenseTypeHandler(**device_kwargs).handle(
                BatchUpdateLicenseTypeCommand(main_actor, pro.id, [db_device.id], remark="x" * 256)
            )

        assert DeviceModel.objects.get(id=db_device.id).license_type_id == db_device.license_type_id
        assert AuditLogEntryModel.objects.count() == before

    def test_audit_failure_on_second_device_rolls_back_all(
        self,
        monkeypatch,
        db_product,
        db_license_type,
        add_license_type,
        add_device,
        device_kwargs,
        main_actor,
    ):
        devices = [add_device(db_product.id, db_license_type.id, f"SN-{i}") for i in range(2)]
        pro = add_license_type(db_product.id, "PRO")
        before = AuditLogEntryModel.objects.count()
        real_append = DjangoAuditLogRepository.append
        calls = []

        def append_then_fail(self, entry):
            calls.append(entry)
            if len(calls) == 2:
                raise DatabaseError("audit table unavailable")
            return real_append(self, entry)

        monkeypatch.setattr(DjangoAuditLogRepository, "append", append_then_fail)

        with pytest.raises(AuditFailureError):
            BatchUpdateLicenseTypeHandler(**device_kwargs).handle(
                BatchUpdateLicenseTypeCommand(main_actor, pro.id, [d.id for d in devices])
            )

        assert len(calls) == 2
        stored = DeviceModel.objects.filter(id__in=[d.id for d in devices])
        assert set(stored.values_list("license_type_id", flat=True)) == {db_license_type.id}
        assert AuditLogEntryModel.objects.count() == before

    def test_unknown_device(self, db_device, db_license_type, device_kwargs, main_actor):
        with pytest.raises(DeviceNotFoundError):
            BatchUpdateLicenseTypeHandler(**device_kwargs).handle(
                BatchUpdateLicenseTypeCommand(main_actor, db_license_type.id, [db_device.id, 424242])
            )


@pytest.mark.django_db
@pytest.mark.integration
class TestDeviceQueries:
    """Tests for device listings."""

    def test_list_scoped_to_readable_products(
        self,
        db_device,
        other_product,
        add_license_type,
        add_device,
        query_kwargs,
        read_assistant,
        super_admin,
    ):
        other_type = add_license_type(other_product.id, "STD")
        add_device(other_product.id, other_type.id, "SN-OTHER")
        handler = ListDevicesHandler(**query_kwargs)

        assert [d.sn for d in handler.handle(ListDevicesQuery(read_assistant)).items] == [db_device.sn]
        assert handler.handle(ListDevicesQuery(super_admin)).total == 2

    def test_list_filters(self, db_device, db_product, query_kwargs, main_actor):
        handler = ListDevicesHandler(**query_kwargs)
        assert handler.handle(ListDevicesQuery(main_actor, sn="0001")).total == 1
        assert handler.handle(ListDevicesQuery(main_actor, oem_tag="ACM")).total == 1
        assert handler.handle(ListDevicesQuery(main_actor, oem_tag="zzz")).total == 0
        page = handler.handle(ListDevicesQuery(main_actor, product_id=db_product.id))
        assert page.items[0].product_name == "Camera"

    def test_list_other_product_denied(self, db_device, other_product, query_kwargs, main_actor):
        with pytest.raises(PermissionDeniedError):
            ListDevicesHandler(**query_kwargs).handle(
                ListDevicesQuery(main_actor, product_id=other_product.id)
            )

    def test_get_by_sn(self, db_device, query_kwargs, read_assistant, outsider):
        handler = GetDeviceBySNHandler(**query_kwargs)
        assert handler.handle(GetDeviceBySNQuery(read_assistant, db_device.sn)).id == db_device.id
        with pytest.raises(PermissionDeniedError):
            handler.handle(GetDeviceBySNQuery(outsider, db_device.sn))

    def test_device_counts_per_product(
        self, db_device, other_product, product_repository, device_repository, authorizer, super_admin
    ):
        handler = ListDeviceProductsHandler(
            product_repository=product_repository,
            device_repository=device_repository,
            authorizer=authorizer,
        )
        page = handler.handle(ListDeviceProductsQuery(super_admin))
        counts = {item.product_id: item.count for item in page.items}
        assert counts == {db_device.product_id: 1, other_product.id: 0}


@pytest.mark.django_db
@pytest.mark.integration
class TestIssueActivationArtifact:
    """Tests for IssueActivationArtifactHandler."""

    @pytest.fixture
    def handler(self, activation_keys, device_repository, license_type_repository, authorizer):
        return IssueActivationArtifactHandler(
            device_repository=device_repository,
            license_type_repository=license_type_repository,
            authorizer=authorizer,
            pipeline=ArtifactPipeline(activation_keys),
        )

    def test_file_carries_current_entitlements(
        self, handler, db_device, db_license_type, read_assistant, rsa_private_key, symmetric_key
    ):
        artifact = handler.handle(IssueActivationArtifactQuery(read_assistant, db_device.sn))

        assert artifact.filename == "SN-0001.lic"
        assert artifact.content_type == "application/octet-stream"
        plaintext = AESGCM(symmetric_key).decrypt(
            artifact.content[:NONCE_SIZE], artifact.content[NONCE_SIZE:], None
        )
        envelope = json.loads(plaintext)
        data = envelope["data"]
        assert list(data) == [
            "sn",
            "product_id",
            "license_type",
            "oem_tag",
            "created_at",
            "feature_codes",
        ]
        assert data["sn"] == "SN-0001"
        assert data["license_type"] == db_license_type.id
        assert data["oem_tag"] == "acme"
        assert data["feature_codes"] == ["REC", "AI"]
        rsa_private_key.public_key().verify(
            base64.b64decode(envelope["signature"]),
            canonical_json(data),
            padding.PKCS1v15(),
            hashes.SHA256(),
        )

    def test_issue_writes_no_audit_record(self, handler, db_device, main_actor):
        before = AuditLogEntryModel.objects.count()
        handler.handle(IssueActivationArtifactQuery(main_actor, db_device.sn))
        assert AuditLogEntryModel.objects.count() == before

    def test_unknown_sn(self, handler, db_product, main_actor):
        with pytest.raises(DeviceNotFoundError):
            handler.handle(IssueActivationArtifactQuery(main_actor, "NOPE"))

    def test_outsider_denied(self, handler, db_device, outsider):
        with pytest.raises(PermissionDeniedError):
            handler.handle(IssueActivationArtifactQuery(outsider, db_device.sn))
