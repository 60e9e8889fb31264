"""
Integration tests for license type and feature handlers.
"""

import pytest

from audit.infrastructure.models import AuditLogEntry as AuditLogEntryModel
from core.domain.exceptions import (
    FeatureCodeExistsError,
    FeatureNotFoundError,
    InvalidInputError,
    LicenseCodeExistsError,
    LicenseTypeInUseError,
    LicenseTypeNameExistsError,
    PermissionDeniedError,
)
from core.domain.value_objects import PageRequest
from licenses.application.commands.feature_commands import (
    AddFeatureCommand,
    DeleteFeatureCommand,
    ModifyFeatureCommand,
)
from licenses.application.commands.license_type_commands import (
    AddLicenseTypeCommand,
    DeleteLicenseTypeCommand,
    UpdateLicenseTypeFeaturesCommand,
)
from licenses.application.handlers.feature_handlers import (
    AddFeatureHandler,
    DeleteFeatureHandler,
    ListFeaturesHandler,
    ModifyFeatureHandler,
)
from licenses.application.handlers.license_type_handlers import (
    AddLicenseTypeHandler,
    DeleteLicenseTypeHandler,
    ListLicenseTypesHandler,
    UpdateLicenseTypeFeaturesHandler,
)
from licenses.application.queries.list_license_types import ListFeaturesQuery, ListLicenseTypesQuery


@pytest.fixture
def license_type_kwargs(license_type_repository, feature_repository, audit_ledger, authorizer):
    return {
        "license_type_repository": license_type_repository,
        "feature_repository": feature_repository,
        "audit_ledger": audit_ledger,
        "authorizer": authorizer,
    }


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseTypes:
    """Tests for license type handlers."""

    def test_add_bundles_features(self, db_license_type, db_features):
        assert [f.feature_code for f in db_license_type.features] == ["REC", "AI"]

    def test_license_code_unique_per_product(
        self, db_product, other_product, add_license_type
    ):
        add_license_type(db_product.id, "STD", type_name="Standard")
        with pytest.raises(LicenseCodeExistsError):
            add_license_type(db_product.id, "STD", type_name="Standard Plus")
        other = add_license_type(other_product.id, "STD", type_name="Standard Plus")
        assert other.product_id == other_product.id

    def test_type_name_unique_per_product(
        self, db_product, other_product, add_license_type
    ):
        add_license_type(db_product.id, "STD", type_name="Standard")
        with pytest.raises(LicenseTypeNameExistsError):
            add_license_type(db_product.id, "STD2", type_name="Standard")
        other = add_license_type(other_product.id, "STD2", type_name="Standard")
        assert other.product_id == other_product.id

    def test_feature_of_other_product_rejected(
        self, db_product, other_product, add_feature, add_license_type, license_type_repository
    ):
        foreign = add_feature(other_product.id, "REC")
        with pytest.raises(InvalidInputError):
            add_license_type(db_product.id, "STD", [foreign.id])
        assert license_type_repository.list_for_product(db_product.id, PageRequest())[0] == 0

    def test_unknown_feature_rejected(self, db_product, add_license_type):
        with pytest.raises(FeatureNotFoundError):
            add_license_type(db_product.id, "STD", [424242])

    def test_update_features_replaces_set(
        self,
        db_product,
        add_feature,
        add_license_type,
        license_type_kwargs,
        license_type_repository,
        main_actor,
    ):
        a, b, c = (add_feature(db_product.id, code) for code in ("A", "B", "C"))
        license_type = add_license_type(db_product.id, "STD", [a.id, b.id])

        handler = UpdateLicenseTypeFeaturesHandler(**license_type_kwargs)
        result = handler.handle(
            UpdateLicenseTypeFeaturesCommand(main_actor, license_type.id, [b.id, c.id])
        )

        assert set(license_type_repository.feature_ids(license_type.id)) == {b.id, c.id}
        assert {f.feature_code for f in result.features} == {"B", "C"}

    def test_update_features_to_empty(
        self, db_license_type, license_type_kwargs, license_type_repository, main_actor
    ):
        handler = UpdateLicenseTypeFeaturesHandler(**license_type_kwargs)
        handler.handle(UpdateLicenseTypeFeaturesCommand(main_actor, db_license_type.id, []))
        assert license_type_repository.feature_ids(db_license_type.id) == []

    def test_read_assistant_cannot_add(
        self, db_product, product_repository, license_type_kwargs, read_assistant
    ):
        handler = AddLicenseTypeHandler(product_repository=product_repository, **license_type_kwargs)
        with pytest.raises(PermissionDeniedError):
            handler.handle(AddLicenseTypeCommand(read_assistant, db_product.id, "Basic", "BASIC"))

    def test_full_assistant_can_add(
        self, db_product, product_repository, license_type_kwargs, full_assistant
    ):
        handler = AddLicenseTypeHandler(product_repository=product_repository, **license_type_kwargs)
        result = handler.handle(
            AddLicenseTypeCommand(full_assistant, db_product.id, "Basic", "BASIC")
        )
        assert result.license_code == "BASIC"

    def test_delete_in_use(self, db_device, db_license_type, license_type_kwargs, main_actor):
        handler = DeleteLicenseTypeHandler(**license_type_kwargs)
        with pytest.raises(LicenseTypeInUseError):
            handler.handle(DeleteLicenseTypeCommand(main_actor, db_license_type.id))

    def test_delete_clears_associations(
        self, db_license_type, license_type_kwargs, license_type_repository, main_actor
    ):
        handler = DeleteLicenseTypeHandler(**license_type_kwargs)
        handler.handle(DeleteLicenseTypeCommand(main_actor, db_license_type.id))

        assert license_type_repository.find_by_id(db_license_type.id) is None
        entry = AuditLogEntryModel.objects.latest("id")
        assert (entry.module, entry.action) == ("license_type", "delete")

    def test_list_includes_features(
        self, db_product, db_license_type, license_type_kwargs, read_assistant
    ):
        page = ListLicenseTypesHandler(**license_type_kwargs).handle(
            ListLicenseTypesQuery(read_assistant, db_product.id)
        )
        assert page.total == 1
        assert len(page.items[0].features) == 2

    def test_list_denied_to_outsider(self, db_product, license_type_kwargs, outsider):
        with pytest.raises(PermissionDeniedError):
            ListLicenseTypesHandler(**license_type_kwargs).handle(
                ListLicenseTypesQuery(outsider, db_product.id)
            )


@pytest.mark.django_db
@pytest.mark.integration
class TestFeatures:
    """Tests for feature handlers."""

    @pytest.fixture
    def feature_kwargs(self, feature_repository, audit_ledger, authorizer):
        return {
            "feature_repository": feature_repository,
            "audit_ledger": audit_ledger,
            "authorizer": authorizer,
        }

    def test_add_writes_one_audit_record(
        self, db_product, product_repository, feature_kwargs, main_actor
    ):
        before = AuditLogEntryModel.objects.count()
        AddFeatureHandler(product_repository=product_repository, **feature_kwargs).handle(
            AddFeatureCommand(main_actor, db_product.id, "Recording", "REC")
        )
        assert AuditLogEntryModel.objects.count() == before + 1

    def test_code_unique_per_product(self, db_product, other_product, add_feature):
        add_feature(db_product.id, "REC", "Recording")
        with pytest.raises(FeatureCodeExistsError):
            add_feature(db_product.id, "REC", "Recording 2")
        assert add_feature(other_product.id, "REC", "Recording").product_id == other_product.id

    def test_rename(self, db_features, feature_kwargs, main_actor):
        feature = ModifyFeatureHandler(**feature_kwargs).handle(
            ModifyFeatureCommand(main_actor, db_features[0].id, "Recording")
        )
        assert (feature.feature_name, feature.feature_code) == ("Recording", "REC")

    def test_delete_detaches_from_license_types(
        self, db_features, db_license_type, feature_kwargs, license_type_repository, main_actor
    ):
        DeleteFeatureHandler(**feature_kwargs).handle(
            DeleteFeatureCommand(main_actor, db_features[0].id)
        )
        assert license_type_repository.feature_ids(db_license_type.id) == [db_features[1].id]

    def test_list(self, db_product, db_features, feature_repository, authorizer, read_assistant):
        page = ListFeaturesHandler(feature_repository=feature_repository, authorizer=authorizer).handle(
            ListFeaturesQuery(read_assistant, db_product.id)
        )
        assert page.total == 2
