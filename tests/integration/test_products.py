"""
Integration tests for product and manager handlers.
"""

import pytest
from django.contrib.auth import get_user_model
from django.db import DatabaseError

from audit.infrastructure.models import AuditLogEntry as AuditLogEntryModel
from audit.infrastructure.repositories.django_audit_log_repository import DjangoAuditLogRepository
from core.domain.exceptions import (
    AuditFailureError,
    InvalidInputError,
    ManagerAlreadyExistsError,
    ManagerNotFoundError,
    PermissionDeniedError,
    ProductCodeExistsError,
    ProductNameExistsError,
    RelationsExistError,
    UserNotFoundError,
)
from core.domain.value_objects import ManagerPermission, ManagerRole
from products.application.commands.manager_commands import AddManagerCommand, RemoveManagerCommand
from products.application.commands.product_commands import (
    AddProductCommand,
    DeleteProductCommand,
    ManagerUpdate,
    ModifyProductCommand,
)
from products.application.handlers.list_products_handler import ListProductsHandler
from products.application.handlers.manager_handlers import AddManagerHandler, RemoveManagerHandler
from products.application.handlers.product_handlers import (
    AddProductHandler,
    DeleteProductHandler,
    ModifyProductHandler,
)
from products.application.queries.list_products import ListProductsQuery
from products.infrastructure.repositories.django_user_directory import DjangoUserDirectory


@pytest.fixture
def add_handler(product_repository, product_manager_repository, audit_ledger):
    return AddProductHandler(
        product_repository=product_repository,
        product_manager_repository=product_manager_repository,
        audit_ledger=audit_ledger,
    )


@pytest.fixture
def modify_handler(product_repository, product_manager_repository, audit_ledger, authorizer):
    return ModifyProductHandler(
        product_repository=product_repository,
        product_manager_repository=product_manager_repository,
        audit_ledger=audit_ledger,
        authorizer=authorizer,
    )


@pytest.fixture
def delete_handler(product_repository, product_manager_repository, audit_ledger, authorizer):
    return DeleteProductHandler(
        product_repository=product_repository,
        product_manager_repository=product_manager_repository,
        audit_ledger=audit_ledger,
        authorizer=authorizer,
    )


@pytest.mark.django_db
@pytest.mark.integration
class TestAddProduct:
    """Tests for AddProductHandler."""

    def test_creator_becomes_main_manager(self, add_handler, main_actor):
        product = add_handler.handle(AddProductCommand(main_actor, "CAM", "Camera"))

        assert [(m.user_id, m.role) for m in product.managers] == [(main_actor.user_id, "main")]
        entry = AuditLogEntryModel.objects.get()
        assert (entry.module, entry.action, entry.product_id) == ("product", "create", product.id)
        assert entry.operator_id == main_actor.user_id
        assert entry.ip_address == main_actor.ip_address

    def test_code_conflict(self, add_handler, main_actor):
        add_handler.handle(AddProductCommand(main_actor, "CAM", "Camera"))
        with pytest.raises(ProductCodeExistsError):
            add_handler.handle(AddProductCommand(main_actor, "CAM", "Other"))
        assert AuditLogEntryModel.objects.count() == 1

    def test_name_conflict(self, add_handler, main_actor):
        add_handler.handle(AddProductCommand(main_actor, "CAM", "Camera"))
        with pytest.raises(ProductNameExistsError):
            add_handler.handle(AddProductCommand(main_actor, "CAM2", "Camera"))

    def test_blank_code(self, add_handler, main_actor):
        with pytest.raises(InvalidInputError):
            add_handler.handle(AddProductCommand(main_actor, "  ", "Camera"))


@pytest.mark.django_db
@pytest.mark.integration
class TestModifyProduct:
    """Tests for ModifyProductHandler."""

    def test_main_transfer_leaves_single_main(
        self, modify_handler, db_product, main_actor, full_assistant, product_manager_repository
    ):
        modify_handler.handle(
            ModifyProductCommand(main_actor, db_product.id, main_user_id=full_assistant.user_id)
        )

        managers = product_manager_repository.list_for_product(db_product.id)
        mains = [m for m in managers if m.role is ManagerRole.MAIN]
        assert [m.user_id for m in mains] == [full_assistant.user_id]
        former = product_manager_repository.find(db_product.id, main_actor.user_id)
        assert former.role is ManagerRole.ASSISTANT
        assert former.permission is ManagerPermission.READ

    def test_transfer_writes_one_audit_record(
        self, modify_handler, db_product, main_actor, full_assistant
    ):
        before = AuditLogEntryModel.objects.count()
        modify_handler.handle(
            ModifyProductCommand(
                main_actor, db_product.id, name="Camera Pro", main_user_id=full_assistant.user_id
            )
        )
        assert AuditLogEntryModel.objects.count() == before + 1
        entry = AuditLogEntryModel.objects.latest("id")
        assert entry.action == "update"
        assert '"old_product"' in entry.details and '"new_managers"' in entry.details

    def test_audit_failure_keeps_main_manager(
        self,
        monkeypatch,
        modify_handler,
        db_product,
        main_actor,
        full_assistant,
        product_repository,
        product_manager_repository,
    ):
        def failing_append(self, entry):
            raise DatabaseError("audit table unavailable")

        monkeypatch.setattr(DjangoAuditLogRepository, "append", failing_append)
        before = AuditLogEntryModel.objects.count()

        with pytest.raises(AuditFailureError):
            modify_handler.handle(
                ModifyProductCommand(
                    main_actor, db_product.id, name="Camera Pro", main_user_id=full_assistant.user_id
                )
            )

        assert product_repository.find_by_id(db_product.id).name == "Camera"
        main = product_manager_repository.find(db_product.id, main_actor.user_id)
        assert main.role is ManagerRole.MAIN
        assistant = product_manager_repository.find(db_product.id, full_assistant.user_id)
        assert (assistant.role, assistant.permission) == (ManagerRole.ASSISTANT, ManagerPermission.FULL)
        assert AuditLogEntryModel.objects.count() == before

    def test_transfer_to_non_manager(
        self, modify_handler, db_product, main_actor, product_manager_repository
    ):
        with pytest.raises(ManagerNotFoundError):
            modify_handler.handle(ModifyProductCommand(main_actor, db_product.id, main_user_id=9999))
        main = product_manager_repository.find(db_product.id, main_actor.user_id)
        assert main.role is ManagerRole.MAIN

    def test_assistant_permission_update(
        self, modify_handler, db_product, main_actor, read_assistant, product_manager_repository
    ):
        modify_handler.handle(
            ModifyProductCommand(
                main_actor,
                db_product.id,
                managers=[ManagerUpdate(read_assistant.user_id, ManagerPermission.FULL, "promoted")],
            )
        )
        manager = product_manager_repository.find(db_product.id, read_assistant.user_id)
        assert manager.permission is ManagerPermission.FULL
        assert manager.remark == "promoted"

    def test_full_assistant_cannot_administer(self, modify_handler, db_product, full_assistant):
        with pytest.raises(PermissionDeniedError):
            modify_handler.handle(ModifyProductCommand(full_assistant, db_product.id, name="X"))

    def test_super_admin_can_administer(self, modify_handler, db_product, super_admin):
        product = modify_handler.handle(ModifyProductCommand(super_admin, db_product.id, name="X"))
        assert product.name == "X"


@pytest.mark.django_db
@pytest.mark.integration
class TestDeleteProduct:
    """Tests for DeleteProductHandler."""

    def test_delete_without_dependents(
        self, delete_handler, db_product, main_actor, product_repository, product_manager_repository
    ):
        delete_handler.handle(DeleteProductCommand(main_actor, db_product.id))

        assert product_repository.find_by_id(db_product.id) is None
        assert product_manager_repository.list_for_product(db_product.id) == []
        entry = AuditLogEntryModel.objects.latest("id")
        assert (entry.action, entry.product_id) == ("delete", None)

    def test_delete_blocked_by_features(self, delete_handler, db_product, main_actor, add_feature):
        add_feature(db_product.id, "REC")
        with pytest.raises(RelationsExistError):
            delete_handler.handle(DeleteProductCommand(main_actor, db_product.id))


@pytest.mark.django_db
@pytest.mark.integration
class TestManagers:
    """Tests for AddManagerHandler and RemoveManagerHandler."""

    @pytest.fixture
    def add_manager(self, product_repository, product_manager_repository, audit_ledger, authorizer):
        return AddManagerHandler(
            product_repository=product_repository,
            product_manager_repository=product_manager_repository,
            user_directory=DjangoUserDirectory(),
            audit_ledger=audit_ledger,
            authorizer=authorizer,
        )

    @pytest.fixture
    def remove_manager(self, product_manager_repository, audit_ledger, authorizer):
        return RemoveManagerHandler(
            product_manager_repository=product_manager_repository,
            audit_ledger=audit_ledger,
            authorizer=authorizer,
        )

    def test_add_by_email_defaults_to_read(self, add_manager, db_product, main_actor):
        user = get_user_model().objects.create_user("ops", email="ops@example.com", password="x")

        manager = add_manager.handle(AddManagerCommand(main_actor, db_product.id, "OPS@example.com"))

        assert manager.user_id == user.pk
        assert (manager.role, manager.permission) == ("assistant", "read")

    def test_add_existing_manager(self, add_manager, db_product, main_actor):
        get_user_model().objects.create_user("ops", email="ops@example.com", password="x")
        add_manager.handle(AddManagerCommand(main_actor, db_product.id, "ops@example.com"))
        with pytest.raises(ManagerAlreadyExistsError):
            add_manager.handle(AddManagerCommand(main_actor, db_product.id, "ops@example.com"))

    def test_add_unknown_email(self, add_manager, db_product, main_actor):
        with pytest.raises(UserNotFoundError):
            add_manager.handle(AddManagerCommand(main_actor, db_product.id, "nobody@example.com"))

    def test_main_cannot_be_removed(self, remove_manager, db_product, super_admin, main_actor):
        with pytest.raises(InvalidInputError):
            remove_manager.handle(RemoveManagerCommand(super_admin, db_product.id, main_actor.user_id))

    def test_remove_assistant(
        self, remove_manager, db_product, main_actor, read_assistant, product_manager_repository
    ):
        remove_manager.handle(RemoveManagerCommand(main_actor, db_product.id, read_assistant.user_id))
        assert product_manager_repository.find(db_product.id, read_assistant.user_id) is None


@pytest.mark.django_db
@pytest.mark.integration
def test_list_products_scoped_to_managers(
    db_product, other_product, product_repository, product_manager_repository, authorizer,
    main_actor, outsider, super_admin,
):
    handler = ListProductsHandler(
        product_repository=product_repository,
        product_manager_repository=product_manager_repository,
        authorizer=authorizer,
    )

    assert [p.id for p in handler.handle(ListProductsQuery(main_actor)).items] == [db_product.id]
    assert handler.handle(ListProductsQuery(outsider)).total == 0
    assert handler.handle(ListProductsQuery(super_admin)).total == 2
