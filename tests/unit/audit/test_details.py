"""
Unit tests for audit details documents.
"""

from audit.domain import details
from core.domain.value_objects import ManagerPermission, ManagerRole
from products.domain.product_manager import ProductManager


def test_snapshot_plain_values():
    manager = ProductManager.create_assistant(3, 42, ManagerPermission.FULL, "ops")
    snapshot = details.snapshot(manager)
    assert snapshot["role"] == ManagerRole.ASSISTANT.value
    assert snapshot["permission"] == "full"
    assert snapshot["remark"] == "ops"


def test_snapshot_sorts_sets():
    assert details.snapshot({"ids": frozenset({3, 1, 2})}) == {"ids": [1, 2, 3]}


def test_updated_keys():
    document = details.updated("feature", {"name": "a"}, {"name": "b"}, reason="rename")
    assert document == {
        "old_feature": {"name": "a"},
        "new_feature": {"name": "b"},
        "reason": "rename",
    }


def test_created_and_deleted_keys():
    assert details.created("device", {"sn": "X"}) == {"device": {"sn": "X"}}
    assert details.deleted("device", {"sn": "X"}) == {"device": {"sn": "X"}}


def test_batch_created_counts():
    document = details.batch_created("devices", [{"sn": "A"}, {"sn": "B"}])
    assert document == {"count": 2, "devices": [{"sn": "A"}, {"sn": "B"}]}


def test_none_snapshot():
    assert details.updated("manager", None, {"user_id": 1})["old_manager"] is None
