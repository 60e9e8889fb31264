"""
API tests over the HTTP surface: status codes, error bodies and payloads.
"""

import json

import pytest
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from django.urls import reverse

from devices.infrastructure.crypto import NONCE_SIZE, get_artifact_keys

MAIN_USER = 2001
OUTSIDER = 2004


@pytest.fixture
def api_product(as_user):
    response = as_user(MAIN_USER).post(
        reverse("products:product-list"),
        {"code": "CAM", "name": "Camera", "product_type": "hardware"},
        format="json",
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def api_license_type(as_user, api_product):
    client = as_user(MAIN_USER)
    feature = client.post(
        reverse("features:feature-list"),
        {"product_id": api_product["id"], "feature_name": "Recording", "feature_code": "REC"},
        format="json",
    ).json()
    response = client.post(
        reverse("license_types:license-type-list"),
        {
            "product_id": api_product["id"],
            "type_name": "Standard",
            "license_code": "STD",
            "feature_ids": [feature["id"]],
        },
        format="json",
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def api_device(as_user, api_product, api_license_type):
    response = as_user(MAIN_USER).post(
        reverse("devices:device-list"),
        {
            "product_id": api_product["id"],
            "sn": "SN-0001",
            "license_type_id": api_license_type["id"],
            "oem_tag": "acme",
        },
        format="json",
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.django_db
@pytest.mark.integration
class TestProductAPI:
    """Tests for the product endpoints."""

    def test_missing_actor_header(self, api_client):
        response = api_client.get(reverse("products:product-list"))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "NOT_AUTHENTICATED"

    def test_create_product(self, api_product):
        assert api_product["code"] == "CAM"
        assert [(m["user_id"], m["role"]) for m in api_product["managers"]] == [(MAIN_USER, "main")]

    def test_validation_error_lists_fields(self, as_user):
        response = as_user(MAIN_USER).post(
            reverse("products:product-list"), {"code": "CAM"}, format="json"
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_PARAMETER"
        assert "name" in error["fields"]

    def test_conflict(self, as_user, api_product):
        response = as_user(MAIN_USER).post(
            reverse("products:product-list"), {"code": "CAM", "name": "Other"}, format="json"
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "PRODUCT_CODE_EXIST"

    def test_outsider_forbidden(self, as_user, api_product):
        response = as_user(OUTSIDER).patch(
            reverse("products:product-detail", args=[api_product["id"]]),
            {"name": "Stolen"},
            format="json",
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "NO_PERMISSION"

    def test_list_scoped_to_caller(self, as_user, api_product):
        mine = as_user(MAIN_USER).get(reverse("products:product-list")).json()
        theirs = as_user(OUTSIDER).get(reverse("products:product-list")).json()

        assert [item["id"] for item in mine["items"]] == [api_product["id"]]
        assert theirs["total"] == 0

    def test_delete_unknown(self, as_user):
        response = as_user(1).delete(reverse("products:product-detail", args=[424242]))

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRODUCT_NOT_EXIST"


@pytest.mark.django_db
@pytest.mark.integration
class TestDeviceAPI:
    """Tests for the device endpoints."""

    def test_create_device(self, api_device, api_product):
        assert api_device["sn"] == "SN-0001"
        assert api_device["product_name"] == api_product["name"]
        assert api_device["license_code"] == "STD"

    def test_duplicate_sn(self, as_user, api_device, api_product, api_license_type):
        response = as_user(MAIN_USER).post(
            reverse("devices:device-list"),
            {
                "product_id": api_product["id"],
                "sn": "SN-0001",
                "license_type_id": api_license_type["id"],
            },
            format="json",
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DEVICE_SN_EXIST"

    def test_overlong_remark(self, as_user, api_product, api_license_type):
        response = as_user(MAIN_USER).post(
            reverse("devices:device-list"),
            {
                "product_id": api_product["id"],
                "sn": "SN-LONG",
                "license_type_id": api_license_type["id"],
                "remark": "x" * 256,
            },
            format="json",
        )

        assert response.status_code == 400
        assert "remark" in response.json()["error"]["fields"]

    def test_batch_add(self, as_user, api_product, api_license_type):
        response = as_user(MAIN_USER).post(
            reverse("devices:device-batch"),
            {
                "product_id": api_product["id"],
                "license_type_id": api_license_type["id"],
                "sns": ["B-1", " B-2 ", "", "B-1"],
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.json()["count"] == 2

    def test_list_filters_by_sn(self, as_user, api_device):
        response = as_user(MAIN_USER).get(reverse("devices:device-list"), {"sn": "0001"})

        assert response.status_code == 200
        assert [item["sn"] for item in response.json()["items"]] == ["SN-0001"]

    def test_activation_file_download(self, as_user, api_device, activation_keys, symmetric_key):
        response = as_user(MAIN_USER).get(
            reverse("devices:device-activation-file", args=["SN-0001"])
        )

        assert response.status_code == 200
        assert response["Content-Type"] == "application/octet-stream"
        assert response["Content-Disposition"] == 'attachment; filename="SN-0001.lic"'
        plaintext = AESGCM(symmetric_key).decrypt(
            response.content[:NONCE_SIZE], response.content[NONCE_SIZE:], None
        )
        envelope = json.loads(plaintext)
        assert envelope["data"]["feature_codes"] == ["REC"]

    def test_activation_file_without_keys(self, as_user, api_device):
        get_artifact_keys.cache_clear()

        response = as_user(MAIN_USER).get(
            reverse("devices:device-activation-file", args=["SN-0001"])
        )

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "OPERATION_FAILED"


@pytest.mark.django_db
@pytest.mark.integration
def test_audit_log_list(as_user, api_device):
    response = as_user(MAIN_USER).get(reverse("audit:audit-log-list"), {"module": "device"})

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    entry = body["items"][0]
    assert (entry["module"], entry["action"], entry["operator_id"]) == ("device", "create", MAIN_USER)
    assert entry["details"]["device"]["sn"] == "SN-0001"


@pytest.mark.django_db
@pytest.mark.integration
def test_audit_log_inverted_range(as_user):
    response = as_user(MAIN_USER).get(
        reverse("audit:audit-log-list"),
        {"start_time": "2024-02-01T00:00:00Z", "end_time": "2024-01-01T00:00:00Z"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PARAMETER"
