"""
Unit tests for the Device entity and serial number normalization.
"""

import pytest

from devices.domain.device import Device
from devices.domain.services import normalize_serial_numbers


class TestNormalizeSerialNumbers:
    def test_trims_drops_blanks_and_repeats(self):
        assert normalize_serial_numbers([" A ", "", "B", "A", "  ", None, "C"]) == ["A", "B", "C"]

    def test_empty(self):
        assert normalize_serial_numbers([]) == []


class TestDevice:
    """Tests for Device entity."""

    def test_create_trims_sn(self):
        device = Device.create("  SN-1 ", product_id=1, license_type_id=2, created_by=5)
        assert device.sn == "SN-1"
        assert device.created_by == device.updated_by == 5
        assert device.id is None

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"sn": "", "product_id": 1, "license_type_id": 2},
            {"sn": "SN", "product_id": 0, "license_type_id": 2},
            {"sn": "SN", "product_id": 1, "license_type_id": 0},
            {"sn": "SN", "product_id": 1, "license_type_id": 2, "oem_tag": "x" * 65},
            {"sn": "SN", "product_id": 1, "license_type_id": 2, "remark": "x" * 256},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            Device.create(created_by=5, **kwargs)

    def test_reassign_license_keeps_remark_when_none(self):
        device = Device.create("SN", 1, 2, created_by=5, remark="rack 3")
        moved = device.reassign_license(4, updated_by=6)
        assert moved.license_type_id == 4
        assert moved.remark == "rack 3"
        assert moved.updated_by == 6
        assert moved.sn == device.sn and moved.product_id == device.product_id

    def test_reassign_license_replaces_remark(self):
        device = Device.create("SN", 1, 2, created_by=5, remark="rack 3")
        assert device.reassign_license(4, updated_by=6, remark="").remark == ""
