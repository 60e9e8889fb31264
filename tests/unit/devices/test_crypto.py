"""
Unit tests for activation key material loading.
"""

import base64

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from django.core.exceptions import ImproperlyConfigured

from devices.infrastructure.crypto import SymmetricKeyRing, get_artifact_keys, load_signing_key


def _b64(raw):
    return base64.b64encode(raw).decode("ascii")


class TestSymmetricKeyRing:
    """Tests for SymmetricKeyRing.parse."""

    def test_single_key_is_active_by_default(self):
        ring = SymmetricKeyRing.parse("k1:" + _b64(b"a" * 16))
        assert ring.active_key_id == "k1"
        assert ring.active_key == b"a" * 16

    def test_rotation_selects_active_id(self):
        ring = SymmetricKeyRing.parse(
            f"old:{_b64(b'a' * 16)}, new:{_b64(b'b' * 32)}", active_key_id="new"
        )
        assert ring.key_ids == ["new", "old"]
        assert ring.active_key == b"b" * 32
        assert ring.key("old") == b"a" * 16

    @pytest.mark.parametrize(
        "ring, active",
        [
            ("", ""),
            ("k1:" + _b64(b"a" * 10), ""),
            ("k1:not-base64!", ""),
            ("missing-separator", ""),
            (f"k1:{_b64(b'a' * 16)},k1:{_b64(b'b' * 16)}", "k1"),
            (f"k1:{_b64(b'a' * 16)},k2:{_b64(b'b' * 16)}", ""),
            ("k1:" + _b64(b"a" * 16), "k9"),
        ],
    )
    def test_invalid_rings(self, ring, active):
        with pytest.raises(ImproperlyConfigured):
            SymmetricKeyRing.parse(ring, active)


class TestLoadSigningKey:
    """Tests for load_signing_key."""

    def test_loads_pkcs8(self, tmp_path, rsa_private_key):
        path = tmp_path / "key.pem"
        path.write_bytes(
            rsa_private_key.private_bytes(
                serialization.Encoding.PEM,
                serialization.PrivateFormat.PKCS8,
                serialization.NoEncryption(),
            )
        )
        key = load_signing_key(str(path))
        assert key.public_key().public_numbers() == rsa_private_key.public_key().public_numbers()

    def test_missing_path(self):
        with pytest.raises(ImproperlyConfigured):
            load_signing_key("")

    def test_missing_file(self, tmp_path):
        with pytest.raises(ImproperlyConfigured):
            load_signing_key(str(tmp_path / "absent.pem"))

    def test_garbage_file(self, tmp_path):
        path = tmp_path / "key.pem"
        path.write_text("not a key")
        with pytest.raises(ImproperlyConfigured):
            load_signing_key(str(path))

    def test_rejects_non_rsa_key(self, tmp_path):
        path = tmp_path / "ec.pem"
        path.write_bytes(
            ec.generate_private_key(ec.SECP256R1()).private_bytes(
                serialization.Encoding.PEM,
                serialization.PrivateFormat.PKCS8,
                serialization.NoEncryption(),
            )
        )
        with pytest.raises(ImproperlyConfigured):
            load_signing_key(str(path))


def test_get_artifact_keys_reads_settings(activation_keys, symmetric_key):
    assert activation_keys.key_ring.active_key_id == "k1"
    assert activation_keys.key_ring.active_key == symmetric_key
    assert get_artifact_keys() is activation_keys
