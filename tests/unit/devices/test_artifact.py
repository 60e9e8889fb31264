"""
Unit tests for activation file encoding and the artifact pipeline.
"""

import base64
import json

import pytest
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from core.domain.exceptions import CryptoFailureError
from devices.application.services.artifact_pipeline import ArtifactPipeline
from devices.domain.artifact import ActivationSnapshot, build_envelope, canonical_json
from devices.infrastructure.crypto import NONCE_SIZE, ArtifactKeys, SymmetricKeyRing


@pytest.fixture
def snapshot():
    return ActivationSnapshot(
        sn="SN-0001",
        product_id=3,
        license_type=8,
        oem_tag="acme",
        created_at=1700000000,
        feature_codes=("REC", "AI"),
    )


@pytest.fixture
def pipeline(rsa_private_key, symmetric_key):
    return ArtifactPipeline(
        ArtifactKeys(rsa_private_key, SymmetricKeyRing({"k1": symmetric_key}, "k1"))
    )


def _open(content, key):
    nonce, sealed = content[:NONCE_SIZE], content[NONCE_SIZE:]
    return AESGCM(key).decrypt(nonce, sealed, None)


class TestCanonicalJson:
    """Tests for the canonical encoding."""

    def test_compact_separators(self):
        assert canonical_json({"a": 1, "b": [1, 2]}) == b'{"a":1,"b":[1,2]}'

    def test_html_characters_escaped(self):
        assert canonical_json({"t": "<a&b>"}) == b'{"t":"\\u003ca\\u0026b\\u003e"}'

    def test_non_ascii_kept_as_utf8(self):
        assert canonical_json({"t": "café"}) == '{"t":"café"}'.encode("utf-8")

    def test_snapshot_field_order(self, snapshot):
        assert snapshot.canonical_bytes() == (
            b'{"sn":"SN-0001","product_id":3,"license_type":8,"oem_tag":"acme",'
            b'"created_at":1700000000,"feature_codes":["REC","AI"]}'
        )

    def test_empty_features_encode_as_empty_list(self):
        snapshot = ActivationSnapshot("SN", 1, 2, "", 0)
        assert b'"feature_codes":[]' in snapshot.canonical_bytes()

    def test_envelope_shape(self, snapshot):
        envelope = json.loads(build_envelope(snapshot, b"\x01\x02"))
        assert list(envelope) == ["data", "signature"]
        assert envelope["signature"] == base64.b64encode(b"\x01\x02").decode()
        assert envelope["data"]["feature_codes"] == ["REC", "AI"]


class TestArtifactPipeline:
    """Tests for ArtifactPipeline.build."""

    def test_round_trip(self, pipeline, snapshot, rsa_private_key, symmetric_key):
        content = pipeline.build(snapshot)

        envelope = json.loads(_open(content, symmetric_key))
        signature = base64.b64decode(envelope["signature"])
        data_bytes = canonical_json(envelope["data"])

        assert data_bytes == snapshot.canonical_bytes()
        rsa_private_key.public_key().verify(
            signature, data_bytes, padding.PKCS1v15(), hashes.SHA256()
        )

    def test_layout_nonce_ciphertext_tag(self, pipeline, snapshot):
        content = pipeline.build(snapshot)
        plaintext_length = len(build_envelope(snapshot, b"\x00" * 256))
        assert len(content) == NONCE_SIZE + plaintext_length + 16

    def test_fresh_nonce_per_file(self, pipeline, snapshot):
        first = pipeline.build(snapshot)
        second = pipeline.build(snapshot)
        assert first[:NONCE_SIZE] != second[:NONCE_SIZE]

    def test_tampered_data_fails_verification(self, pipeline, snapshot, rsa_private_key, symmetric_key):
        envelope = json.loads(_open(pipeline.build(snapshot), symmetric_key))
        envelope["data"]["license_type"] = 9
        with pytest.raises(InvalidSignature):
            rsa_private_key.public_key().verify(
                base64.b64decode(envelope["signature"]),
                canonical_json(envelope["data"]),
                padding.PKCS1v15(),
                hashes.SHA256(),
            )

    def test_sign_failure_is_crypto_failure(self, symmetric_key, snapshot):
        class BrokenKey:
            def sign(self, data, pad, algorithm):
                raise ValueError("key unusable")

        pipeline = ArtifactPipeline(
            ArtifactKeys(BrokenKey(), SymmetricKeyRing({"k1": symmetric_key}, "k1"))
        )
        with pytest.raises(CryptoFailureError):
            pipeline.build(snapshot)

    def test_serialize_failure_is_crypto_failure(self, pipeline):
        snapshot = ActivationSnapshot("SN", 1, 2, "", 0, feature_codes=(object(),))
        with pytest.raises(CryptoFailureError):
            pipeline.build(snapshot)
