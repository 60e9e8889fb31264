"""
Key material and primitives for activation files.

The RSA signing key and the AES key ring are read from settings once per
process (``get_artifact_keys``) and handed to the pipeline explicitly.
No key is compiled into the source.
"""
import base64
import binascii
import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)

NONCE_SIZE = 12
AES_KEY_SIZES = (16, 24, 32)


def load_signing_key(path: str) -> rsa.RSAPrivateKey:
    """
    Load an unencrypted RSA private key from a PEM file.

    Both PKCS#1 (``BEGIN RSA PRIVATE KEY``) and PKCS#8 encodings are accepted.

    Raises:
        ImproperlyConfigured: If the file is missing, unreadable or not RSA
    """
    if not path:
        raise ImproperlyConfigured("ACTIVATION_PRIVATE_KEY_PATH is not set")
    try:
        with open(path, "rb") as key_file:
            key = serialization.load_pem_private_key(key_file.read(), password=None)
    except OSError as exc:
        raise ImproperlyConfigured(f"Cannot read activation private key: {path}") from exc
    except (ValueError, TypeError) as exc:
        raise ImproperlyConfigured(f"Invalid activation private key: {path}") from exc

    if not isinstance(key, rsa.RSAPrivateKey):
        raise ImproperlyConfigured("Activation private key must be an RSA key")
    return key


class SymmetricKeyRing:
    """
    AES keys by id, with one active key used for new activation files.

    Rotation adds a key to the ring and switches the active id; devices
    holding an older key keep being served by whoever still has that id.
    """

    def __init__(self, keys: Dict[str, bytes], active_key_id: str):
        """
        Initialize key ring.

        Raises:
            ImproperlyConfigured: If the ring is empty, a key has an invalid
                length, or the active id is not in the ring
        """
        if not keys:
            raise ImproperlyConfigured("ACTIVATION_SYMMETRIC_KEYS is empty")
        for key_id, key in keys.items():
            if len(key) not in AES_KEY_SIZES:
                raise ImproperlyConfigured(
                    f"Symmetric key '{key_id}' must be 16, 24 or 32 bytes, got {len(key)}"
                )
        if active_key_id not in keys:
            raise ImproperlyConfigured(
                f"ACTIVATION_SYMMETRIC_KEY_ID '{active_key_id}' is not in the key ring"
            )
        self._keys = dict(keys)
        self.active_key_id = active_key_id

    @classmethod
    def parse(cls, value: str, active_key_id: str = "") -> "SymmetricKeyRing":
        """
        Build a ring from ``"id:base64key[,id:base64key...]"``.

        With a single key and no active id, that key is active.
        """
        keys = {}
        for item in (value or "").split(","):
            item = item.strip()
            if not item:
                continue
            key_id, sep, encoded = item.partition(":")
            key_id = key_id.strip()
            if not sep or not key_id:
                raise ImproperlyConfigured("Symmetric keys must be written as id:base64key")
            if key_id in keys:
                raise ImproperlyConfigured(f"Duplicate symmetric key id '{key_id}'")
            try:
                keys[key_id] = base64.b64decode(encoded.strip(), validate=True)
            except (binascii.Error, ValueError) as exc:
                raise ImproperlyConfigured(f"Symmetric key '{key_id}' is not valid base64") from exc

        if not active_key_id and len(keys) == 1:
            active_key_id = next(iter(keys))
        return cls(keys, active_key_id)

    @property
    def key_ids(self):
        return sorted(self._keys)

    def key(self, key_id: str) -> bytes:
        return self._keys[key_id]

    @property
    def active_key(self) -> bytes:
        return self._keys[self.active_key_id]


@dataclass(frozen=True)
class ArtifactKeys:
    """Everything the pipeline needs to sign and seal."""

    signing_key: rsa.RSAPrivateKey
    key_ring: SymmetricKeyRing


def sign(private_key: rsa.RSAPrivateKey, data: bytes) -> bytes:
    """RSA PKCS#1 v1.5 signature over the SHA-256 digest of ``data``."""
    return private_key.sign(data, padding.PKCS1v15(), hashes.SHA256())


def seal(key: bytes, plaintext: bytes) -> bytes:
    """AES-GCM encrypt with a fresh nonce; returns ``nonce || ciphertext || tag``."""
    nonce = os.urandom(NONCE_SIZE)
    return nonce + AESGCM(key).encrypt(nonce, plaintext, None)


@lru_cache(maxsize=1)
def get_artifact_keys() -> ArtifactKeys:
    """
    Load key material from settings, once per process.

    Call ``get_artifact_keys.cache_clear()`` after changing the settings.

    Raises:
        ImproperlyConfigured: If any key is missing or malformed
    """
    signing_key = load_signing_key(settings.ACTIVATION_PRIVATE_KEY_PATH)
    key_ring = SymmetricKeyRing.parse(
        settings.ACTIVATION_SYMMETRIC_KEYS, settings.ACTIVATION_SYMMETRIC_KEY_ID
    )
    logger.info(
        "Loaded activation keys",
        extra={
            "key_size": signing_key.key_size,
            "symmetric_key_ids": key_ring.key_ids,
            "active_key_id": key_ring.active_key_id,
        },
    )
    return ArtifactKeys(signing_key=signing_key, key_ring=key_ring)
