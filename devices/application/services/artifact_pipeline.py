"""
ArtifactPipeline - turns an entitlement snapshot into activation file bytes.

Stages: canonical encoding, RSA signature, envelope, AES-GCM seal. A failure
at any stage is a CryptoFailureError; the cause is logged and counted by
stage but never returned to the caller.
"""
import logging

from core.domain.exceptions import CryptoFailureError
from core.metrics import activation_artifact_failures_total
from devices.domain.artifact import ActivationSnapshot, build_envelope
from devices.infrastructure.crypto import ArtifactKeys, seal, sign

logger = logging.getLogger(__name__)


class ArtifactPipeline:
    """Builds activation files with injected key material."""

    def __init__(self, keys: ArtifactKeys):
        """Initialize pipeline with loaded keys."""
        self.keys = keys

    def _fail(self, stage: str, snapshot: ActivationSnapshot, exc: Exception):
        activation_artifact_failures_total.labels(stage=stage).inc()
        logger.error(
            "Activation file %s failed: %s",
            stage,
            exc,
            extra={"sn": snapshot.sn, "product_id": snapshot.product_id, "stage": stage},
            exc_info=True,
        )
        return CryptoFailureError()

    def build(self, snapshot: ActivationSnapshot) -> bytes:
        """
        Build the activation file for a snapshot.

        Returns:
            ``nonce(12) || ciphertext || tag(16)`` under the active ring key

        Raises:
            CryptoFailureError: If encoding, signing or encryption fails
        """
        try:
            data = snapshot.canonical_bytes()
        except (TypeError, ValueError) as exc:
            raise self._fail("serialize", snapshot, exc) from exc

        try:
            signature = sign(self.keys.signing_key, data)
        except (TypeError, ValueError) as exc:
            raise self._fail("sign", snapshot, exc) from exc

        try:
            envelope = build_envelope(snapshot, signature)
        except (TypeError, ValueError) as exc:
            raise self._fail("envelope", snapshot, exc) from exc

        try:
            return seal(self.keys.key_ring.active_key, envelope)
        except (TypeError, ValueError, OverflowError) as exc:
            raise self._fail("encrypt", snapshot, exc) from exc
