"""
Activation file content.

An activation file proves a device's entitlements offline. Its plaintext is
an envelope::

    {"data": {"sn": ..., "product_id": ..., "license_type": ...,
              "oem_tag": ..., "created_at": ..., "feature_codes": [...]},
     "signature": "<base64 RSA signature over the canonical data bytes>"}

Verifiers recompute the signature input from the canonical encoding, so the
encoding must be byte-stable: compact separators, the field order above,
UTF-8 output and ``<``, ``>`` and ``&`` written as ``\\u003c``, ``\\u003e``
and ``\\u0026``.
"""
import base64
import json
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Tuple

_HTML_ESCAPES = (("<", "\\u003c"), (">", "\\u003e"), ("&", "\\u0026"))


def canonical_json(value: Any) -> bytes:
    """Encode ``value`` in the canonical activation file form."""
    text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    for char, escaped in _HTML_ESCAPES:
        text = text.replace(char, escaped)
    return text.encode("utf-8")


@dataclass(frozen=True)
class ActivationSnapshot:
    """
    Entitlements of one device at issue time.

    ``license_type`` is the license type id; ``created_at`` is the issue
    time in epoch seconds; ``feature_codes`` follow feature id order.
    """

    sn: str
    product_id: int
    license_type: int
    oem_tag: str
    created_at: int
    feature_codes: Tuple[str, ...] = ()

    def to_wire(self) -> "OrderedDict[str, Any]":
        return OrderedDict(
            [
                ("sn", self.sn),
                ("product_id", self.product_id),
                ("license_type", self.license_type),
                ("oem_tag", self.oem_tag),
                ("created_at", self.created_at),
                ("feature_codes", list(self.feature_codes)),
            ]
        )

    def canonical_bytes(self) -> bytes:
        """The exact bytes the signature covers."""
        return canonical_json(self.to_wire())


def build_envelope(snapshot: ActivationSnapshot, signature: bytes) -> bytes:
    """Canonical envelope bytes carrying the snapshot and its signature."""
    envelope = OrderedDict(
        [
            ("data", snapshot.to_wire()),
            ("signature", base64.b64encode(signature).decode("ascii")),
        ]
    )
    return canonical_json(envelope)
