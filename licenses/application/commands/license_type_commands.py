"""
License type commands.
"""
from dataclasses import dataclass, field
from typing import List

from core.domain.value_objects import Actor


@dataclass
class AddLicenseTypeCommand:
    """Create a license type, optionally bundling features of the same product."""

    actor: Actor
    product_id: int
    type_name: str
    license_code: str
    feature_ids: List[int] = field(default_factory=list)


@dataclass
class ModifyLicenseTypeCommand:
    """Rename a license type; the license code is immutable."""

    actor: Actor
    license_type_id: int
    type_name: str


@dataclass
class UpdateLicenseTypeFeaturesCommand:
    """Replace the complete feature set of a license type."""

    actor: Actor
    license_type_id: int
    feature_ids: List[int] = field(default_factory=list)


@dataclass
class DeleteLicenseTypeCommand:
    """Delete a license type no device is assigned to."""

    actor: Actor
    license_type_id: int
