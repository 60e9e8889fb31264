"""
Product feature commands.
"""
from dataclasses import dataclass

from core.domain.value_objects import Actor


@dataclass
class AddFeatureCommand:
    """Create a feature under a product."""

    actor: Actor
    product_id: int
    feature_name: str
    feature_code: str


@dataclass
class ModifyFeatureCommand:
    """Rename a feature; the feature code is immutable."""

    actor: Actor
    feature_id: int
    feature_name: str


@dataclass
class DeleteFeatureCommand:
    """Detach a feature from every license type and version, then delete it."""

    actor: Actor
    feature_id: int
