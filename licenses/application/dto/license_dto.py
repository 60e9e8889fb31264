"""
License type and feature DTOs for API responses.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from licenses.domain.license_type import LicenseType
from licenses.domain.product_feature import ProductFeature


@dataclass
class FeatureDTO:
    """DTO for a product feature."""

    id: int
    product_id: int
    feature_name: str
    feature_code: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, feature: ProductFeature) -> "FeatureDTO":
        return cls(
            id=feature.id,
            product_id=feature.product_id,
            feature_name=feature.feature_name,
            feature_code=feature.feature_code,
            created_at=feature.created_at,
            updated_at=feature.updated_at,
        )


@dataclass
class LicenseTypeDTO:
    """DTO for a license type with its feature set."""

    id: int
    product_id: int
    type_name: str
    license_code: str
    created_at: datetime
    updated_at: datetime
    features: List[FeatureDTO] = field(default_factory=list)

    @classmethod
    def from_domain(
        cls, license_type: LicenseType, features: List[ProductFeature]
    ) -> "LicenseTypeDTO":
        return cls(
            id=license_type.id,
            product_id=license_type.product_id,
            type_name=license_type.type_name,
            license_code=license_type.license_code,
            created_at=license_type.created_at,
            updated_at=license_type.updated_at,
            features=[FeatureDTO.from_domain(feature) for feature in features],
        )
