"""
Issue activation artifact handler.
"""
import logging

from django.utils import timezone

from core.domain.exceptions import DeviceNotFoundError
from core.domain.value_objects import AccessLevel
from core.metrics import activation_artifacts_issued_total
from devices.application.dto.device_dto import ActivationArtifactDTO
from devices.application.queries.device_queries import IssueActivationArtifactQuery
from devices.application.services.artifact_pipeline import ArtifactPipeline
from devices.domain.artifact import ActivationSnapshot
from devices.ports.device_repository import DeviceRepository
from licenses.ports.license_type_repository import LicenseTypeRepository
from products.domain.services import ProductAuthorizer

logger = logging.getLogger(__name__)


class IssueActivationArtifactHandler:
    """
    Handler for IssueActivationArtifactQuery.

    Snapshots the device's current entitlements and runs them through the
    artifact pipeline. Nothing is written; issuing is not audited.
    """

    def __init__(
        self,
        device_repository: DeviceRepository,
        license_type_repository: LicenseTypeRepository,
        authorizer: ProductAuthorizer,
        pipeline: ArtifactPipeline,
    ):
        """Initialize handler with repositories and the pipeline."""
        self.device_repository = device_repository
        self.license_type_repository = license_type_repository
        self.authorizer = authorizer
        self.pipeline = pipeline

    def handle(self, query: IssueActivationArtifactQuery) -> ActivationArtifactDTO:
        """
        Handle issue activation artifact query.

        Raises:
            DeviceNotFoundError: If no device has this serial number
            PermissionDeniedError: If the actor may not read the device's product
            CryptoFailureError: If the file cannot be built
        """
        sn = (query.sn or "").strip()
        device = self.device_repository.find_by_sn(sn)
        if not device:
            raise DeviceNotFoundError()
        self.authorizer.authorize(query.actor, device.product_id, AccessLevel.READ)

        snapshot = ActivationSnapshot(
            sn=device.sn,
            product_id=device.product_id,
            license_type=device.license_type_id,
            oem_tag=device.oem_tag,
            created_at=int(timezone.now().timestamp()),
            feature_codes=tuple(self.license_type_repository.feature_codes(device.license_type_id)),
        )
        content = self.pipeline.build(snapshot)

        activation_artifacts_issued_total.inc()
        logger.info(
            "Activation file issued",
            extra={
                "actor_id": query.actor.user_id,
                "sn": device.sn,
                "product_id": device.product_id,
                "license_type_id": device.license_type_id,
                "feature_count": len(snapshot.feature_codes),
            },
        )
        return ActivationArtifactDTO(sn=device.sn, content=content, filename=f"{device.sn}.lic")
