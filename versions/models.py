from versions.infrastructure.models import FirmwareVersion, SoftwareVersion  # noqa: F401
