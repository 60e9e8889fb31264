from devices.infrastructure.models import Device  # noqa: F401
