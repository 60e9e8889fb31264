from licenses.infrastructure.models import LicenseType, LicenseTypeFeature, ProductFeature  # noqa: F401
