"""
App configuration for Activation Server.
"""
import logging
import os
import sys

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)

# Management commands that never serve activation files
SKIP_STARTUP_COMMANDS = [
    "migrate",
    "makemigrations",
    "collectstatic",
    "shell",
    "test",
    "check",
    "createsuperuser",
    "generate_signing_key",
]


class ActivationServerConfig(AppConfig):
    """App configuration for ActivationServer."""

    name = "ActivationServer"
    verbose_name = "Activation Server"

    def ready(self):
        """Called when Django starts."""
        if len(sys.argv) > 1 and sys.argv[1] in SKIP_STARTUP_COMMANDS:
            return

        # Django's reloader imports the project twice; only the child serves requests
        if os.environ.get("RUN_MAIN") == "false":
            return

        if getattr(self, "_initialized", False):
            return

        self.setup_observability()
        if settings.ACTIVATION_LOAD_KEYS_ON_STARTUP:
            self.load_artifact_keys()
        self._initialized = True

    def setup_observability(self):
        """Setup tracing exporters after apps are ready."""
        from core.instrumentation import setup_opentelemetry

        try:
            setup_opentelemetry()
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning("Failed to setup OpenTelemetry: %s", e)

    def load_artifact_keys(self):
        """
        Load the signing key and symmetric key ring once per process.

        Raises:
            ImproperlyConfigured: If key material is missing or malformed
        """
        from devices.infrastructure.crypto import get_artifact_keys

        keys = get_artifact_keys()
        logger.info(
            "Activation key material loaded",
            extra={"symmetric_key_id": keys.key_ring.active_key_id},
        )
