"""
ASGI config for ActivationServer.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "ActivationServer.settings.prod")

application = get_asgi_application()
