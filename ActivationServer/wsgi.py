"""
WSGI config for ActivationServer.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "ActivationServer.settings.prod")

application = get_wsgi_application()
