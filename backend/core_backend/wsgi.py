"""
WSGI config for core_backend project.

The order event stream requires the ASGI application (core_backend.asgi);
this entry point serves the REST API only.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core_backend.settings")

application = get_wsgi_application()
