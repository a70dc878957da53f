"""
ASGI config for LicensingService project.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "LicensingService.settings.prod")

application = get_asgi_application()
