"""
WSGI config for bazaarBackend project.

It exposes the WSGI callable as a module-level variable named ``application``.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "bazaarBackend.settings")

application = get_wsgi_application()

from bazaarBackend.lifecycle import start  # noqa: E402

start()
