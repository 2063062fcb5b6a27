"""WSGI entrypoint for the Keyhost Homes backend."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "keyhost_project.settings")

application = get_wsgi_application()
