"""
WSGI config for taskflow project.

Websocket pushes need the ASGI application in ``taskflow.asgi``; this entry
point only serves the REST API.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'taskflow.settings')

application = get_wsgi_application()
