"""
ASGI config for taskflow project.

It exposes the ASGI callable as a module-level variable named ``application``.
HTTP goes to Django, websockets go to the realtime consumer. Both sides share
the single ``RealtimeHub`` built by the realtime app at startup.

Start with:
    daphne -b 0.0.0.0 -p 8000 taskflow.asgi:application
"""

import os
from django.core.asgi import get_asgi_application
from channels.routing import ProtocolTypeRouter, URLRouter

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "taskflow.settings")

# Initialize Django before importing anything that touches models
django_asgi_app = get_asgi_application()

from django.apps import apps  # noqa: E402

from realtime.jwt_auth_middleware import JWTAuthMiddlewareStack  # noqa: E402
from realtime.routing import build_websocket_urlpatterns  # noqa: E402

hub = apps.get_app_config("realtime").hub

application = ProtocolTypeRouter(
    {
        "http": django_asgi_app,
        "websocket": JWTAuthMiddlewareStack(
            URLRouter(build_websocket_urlpatterns(hub))
        ),
    }
)
