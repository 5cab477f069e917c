from django.apps import AppConfig
from django.conf import settings


class RealtimeConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'realtime'
    verbose_name = 'Realtime Events'

    def ready(self):
        """Build the process-wide hub once; URL and ASGI wiring hand it out."""
        from .hub import RealtimeHub

        self.hub = RealtimeHub(
            enforce_room_ownership=getattr(settings, "REALTIME_ENFORCE_ROOM_OWNERSHIP", False),
        )
