"""
WebSocket URL routing for realtime events
"""
from django.urls import path

from .consumers import RealtimeConsumer


def build_websocket_urlpatterns(hub):
    return [
        path('ws/notifications/', RealtimeConsumer.as_asgi(hub=hub)),
    ]
