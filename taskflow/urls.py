"""
URL configuration for taskflow project.
"""

from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/v1/auth/", include("user_management.urls")),
    path("api/v1/users/", include("user_management.urls_users")),
    path("api/v1/tasks/", include("task_management.urls")),
    path("api/v1/notifications/", include("notifications.urls")),
]

# WebSocket routing lives in realtime/routing.py and is mounted in asgi.py
