from django.urls import path
from .views import ReadAllNotificationsView, ReadNotificationView, UnreadNotificationsView

app_name = "notifications"

urlpatterns = [
    # GET /api/v1/notifications/
    path("", UnreadNotificationsView.as_view(), name="unread"),
    # PATCH /api/v1/notifications/<id>/read/
    path("<int:pk>/read/", ReadNotificationView.as_view(), name="read-one"),
    # POST /api/v1/notifications/mark-all-read/
    path("mark-all-read/", ReadAllNotificationsView.as_view(), name="read-all"),
]
