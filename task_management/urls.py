from django.apps import apps
from django.urls import path

from notifications.notifier import AssignmentNotifier
from .views import OverdueTaskListView, TaskDetailView, TaskListCreateView

app_name = "task_management"

# The process-wide hub is built by the realtime app; the views receive it explicitly.
hub = apps.get_app_config("realtime").hub
notifier = AssignmentNotifier(hub)

urlpatterns = [
    # GET, POST /api/v1/tasks/
    path("", TaskListCreateView.as_view(hub=hub, notifier=notifier), name="task-list"),
    # GET /api/v1/tasks/overdue/
    path("overdue/", OverdueTaskListView.as_view(), name="task-overdue"),
    # GET, PATCH, DELETE /api/v1/tasks/<id>/
    path("<int:pk>/", TaskDetailView.as_view(hub=hub, notifier=notifier), name="task-detail"),
]
