from rest_framework import serializers

from task_management.serializers import TaskSummarySerializer
from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    """Used by the REST API and as the newNotification socket payload"""

    userId = serializers.IntegerField(source="user_id", read_only=True)
    taskId = serializers.IntegerField(source="task_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    task = TaskSummarySerializer(read_only=True)

    class Meta:
        model = Notification
        fields = ["id", "userId", "taskId", "message", "read", "createdAt", "task"]
        read_only_fields = fields
