from rest_framework import serializers

from user_management.models import xx_User
from user_management.serializers import UserSummarySerializer
from .models import Task


class TaskSerializer(serializers.ModelSerializer):
    """Read representation used by the REST API and the task:* socket events"""

    dueDate = serializers.DateTimeField(source="due_date", read_only=True)
    creatorId = serializers.IntegerField(source="creator_id", read_only=True)
    assignedToId = serializers.IntegerField(source="assigned_to_id", read_only=True, allow_null=True)
    creator = UserSummarySerializer(read_only=True)
    assignedTo = UserSummarySerializer(source="assigned_to", read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Task
        fields = [
            "id",
            "title",
            "description",
            "dueDate",
            "priority",
            "status",
            "creatorId",
            "assignedToId",
            "creator",
            "assignedTo",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class TaskSummarySerializer(serializers.ModelSerializer):
    """Slim task view embedded in notifications"""

    dueDate = serializers.DateTimeField(source="due_date", read_only=True)

    class Meta:
        model = Task
        fields = ["id", "title", "status", "priority", "dueDate"]
        read_only_fields = fields


class TaskWriteSerializer(serializers.ModelSerializer):
    """
    Validates POST and PATCH bodies.
    Use partial=True for PATCH so absent keys stay absent from validated_data.
    """

    dueDate = serializers.DateTimeField(source="due_date")
    assignedToId = serializers.PrimaryKeyRelatedField(
        source="assigned_to",
        queryset=xx_User.objects.filter(is_active=True),
        required=False,
        allow_null=True,
    )

    class Meta:
        model = Task
        fields = ["title", "description", "dueDate", "priority", "status", "assignedToId"]
        extra_kwargs = {
            "title": {"min_length": 1, "max_length": 100},
            "description": {"allow_blank": False},
        }

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("Title cannot be empty or only whitespace")
        return value.strip()


class TaskListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Task.STATUS_CHOICES, required=False)
    priority = serializers.ChoiceField(choices=Task.PRIORITY_CHOICES, required=False)
    sortByDueDate = serializers.ChoiceField(choices=["asc", "desc"], required=False)
    scope = serializers.ChoiceField(choices=["all", "mine"], required=False, default="all")
