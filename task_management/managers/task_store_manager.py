"""
Manager class for Task persistence.
Owns the task lifecycle fields; HTTP handlers never touch the ORM directly.
"""
from django.db.models import Q
from django.utils import timezone

from task_management.models import Task


SORT_DIRECTIONS = ("asc", "desc")

# Fields a caller may set on create/update. ``creator`` is fixed at creation.
WRITABLE_FIELDS = (
    "title",
    "description",
    "due_date",
    "priority",
    "status",
    "assigned_to",
)


class TaskStoreManager:
    """Manager for Task operations."""

    @staticmethod
    def _base_queryset():
        return Task.objects.select_related("creator", "assigned_to")

    @staticmethod
    def create(creator, /, **fields):
        """
        Create a task owned by ``creator``.

        Args:
            creator: xx_User performing the request
            **fields: any of WRITABLE_FIELDS; status defaults to TODO

        Returns:
            Task instance
        """
        values = {key: value for key, value in fields.items() if key in WRITABLE_FIELDS}
        return Task.objects.create(creator=creator, **values)

    @staticmethod
    def get_by_id(task_id):
        return TaskStoreManager._base_queryset().filter(pk=task_id).first()

    @staticmethod
    def update(task_id, **fields):
        """
        Apply a partial update.

        A key missing from ``fields`` leaves the column untouched, while
        ``assigned_to=None`` unassigns the task.

        Raises:
            Task.DoesNotExist: unknown task id
        """
        task = TaskStoreManager._base_queryset().get(pk=task_id)
        changed = []
        for key, value in fields.items():
            if key not in WRITABLE_FIELDS:
                continue
            setattr(task, key, value)
            changed.append(key)

        if changed:
            task.save(update_fields=changed + ["updated_at"])
        return task

    @staticmethod
    def delete(task_id):
        """Hard delete. Returns True when a task was removed."""
        deleted, _ = Task.objects.filter(pk=task_id).delete()
        return deleted > 0

    @staticmethod
    def _apply_filters(queryset, status=None, priority=None, sort_by_due_date=None):
        if status:
            queryset = queryset.filter(status=status)
        if priority:
            queryset = queryset.filter(priority=priority)

        if sort_by_due_date == "asc":
            return queryset.order_by("due_date", "id")
        if sort_by_due_date == "desc":
            return queryset.order_by("-due_date", "-id")
        return queryset.order_by("-created_at", "-id")

    @staticmethod
    def list_tasks(status=None, priority=None, sort_by_due_date=None):
        return TaskStoreManager._apply_filters(
            TaskStoreManager._base_queryset(),
            status=status,
            priority=priority,
            sort_by_due_date=sort_by_due_date,
        )

    @staticmethod
    def list_for_user(user, status=None, priority=None, sort_by_due_date=None):
        """Same as list_tasks, limited to tasks the user created or is assigned to."""
        queryset = TaskStoreManager._base_queryset().filter(
            Q(creator=user) | Q(assigned_to=user)
        )
        return TaskStoreManager._apply_filters(
            queryset,
            status=status,
            priority=priority,
            sort_by_due_date=sort_by_due_date,
        )

    @staticmethod
    def list_overdue(user):
        return (
            TaskStoreManager._base_queryset()
            .filter(assigned_to=user, due_date__lt=timezone.now())
            .exclude(status=Task.STATUS_COMPLETED)
            .order_by("due_date", "id")
        )
