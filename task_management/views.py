import logging

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework import status

from realtime.events import TASK_ASSIGNED, TASK_CREATED, TASK_DELETED, TASK_UPDATED
from .assignment import (
    ASSIGNED,
    REASSIGNED,
    assignee_for_created_task,
    assignee_for_updated_task,
    build_assignment_event,
)
from .managers import TaskStoreManager
from .models import Task
from .serializers import TaskListQuerySerializer, TaskSerializer, TaskWriteSerializer

logger = logging.getLogger("task_management")


def task_not_found():
    return Response(
        {"status": "fail", "message": "Task not found"},
        status=status.HTTP_404_NOT_FOUND,
    )


class TaskMutationView(APIView):
    """
    Base for views that change tasks. ``hub`` and ``notifier`` are injected
    through as_view() in urls.py.
    """

    permission_classes = [IsAuthenticated]
    hub = None
    notifier = None

    def _announce_assignment(self, task, assignee_id, change_type):
        self.hub.emit_to_room(
            assignee_id,
            TASK_ASSIGNED,
            build_assignment_event(task, assignee_id, change_type),
        )
        # Raises NotificationPersistenceError (500) if the row cannot be stored
        self.notifier.notify_assignment(assignee_id, task.id, task.title)


class TaskListCreateView(TaskMutationView):

    def get(self, request):
        """
        Query params:
        - status, priority: optional exact filters
        - sortByDueDate: asc | desc
        - scope: all (default) | mine (created by or assigned to the caller)
        """
        query = TaskListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(
                {"status": "fail", "errors": query.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        filters = {
            "status": query.validated_data.get("status"),
            "priority": query.validated_data.get("priority"),
            "sort_by_due_date": query.validated_data.get("sortByDueDate"),
        }
        if query.validated_data["scope"] == "mine":
            tasks = TaskStoreManager.list_for_user(request.user, **filters)
        else:
            tasks = TaskStoreManager.list_tasks(**filters)

        return Response({"status": "success", "data": TaskSerializer(tasks, many=True).data})

    def post(self, request):
        serializer = TaskWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"status": "fail", "errors": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        task = TaskStoreManager.create(request.user, **serializer.validated_data)
        logger.info(f"Task {task.id} created by user {request.user.id}")

        data = TaskSerializer(task).data
        self.hub.broadcast_global(TASK_CREATED, dict(data))

        assignee_id = assignee_for_created_task(task, request.user.id)
        if assignee_id is not None:
            self._announce_assignment(task, assignee_id, ASSIGNED)

        return Response({"status": "success", "data": data}, status=status.HTTP_201_CREATED)


class OverdueTaskListView(APIView):
    """Tasks assigned to the caller that are past due and not completed"""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        tasks = TaskStoreManager.list_overdue(request.user)
        return Response({"status": "success", "data": TaskSerializer(tasks, many=True).data})


class TaskDetailView(TaskMutationView):

    def get(self, request, pk):
        task = TaskStoreManager.get_by_id(pk)
        if task is None:
            return task_not_found()
        return Response({"status": "success", "data": TaskSerializer(task).data})

    def patch(self, request, pk):
        previous = TaskStoreManager.get_by_id(pk)
        if previous is None:
            return task_not_found()
        previous_assignee_id = previous.assigned_to_id

        serializer = TaskWriteSerializer(previous, data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(
                {"status": "fail", "errors": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        changes = serializer.validated_data
        try:
            task = TaskStoreManager.update(pk, **changes)
        except Task.DoesNotExist:
            return task_not_found()
        logger.info(f"Task {task.id} updated by user {request.user.id}: {sorted(changes)}")

        data = TaskSerializer(task).data
        self.hub.broadcast_global(TASK_UPDATED, dict(data))

        assignee_id = assignee_for_updated_task(previous_assignee_id, changes, request.user.id)
        if assignee_id is not None:
            self._announce_assignment(task, assignee_id, REASSIGNED)

        return Response({"status": "success", "data": data})

    def delete(self, request, pk):
        if not TaskStoreManager.delete(pk):
            return task_not_found()

        logger.info(f"Task {pk} deleted by user {request.user.id}")
        self.hub.broadcast_global(TASK_DELETED, {"id": pk})
        return Response(status=status.HTTP_204_NO_CONTENT)
