"""
Assignment notifier: persist a notification, then push it to the assignee.
"""
import logging

from django.db import DatabaseError

from realtime.events import NEW_NOTIFICATION
from .exceptions import NotificationPersistenceError
from .managers import NotificationStoreManager
from .serializers import NotificationSerializer

logger = logging.getLogger("notifications")

ASSIGNMENT_MESSAGE = "You have been assigned to task: {title}"


class AssignmentNotifier:
    """
    Args:
        hub: RealtimeHub used for the live push
        store: notification store, NotificationStoreManager by default
    """

    def __init__(self, hub, store=NotificationStoreManager):
        self.hub = hub
        self.store = store

    def notify_assignment(self, recipient_id, task_id, task_title):
        """
        Record and push one assignment notification.

        The push only happens once the row is stored. If storing fails the
        error goes back to the caller and nothing is pushed; the task change
        that triggered this is left as is.

        Raises:
            NotificationPersistenceError: the notification could not be saved
        """
        message = ASSIGNMENT_MESSAGE.format(title=task_title)

        try:
            notification = self.store.create(
                user_id=recipient_id, task_id=task_id, message=message
            )
        except DatabaseError as e:
            logger.error(
                f"❌ Could not store assignment notification for user {recipient_id}, task {task_id}: {e}",
                exc_info=True,
            )
            raise NotificationPersistenceError() from e

        logger.info(f"Notification {notification.id} created for user {recipient_id} (task {task_id})")

        payload = dict(NotificationSerializer(notification).data)
        self.hub.emit_to_room(recipient_id, NEW_NOTIFICATION, payload)
        return notification
