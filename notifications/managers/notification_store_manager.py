"""
Manager class for Notification persistence and read state.
"""
from notifications.exceptions import NotificationNotFound
from notifications.models import Notification


class NotificationStoreManager:
    """Manager for Notification operations."""

    @staticmethod
    def create(user_id, task_id, message):
        """
        Persist a new unread notification.

        Args:
            user_id: recipient user id
            task_id: task the notification is about
            message: generated text

        Returns:
            Notification instance (task loaded)
        """
        notification = Notification.objects.create(
            user_id=user_id,
            task_id=task_id,
            message=message,
            read=False,
        )
        return Notification.objects.select_related("task").get(pk=notification.pk)

    @staticmethod
    def list_unread(user):
        """Unread notifications for ``user``, newest first, with their task joined."""
        return (
            Notification.objects.filter(user=user, read=False)
            .select_related("task")
            .order_by("-created_at", "-id")
        )

    @staticmethod
    def unread_count(user):
        return Notification.objects.filter(user=user, read=False).count()

    @staticmethod
    def mark_read(notification_id, user=None):
        """
        Flag one notification as read. Marking an already-read notification
        is a no-op.

        Args:
            notification_id: id of the notification
            user: when given, only this user's notifications are visible

        Raises:
            NotificationNotFound: no such notification (for ``user``)
        """
        queryset = Notification.objects.select_related("task").filter(pk=notification_id)
        if user is not None:
            queryset = queryset.filter(user=user)

        notification = queryset.first()
        if notification is None:
            raise NotificationNotFound()

        if not notification.read:
            Notification.objects.filter(pk=notification.pk, read=False).update(read=True)
            notification.read = True
        return notification

    @staticmethod
    def mark_all_read(user):
        """Returns the number of notifications that moved from unread to read."""
        return Notification.objects.filter(user=user, read=False).update(read=True)
