from rest_framework import status
from rest_framework.exceptions import APIException, NotFound


class NotificationNotFound(NotFound):
    default_detail = "Notification not found."
    default_code = "notification_not_found"


class NotificationPersistenceError(APIException):
    """The notification row could not be written. The task change still stands."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "The task was saved but the assignment notification could not be recorded."
    default_code = "notification_persistence_failed"
