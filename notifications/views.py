from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from .managers import NotificationStoreManager
from .serializers import NotificationSerializer


class UnreadNotificationsView(APIView):
    """List the caller's unread notifications, newest first"""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        notifications = NotificationStoreManager.list_unread(request.user)
        return Response(
            {
                "data": NotificationSerializer(notifications, many=True).data,
                "count": NotificationStoreManager.unread_count(request.user),
            }
        )


class ReadNotificationView(APIView):
    """Mark one of the caller's notifications as read"""

    permission_classes = [IsAuthenticated]

    def patch(self, request, pk):
        # NotificationNotFound is rendered as 404 by DRF
        notification = NotificationStoreManager.mark_read(pk, user=request.user)
        return Response({"data": NotificationSerializer(notification).data})


class ReadAllNotificationsView(APIView):
    """Mark every unread notification of the caller as read"""

    permission_classes = [IsAuthenticated]

    def post(self, request):
        updated = NotificationStoreManager.mark_all_read(request.user)
        return Response({"success": True, "updated": updated})
