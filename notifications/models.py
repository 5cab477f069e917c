from django.db import models


class Notification(models.Model):
    """
    Durable record that a user was assigned to a task.
    Only ``read`` ever changes after creation, and only from False to True.
    """
    user = models.ForeignKey(
        "user_management.xx_User", on_delete=models.CASCADE, related_name="notifications"
    )
    task = models.ForeignKey(
        "task_management.Task", on_delete=models.CASCADE, related_name="notifications"
    )
    message = models.TextField()
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "XX_NOTIFICATION_XX"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["user", "read"], name="notification_user_read_idx"),
        ]

    def __str__(self):
        return f"Notification for {self.user_id}: {self.message[:30]}"
