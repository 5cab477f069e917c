"""Event names pushed to websocket clients."""

# Global broadcasts, every connected socket gets them
TASK_CREATED = "task:created"
TASK_UPDATED = "task:updated"
TASK_DELETED = "task:deleted"

# Room-scoped, only the recipient's sockets get them
TASK_ASSIGNED = "task:assigned"
NEW_NOTIFICATION = "newNotification"
