"""
Assignment delta detection for task mutations.

The endpoints decide here whether a mutation should notify anybody; the
notifier itself never second-guesses the caller.
"""

ASSIGNED = "assigned"
REASSIGNED = "reassigned"


def _same_user(left, right):
    if left is None or right is None:
        return False
    return str(left) == str(right)


def assignee_for_created_task(task, actor_id):
    """Recipient id for a freshly created task, or None when nobody should hear about it."""
    if task.assigned_to_id is None or _same_user(task.assigned_to_id, actor_id):
        return None
    return task.assigned_to_id


def assignee_for_updated_task(previous_assignee_id, changes, actor_id):
    """
    Recipient id for an update, or None.

    ``changes`` holds only the fields the caller sent. Leaving the assignee
    out, unassigning, keeping the same assignee and assigning to yourself all
    produce None.
    """
    if "assigned_to" not in changes or changes["assigned_to"] is None:
        return None

    new_assignee = changes["assigned_to"]
    new_assignee_id = getattr(new_assignee, "pk", new_assignee)
    if _same_user(new_assignee_id, previous_assignee_id):
        return None
    if _same_user(new_assignee_id, actor_id):
        return None
    return new_assignee_id


def build_assignment_event(task, assignee_id, change_type):
    """Payload of the room-scoped ``task:assigned`` event."""
    return {
        "taskId": task.id,
        "title": task.title,
        "assignedToId": assignee_id,
        "creatorId": task.creator_id,
        "type": change_type,
    }
