"""
Tests for the task endpoints and the realtime side effects of each mutation.
"""

from datetime import timedelta
from unittest import mock

from django.apps import apps
from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from notifications.managers import NotificationStoreManager
from notifications.models import Notification
from task_management.models import Task

User = get_user_model()

TASKS_URL = '/api/v1/tasks/'


def detail_url(task_id):
    return f'{TASKS_URL}{task_id}/'


class TaskEndpointTestCase(TestCase):
    """Authenticates as u1 and replaces the hub's delivery methods with mocks."""

    def setUp(self):
        self.client = APIClient()
        self.u1 = User.objects.create_user(username='u1', password='testpass123', email='u1@example.com')
        self.u2 = User.objects.create_user(username='u2', password='testpass123', email='u2@example.com')
        self.u3 = User.objects.create_user(username='u3', password='testpass123', email='u3@example.com')
        self.client.force_authenticate(user=self.u1)

        hub = apps.get_app_config('realtime').hub
        broadcast_patcher = mock.patch.object(hub, 'broadcast_global', return_value=True)
        emit_patcher = mock.patch.object(hub, 'emit_to_room', return_value=True)
        self.broadcast_global = broadcast_patcher.start()
        self.emit_to_room = emit_patcher.start()
        self.addCleanup(broadcast_patcher.stop)
        self.addCleanup(emit_patcher.stop)

    def task_body(self, **overrides):
        body = {
            'title': 'Ship report',
            'description': 'Quarterly numbers',
            'dueDate': (timezone.now() + timedelta(days=2)).isoformat(),
            'priority': 'HIGH',
        }
        body.update(overrides)
        return body

    def make_task(self, creator=None, assigned_to=None, **fields):
        values = {
            'title': 'Existing',
            'description': 'Already there',
            'due_date': timezone.now() + timedelta(days=1),
            'priority': Task.PRIORITY_LOW,
        }
        values.update(fields)
        return Task.objects.create(creator=creator or self.u1, assigned_to=assigned_to, **values)

    def room_events(self, event_name):
        return [c for c in self.emit_to_room.call_args_list if c.args[1] == event_name]

    def broadcasts(self, event_name):
        return [c for c in self.broadcast_global.call_args_list if c.args[0] == event_name]


class CreateTaskTests(TaskEndpointTestCase):

    def test_create_assigned_to_other_user_notifies_once(self):
        response = self.client.post(TASKS_URL, self.task_body(assignedToId=self.u2.id), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        task_id = response.data['data']['id']

        notifications = Notification.objects.all()
        self.assertEqual(notifications.count(), 1)
        notification = notifications.get()
        self.assertEqual(notification.user_id, self.u2.id)
        self.assertEqual(notification.task_id, task_id)
        self.assertEqual(notification.message, 'You have been assigned to task: Ship report')
        self.assertFalse(notification.read)

        pushes = self.room_events('newNotification')
        self.assertEqual(len(pushes), 1)
        self.assertEqual(pushes[0].args[0], self.u2.id)
        self.assertEqual(pushes[0].args[2]['id'], notification.id)
        self.assertEqual(pushes[0].args[2]['task']['title'], 'Ship report')

    def test_create_broadcasts_and_sends_assigned_event(self):
        response = self.client.post(TASKS_URL, self.task_body(assignedToId=self.u2.id), format='json')
        task_id = response.data['data']['id']

        created = self.broadcasts('task:created')
        self.assertEqual(len(created), 1)
        self.assertEqual(created[0].args[1]['id'], task_id)

        assigned = self.room_events('task:assigned')
        self.assertEqual(len(assigned), 1)
        self.assertEqual(assigned[0].args[0], self.u2.id)
        self.assertEqual(
            assigned[0].args[2],
            {
                'taskId': task_id,
                'title': 'Ship report',
                'assignedToId': self.u2.id,
                'creatorId': self.u1.id,
                'type': 'assigned',
            },
        )

    def test_create_without_assignee_creates_no_notification(self):
        response = self.client.post(TASKS_URL, self.task_body(), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['status'], 'TODO')
        self.assertEqual(response.data['data']['creatorId'], self.u1.id)
        self.assertIsNone(response.data['data']['assignedToId'])
        self.assertEqual(Notification.objects.count(), 0)
        self.emit_to_room.assert_not_called()
        self.assertEqual(len(self.broadcasts('task:created')), 1)

    def test_create_self_assigned_creates_no_notification(self):
        response = self.client.post(TASKS_URL, self.task_body(assignedToId=self.u1.id), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Notification.objects.count(), 0)
        self.emit_to_room.assert_not_called()

    def test_create_with_unknown_assignee_is_rejected(self):
        response = self.client.post(TASKS_URL, self.task_body(assignedToId=987654), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('assignedToId', response.data['errors'])
        self.assertEqual(Task.objects.count(), 0)
        self.broadcast_global.assert_not_called()

    def test_create_with_missing_fields_is_rejected(self):
        response = self.client.post(TASKS_URL, {'title': 'Only a title'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        for field in ('description', 'dueDate', 'priority'):
            self.assertIn(field, response.data['errors'])

    def test_create_with_bad_priority_is_rejected(self):
        response = self.client.post(TASKS_URL, self.task_body(priority='SOMEDAY'), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('priority', response.data['errors'])

    def test_notification_failure_returns_server_error_but_keeps_task(self):
        with mock.patch.object(NotificationStoreManager, 'create', side_effect=DatabaseError('db down')):
            response = self.client.post(TASKS_URL, self.task_body(assignedToId=self.u2.id), format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        task = Task.objects.get()
        self.assertEqual(task.assigned_to, self.u2)
        self.assertEqual(Notification.objects.count(), 0)
        self.assertEqual(self.room_events('newNotification'), [])

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)

        response = self.client.post(TASKS_URL, self.task_body(), format='json')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class UpdateTaskTests(TaskEndpointTestCase):

    def test_reassignment_notifies_new_assignee_only(self):
        task = self.make_task(assigned_to=self.u2, title='Ship report')

        response = self.client.patch(detail_url(task.id), {'assignedToId': self.u3.id}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['assignedToId'], self.u3.id)
        self.assertEqual(Notification.objects.filter(user=self.u3).count(), 1)
        self.assertEqual(Notification.objects.filter(user=self.u2).count(), 0)

        assigned = self.room_events('task:assigned')
        self.assertEqual(len(assigned), 1)
        self.assertEqual(assigned[0].args[0], self.u3.id)
        self.assertEqual(assigned[0].args[2]['type'], 'reassigned')
        self.assertEqual([c.args[0] for c in self.room_events('newNotification')], [self.u3.id])

    def test_self_assignment_creates_no_notification(self):
        task = self.make_task(assigned_to=self.u2)

        response = self.client.patch(detail_url(task.id), {'assignedToId': self.u1.id}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Notification.objects.count(), 0)
        self.emit_to_room.assert_not_called()

    def test_unchanged_assignee_creates_no_notification(self):
        task = self.make_task(assigned_to=self.u2)

        response = self.client.patch(
            detail_url(task.id),
            {'assignedToId': self.u2.id, 'title': 'New title', 'status': 'IN_PROGRESS'},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['title'], 'New title')
        self.assertEqual(Notification.objects.count(), 0)
        self.emit_to_room.assert_not_called()

    def test_other_field_changes_create_no_notification(self):
        task = self.make_task(assigned_to=self.u2)

        self.client.patch(detail_url(task.id), {'priority': 'URGENT'}, format='json')

        self.assertEqual(Notification.objects.count(), 0)
        task.refresh_from_db()
        self.assertEqual(task.assigned_to, self.u2)
        self.assertEqual(task.priority, 'URGENT')

    def test_unassigning_creates_no_notification(self):
        task = self.make_task(assigned_to=self.u2)

        response = self.client.patch(detail_url(task.id), {'assignedToId': None}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['data']['assignedToId'])
        self.assertEqual(Notification.objects.count(), 0)

    def test_update_broadcasts_task_updated(self):
        task = self.make_task()

        self.client.patch(detail_url(task.id), {'status': 'REVIEW'}, format='json')

        updated = self.broadcasts('task:updated')
        self.assertEqual(len(updated), 1)
        self.assertEqual(updated[0].args[1]['status'], 'REVIEW')

    def test_update_unknown_task_is_not_found(self):
        response = self.client.patch(detail_url(424242), {'title': 'x'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.broadcast_global.assert_not_called()


class DeleteTaskTests(TaskEndpointTestCase):

    def test_delete_broadcasts_id_without_notifications(self):
        task = self.make_task(assigned_to=self.u2)

        response = self.client.delete(detail_url(task.id))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Task.objects.filter(pk=task.id).exists())
        self.broadcast_global.assert_called_once_with('task:deleted', {'id': task.id})
        self.emit_to_room.assert_not_called()
        self.assertEqual(Notification.objects.count(), 0)

    def test_delete_unknown_task_is_not_found(self):
        response = self.client.delete(detail_url(424242))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.broadcast_global.assert_not_called()


class ReadTaskTests(TaskEndpointTestCase):

    def test_get_task(self):
        task = self.make_task(assigned_to=self.u2)

        response = self.client.get(detail_url(task.id))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['assignedTo']['username'], 'u2')
        self.assertEqual(response.data['data']['creator']['id'], self.u1.id)

    def test_get_unknown_task(self):
        response = self.client.get(detail_url(424242))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Task not found')

    def test_list_with_filters_and_scope(self):
        self.make_task(title='Mine', status=Task.STATUS_REVIEW)
        self.make_task(creator=self.u3, title='Assigned to me', assigned_to=self.u1)
        self.make_task(creator=self.u3, title='Not mine')

        everything = self.client.get(TASKS_URL)
        mine = self.client.get(TASKS_URL, {'scope': 'mine'})
        review = self.client.get(TASKS_URL, {'status': 'REVIEW'})

        self.assertEqual(len(everything.data['data']), 3)
        self.assertEqual({t['title'] for t in mine.data['data']}, {'Mine', 'Assigned to me'})
        self.assertEqual([t['title'] for t in review.data['data']], ['Mine'])

    def test_list_rejects_unknown_sort(self):
        response = self.client.get(TASKS_URL, {'sortByDueDate': 'sideways'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_overdue(self):
        self.make_task(creator=self.u3, title='Late', assigned_to=self.u1,
                       due_date=timezone.now() - timedelta(days=1))
        self.make_task(creator=self.u3, title='Fine', assigned_to=self.u1,
                       due_date=timezone.now() + timedelta(days=1))

        response = self.client.get(f'{TASKS_URL}overdue/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([t['title'] for t in response.data['data']], ['Late'])
