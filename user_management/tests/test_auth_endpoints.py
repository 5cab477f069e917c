"""
Tests for registration, login and profile endpoints.
"""

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

User = get_user_model()

REGISTER_URL = '/api/v1/auth/register/'
LOGIN_URL = '/api/v1/auth/login/'
LOGOUT_URL = '/api/v1/auth/logout/'
REFRESH_URL = '/api/v1/auth/refresh/'
ME_URL = '/api/v1/users/me/'
USERS_URL = '/api/v1/users/'


class RegisterTests(TestCase):

    def setUp(self):
        self.client = APIClient()

    def payload(self, **overrides):
        data = {
            'username': 'Alice',
            'name': 'Alice Example',
            'email': 'Alice@Example.com',
            'password': 'Str0ng!pass',
        }
        data.update(overrides)
        return data

    def test_register_returns_token_and_user(self):
        response = self.client.post(REGISTER_URL, self.payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['username'], 'alice')
        self.assertEqual(response.data['data']['email'], 'alice@example.com')
        self.assertNotIn('password', response.data['data'])
        self.assertTrue(response.data['token'])
        self.assertTrue(User.objects.get(username='alice').check_password('Str0ng!pass'))

    def test_duplicate_username_is_conflict(self):
        self.client.post(REGISTER_URL, self.payload(), format='json')

        response = self.client.post(
            REGISTER_URL, self.payload(username='ALICE', email='other@example.com'), format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(User.objects.count(), 1)

    def test_duplicate_email_is_conflict(self):
        self.client.post(REGISTER_URL, self.payload(), format='json')

        response = self.client.post(REGISTER_URL, self.payload(username='alice2'), format='json')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_weak_password_is_bad_request(self):
        response = self.client.post(REGISTER_URL, self.payload(password='short'), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.data['errors'])

    def test_missing_name_is_bad_request(self):
        data = self.payload()
        del data['name']

        response = self.client.post(REGISTER_URL, data, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class LoginTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            username='bob', password='Str0ng!pass', email='bob@example.com', name='Bob'
        )

    def test_login_returns_usable_token(self):
        response = self.client.post(
            LOGIN_URL, {'username': 'BOB', 'password': 'Str0ng!pass'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['id'], self.user.id)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['token']}")
        me = self.client.get(ME_URL)
        self.assertEqual(me.status_code, status.HTTP_200_OK)
        self.assertEqual(me.data['data']['username'], 'bob')

    def test_wrong_password_is_unauthorized(self):
        response = self.client.post(
            LOGIN_URL, {'username': 'bob', 'password': 'wrong'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertNotIn('token', response.data)

    def test_inactive_user_cannot_login(self):
        self.user.is_active = False
        self.user.save()

        response = self.client.post(
            LOGIN_URL, {'username': 'bob', 'password': 'Str0ng!pass'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class ProfileTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            username='carol', password='Str0ng!pass', email='carol@example.com', name='Carol'
        )
        self.other = User.objects.create_user(
            username='dave', password='Str0ng!pass', email='dave@example.com', name='Dave'
        )
        self.client.force_authenticate(user=self.user)

    def test_me_has_created_at(self):
        response = self.client.get(ME_URL)

        self.assertEqual(response.data['data']['name'], 'Carol')
        self.assertIn('createdAt', response.data['data'])

    def test_patch_name(self):
        response = self.client.patch(ME_URL, {'name': 'Caroline'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.name, 'Caroline')

    def test_patch_username_is_ignored(self):
        self.client.patch(ME_URL, {'username': 'hijack'}, format='json')

        self.user.refresh_from_db()
        self.assertEqual(self.user.username, 'carol')

    def test_patch_email_clash(self):
        response = self.client.patch(ME_URL, {'email': 'DAVE@example.com'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_user_directory_lists_active_users(self):
        User.objects.create_user(username='erin', password='x', email='erin@example.com', is_active=False)

        response = self.client.get(USERS_URL)

        self.assertEqual([u['username'] for u in response.data['data']], ['carol', 'dave'])

    def test_directory_requires_authentication(self):
        self.client.force_authenticate(user=None)

        self.assertEqual(self.client.get(USERS_URL).status_code, status.HTTP_401_UNAUTHORIZED)


class LogoutTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            username='frank', password='Str0ng!pass', email='frank@example.com', name='Frank'
        )
        login = self.client.post(
            LOGIN_URL, {'username': 'frank', 'password': 'Str0ng!pass'}, format='json'
        )
        self.refresh = login.data['refresh']
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['token']}")

    def test_refresh_works_before_logout(self):
        response = self.client.post(REFRESH_URL, {'refresh': self.refresh}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_logout_blacklists_refresh_token(self):
        response = self.client.post(LOGOUT_URL, {'refresh': self.refresh}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Logged out successfully')

        refreshed = self.client.post(REFRESH_URL, {'refresh': self.refresh}, format='json')
        self.assertEqual(refreshed.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_without_refresh_token_is_ok(self):
        response = self.client.post(LOGOUT_URL, {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_logout_with_garbage_token_is_bad_request(self):
        response = self.client.post(LOGOUT_URL, {'refresh': 'not-a-token'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cannot_blacklist_another_users_token(self):
        other = User.objects.create_user(
            username='gina', password='Str0ng!pass', email='gina@example.com', name='Gina'
        )
        other_refresh = str(RefreshToken.for_user(other))

        response = self.client.post(LOGOUT_URL, {'refresh': other_refresh}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        refreshed = self.client.post(REFRESH_URL, {'refresh': other_refresh}, format='json')
        self.assertEqual(refreshed.status_code, status.HTTP_200_OK)

    def test_logout_requires_authentication(self):
        self.client.credentials()

        response = self.client.post(LOGOUT_URL, {'refresh': self.refresh}, format='json')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
