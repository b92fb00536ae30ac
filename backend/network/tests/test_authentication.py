from unittest import mock

import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework.test import APIClient

from network.tests.fixtures import DEFAULT_PASSWORD, UserFactory
from network.tokens import InvalidToken, decode_token, issue_token

User = get_user_model()


@pytest.mark.django_db
class TestRegistration:
    def setup_method(self):
        self.client = APIClient()
        self.url = reverse('register')

    def test_register_creates_account_profile_and_token(self):
        payload = {
            'name': 'Jane Doe',
            'email': 'Jane@Example.com',
            'password': 'secret1',
            'headline': 'Backend engineer',
        }
        resp = self.client.post(self.url, payload, format='json')
        assert resp.status_code == 201
        data = resp.json()
        assert data['token']
        assert data['user']['email'] == 'jane@example.com'
        assert data['user']['name'] == 'Jane Doe'
        assert data['user']['headline'] == 'Backend engineer'
        assert data['user']['is_admin'] is False

        user = User.objects.get(email='jane@example.com')
        assert user.username == 'jane@example.com'
        assert user.check_password('secret1')
        assert user.profile.headline == 'Backend engineer'
        assert decode_token(data['token'])['sub'] == str(user.pk)

    def test_register_rejects_duplicate_email(self):
        UserFactory(email='taken@example.com')
        resp = self.client.post(
            self.url,
            {'name': 'Someone', 'email': 'TAKEN@example.com', 'password': 'secret1'},
            format='json',
        )
        assert resp.status_code == 400
        assert resp.json()['error']['code'] == 'conflict'
        assert User.objects.filter(email__iexact='taken@example.com').count() == 1

    def test_concurrent_duplicate_registration_is_a_conflict(self):
        # Another request registered the email after the existence check ran
        UserFactory(email='race@example.com', username='race@example.com')

        with mock.patch.object(User.objects, 'filter') as lookup:
            lookup.return_value.exists.return_value = False
            resp = self.client.post(
                self.url,
                {'name': 'Racer', 'email': 'race@example.com', 'password': 'secret1'},
                format='json',
            )
        assert resp.status_code == 400
        assert resp.json()['error']['code'] == 'conflict'
        assert User.objects.filter(email='race@example.com').count() == 1

    def test_register_rejects_short_password(self):
        resp = self.client.post(
            self.url,
            {'name': 'Short', 'email': 'short@example.com', 'password': '123'},
            format='json',
        )
        assert resp.status_code == 400
        error = resp.json()['error']
        assert error['code'] == 'validation_error'
        assert 'password' in error['details']
        assert not User.objects.filter(email='short@example.com').exists()

    def test_register_requires_name_email_password(self):
        resp = self.client.post(self.url, {}, format='json')
        assert resp.status_code == 400
        details = resp.json()['error']['details']
        assert {'name', 'email', 'password'} <= set(details)


@pytest.mark.django_db
class TestLogin:
    def setup_method(self):
        self.client = APIClient()
        self.url = reverse('login')

    def test_login_returns_token(self):
        user = UserFactory(email='login@example.com')
        resp = self.client.post(self.url, {'email': 'login@example.com', 'password': DEFAULT_PASSWORD}, format='json')
        assert resp.status_code == 200
        data = resp.json()
        assert data['user']['id'] == user.pk
        assert decode_token(data['token'])['sub'] == str(user.pk)

    def test_login_with_wrong_password_is_rejected(self):
        UserFactory(email='login@example.com')
        resp = self.client.post(self.url, {'email': 'login@example.com', 'password': 'wrong-pass'}, format='json')
        assert resp.status_code == 400
        assert resp.json()['error']['code'] == 'invalid_credentials'

    def test_login_unknown_email_is_rejected(self):
        resp = self.client.post(self.url, {'email': 'nobody@example.com', 'password': 'whatever'}, format='json')
        assert resp.status_code == 400


@pytest.mark.django_db
class TestBearerAuthentication:
    def test_me_requires_credentials(self):
        resp = APIClient().get(reverse('current-user'))
        assert resp.status_code == 401
        assert resp.json()['error']['code'] == 'not_authenticated'

    def test_me_with_valid_token(self, auth_client, user):
        resp = auth_client.get(reverse('current-user'))
        assert resp.status_code == 200
        data = resp.json()
        assert data['user']['id'] == user.pk
        assert data['profile']['email'] == user.email
        assert data['profile']['connections'] == []

    def test_garbage_token_is_401(self):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        resp = client.get(reverse('current-user'))
        assert resp.status_code == 401
        assert resp.json()['error']['code'] == 'authentication_failed'

    def test_token_for_inactive_account_is_rejected(self, user):
        token = issue_token(user)
        user.is_active = False
        user.save()
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        assert client.get(reverse('current-user')).status_code == 401

    def test_decode_rejects_tampered_token(self, user):
        token = issue_token(user)
        with pytest.raises(InvalidToken):
            decode_token(token[:-2] + ('A' if token[-2] != 'A' else 'B') + token[-1])

    def test_expired_token(self, user, settings):
        settings.JWT_EXPIRATION_DAYS = -1
        token = issue_token(user)
        with pytest.raises(InvalidToken, match='expired'):
            decode_token(token)


@pytest.mark.django_db
class TestChangePassword:
    def test_change_password(self, auth_client, user):
        resp = auth_client.post(
            reverse('change-password'),
            {'current_password': DEFAULT_PASSWORD, 'new_password': 'brand-new-pass'},
            format='json',
        )
        assert resp.status_code == 200
        user.refresh_from_db()
        assert user.check_password('brand-new-pass')

    def test_wrong_current_password(self, auth_client, user):
        resp = auth_client.post(
            reverse('change-password'),
            {'current_password': 'nope', 'new_password': 'brand-new-pass'},
            format='json',
        )
        assert resp.status_code == 400
        assert 'current_password' in resp.json()['error']['details']
        user.refresh_from_db()
        assert user.check_password(DEFAULT_PASSWORD)


@pytest.mark.django_db
def test_health_is_public():
    resp = APIClient().get(reverse('health'))
    assert resp.status_code == 200
    assert resp.json()['status'] == 'ok'


@pytest.mark.django_db
def test_passwords_are_stored_with_bcrypt(settings):
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.BCryptSHA256PasswordHasher']
    resp = APIClient().post(
        reverse('register'),
        {'name': 'Bea Crypt', 'email': 'bea@example.com', 'password': 'secret1'},
        format='json',
    )
    assert resp.status_code == 201
    user = User.objects.get(email='bea@example.com')
    assert user.password.startswith('bcrypt_sha256$')
    assert user.check_password('secret1')
