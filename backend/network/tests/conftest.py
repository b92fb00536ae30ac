import pytest
from rest_framework.test import APIClient

from network.realtime import registry
from network.tests.fixtures import UserFactory
from network.tokens import issue_token
from proconnect.celery import app as celery_app


@pytest.fixture(autouse=True)
def eager_celery():
    """Run Celery tasks inline so tests never need a broker."""
    previous = celery_app.conf.task_always_eager
    celery_app.conf.task_always_eager = True
    yield
    celery_app.conf.task_always_eager = previous


@pytest.fixture(autouse=True)
def fast_password_hasher(settings):
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']


@pytest.fixture(autouse=True)
def clean_registry():
    registry.clear()
    yield
    registry.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user(db):
    return UserFactory(first_name='Ada', last_name='Lovelace')


@pytest.fixture
def other_user(db):
    return UserFactory(first_name='Grace', last_name='Hopper')


@pytest.fixture
def auth_client(user):
    """Client carrying a real bearer token for ``user``."""
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_token(user)}')
    return client


@pytest.fixture
def client_for():
    def _make(account):
        client = APIClient()
        client.force_authenticate(user=account)
        return client
    return _make
