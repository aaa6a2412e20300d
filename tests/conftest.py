"""
Shared fixtures: in-memory SQLite storage, cheap argon2 parameters and a
Flask test client wired to the same service.
"""
from datetime import timedelta

import pytest

from api import create_app
from models.db_storage import DBStorage
from models.user import User
from services.auth import AuthService
from utils.password_hasher import CredentialHasher
from utils.security import TokenCodec

TEST_SECRET = "test-secret-0123456789abcdef0123456789abcdef0123456789abcdef0123456789"


@pytest.fixture
def hasher():
    return CredentialHasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture
def codec():
    return TokenCodec(TEST_SECRET)


@pytest.fixture
def storage():
    s = DBStorage("sqlite://")
    s.reload()
    yield s
    s.drop_all()
    s.close()


@pytest.fixture
def service(storage, codec, hasher):
    return AuthService(store=storage, codec=codec, hasher=hasher)


@pytest.fixture
def registered_user(service):
    return service.register(User(email="a@b.com"), "pw123456")


@pytest.fixture
def app():
    app = create_app("testing")
    yield app
    app.extensions["storage"].close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_service(app):
    return app.extensions["auth_service"]


@pytest.fixture
def admin_token(app_service):
    """Access token of a freshly promoted admin user."""
    user = app_service.register(User(email="admin@b.com"), "adminpass")
    app_service.update_user_permissions(user.id, True)
    return app_service.login("admin@b.com", "adminpass").access_token


@pytest.fixture
def expired_codec():
    return TokenCodec(TEST_SECRET, access_ttl=timedelta(seconds=-5), refresh_ttl=timedelta(seconds=-5))
