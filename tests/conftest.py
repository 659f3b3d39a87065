import os

# Must be set before models (and its DBStorage singleton) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("APP_ENV", "testing")

import pytest  # noqa: E402

from api import create_app  # noqa: E402
from models import storage  # noqa: E402
from models.user import User  # noqa: E402

PASSWORD = "s3cr3t!"


@pytest.fixture(autouse=True)
def clean_db():
    storage.reset()
    yield
    storage.get_session().rollback()
    storage.reset()
    storage.close()


@pytest.fixture
def app():
    return create_app("testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(client):
    """Register a user through the API and return its JSON body."""
    def _make(email="walt@breakingbad.com", password=PASSWORD):
        res = client.post("/api/users", json={"email": email, "password": password})
        assert res.status_code == 201, res.get_json()
        return res.get_json()

    return _make


@pytest.fixture
def login(client):
    """Log in and return the JSON body carrying token and refresh_token."""
    def _login(email="walt@breakingbad.com", password=PASSWORD):
        res = client.post("/api/login", json={"email": email, "password": password})
        assert res.status_code == 200, res.get_json()
        return res.get_json()

    return _login


@pytest.fixture
def db_user():
    """A user row created directly in storage (for store-level tests)."""
    user = User(email="jesse@breakingbad.com", hashed_password="not-a-real-hash")
    storage.new(user)
    storage.save()
    return user


def bearer(token):
    return {"Authorization": f"Bearer {token}"}
