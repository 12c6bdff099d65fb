import pytest
from fastapi.testclient import TestClient

from blogspace.config import Settings
from blogspace.main import create_app
from blogspace.models.user import ROLE_ADMIN
from blogspace.services import users as user_service

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"
PASSWORD = "secret123"


@pytest.fixture
def settings():
    return Settings(DATABASE_URL="sqlite://", JWT_SECRET=TEST_SECRET, LOG_LEVEL="WARNING")


@pytest.fixture
def app(settings):
    app = create_app(settings)
    yield app
    app.state.db.close()


@pytest.fixture
def db_session(app):
    db = app.state.db.session()
    yield db
    db.close()


@pytest.fixture
def make_client(app):
    """Each client keeps its own cookie jar, so one client is one logged-in user."""
    clients = []

    def _make():
        client = TestClient(app, base_url="https://testserver")
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def client(make_client):
    return make_client()


def register(client, username, email=None, password=PASSWORD):
    return client.post(
        "/api/register",
        json={"username": username, "email": email or f"{username}@example.com", "password": password},
    )


def login(client, identifier, password=PASSWORD):
    return client.post("/api/login", json={"identifier": identifier, "password": password})


@pytest.fixture
def signup(make_client):
    """Register and log in a user; returns (client, sanitized user)."""

    def _signup(username):
        client = make_client()
        assert register(client, username).status_code == 201
        response = login(client, username)
        assert response.status_code == 200
        return client, response.json()["data"]["user"]

    return _signup


@pytest.fixture
def admin(app, make_client, signup):
    _, user = signup("root_admin")
    db = app.state.db.session()
    try:
        user_service.update_user(db, user["id"], {"role": ROLE_ADMIN}, allowed=("role",))
    finally:
        db.close()

    # Role lives in the token, so log in again after the promotion
    client = make_client()
    assert login(client, "root_admin").status_code == 200
    return client, user


def create_blog(client, title="Hello", content="First post"):
    response = client.post("/api/blog", json={"title": title, "content": content})
    assert response.status_code == 201
    return response.json()["data"]["blog"]


def create_comment(client, blog_id, content="Nice post"):
    response = client.post(f"/api/blog/{blog_id}/comments", json={"content": content})
    assert response.status_code == 201
    return response.json()["data"]["comment"]
