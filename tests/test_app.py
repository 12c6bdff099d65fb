from blogspace.config import Settings
from blogspace.services import users as user_service
from manage_users import delete_user, set_role
from tests.conftest import TEST_SECRET


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"status_code": 200, "success": True, "message": "Hello World"}


def test_health_reports_database(client):
    response = client.get("/health")

    assert response.status_code == 200
    database = response.json()["data"]["database"]
    assert database["status"] == "up"
    assert database["message"] == "Database is healthy"
    assert "latency_ms" in database


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_database_settings_fall_back_to_defaults():
    settings = Settings(JWT_SECRET=TEST_SECRET, DB_HOST=None)

    assert settings.DB_HOST is not None
    assert settings.database_url.startswith("postgresql+psycopg2://")


def test_database_url_override_wins():
    settings = Settings(JWT_SECRET=TEST_SECRET, DATABASE_URL="sqlite://")

    assert settings.database_url == "sqlite://"


def test_manage_users_promote_and_delete(app, db_session, signup):
    _, alice = signup("alice")
    database = app.state.db

    assert set_role("alice@example.com", "admin", database=database)
    assert user_service.get_user(db_session, alice["id"]).role == "admin"

    assert delete_user("alice@example.com", database=database)
    db_session.expire_all()
    assert user_service.get_user(db_session, alice["id"]) is None
    assert not delete_user("alice@example.com", database=database)
