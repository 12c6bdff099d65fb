import pytest

from tests.conftest import create_blog, create_comment, login

ADMIN_ROUTES = [
    ("GET", "/api/admin/dashboard"),
    ("GET", "/api/admin/users"),
    ("GET", "/api/admin/blogs"),
    ("GET", "/api/admin/comments"),
    ("DELETE", "/api/admin/user/1"),
]


@pytest.mark.parametrize("method,path", ADMIN_ROUTES)
def test_admin_routes_reject_anonymous(client, method, path):
    assert client.request(method, path).status_code == 401


@pytest.mark.parametrize("method,path", ADMIN_ROUTES)
def test_admin_routes_reject_authors(signup, method, path):
    client, _ = signup("alice")

    response = client.request(method, path)

    assert response.status_code == 403
    assert response.json()["message"] == "Access denied, admin role required"


def test_dashboard_counts(admin, signup):
    admin_client, _ = admin
    alice, _ = signup("alice")
    blog = create_blog(alice)
    create_blog(alice, title="Second")
    create_comment(alice, blog["id"])

    response = admin_client.get("/api/admin/dashboard")

    assert response.status_code == 200
    assert response.json()["data"]["dashboard"] == {
        "total_users": 2,
        "total_blogs": 2,
        "total_comments": 1,
    }


def test_admin_lists_sanitized_users(admin, signup):
    admin_client, _ = admin
    signup("alice")

    users = admin_client.get("/api/admin/users").json()["data"]["users"]

    assert {u["username"] for u in users} == {"root_admin", "alice"}
    assert all("password" not in u for u in users)


def test_admin_gets_user(admin):
    admin_client, admin_user = admin

    assert admin_client.get(f"/api/admin/user/{admin_user['id']}").json()["data"]["user"]["role"] == "admin"
    assert admin_client.get("/api/admin/user/9999").status_code == 404


def test_admin_promotes_user(admin, signup, make_client):
    admin_client, _ = admin
    alice, alice_user = signup("alice")

    response = admin_client.put("/api/admin/user", json={"id": alice_user["id"], "role": "admin"})

    assert response.status_code == 200
    assert response.json()["data"]["user"]["role"] == "admin"
    # The old session still carries the author role
    assert alice.get("/api/admin/dashboard").status_code == 403
    fresh = make_client()
    login(fresh, "alice")
    assert fresh.get("/api/admin/dashboard").status_code == 200


def test_admin_update_user_validation(admin, signup):
    admin_client, _ = admin
    _, alice = signup("alice")

    bad_role = admin_client.put("/api/admin/user", json={"id": alice["id"], "role": "superuser"})
    taken = admin_client.put("/api/admin/user", json={"id": alice["id"], "email": "root_admin@example.com"})
    missing = admin_client.put("/api/admin/user", json={"id": 9999, "username": "ghost"})
    empty = admin_client.put("/api/admin/user", json={"id": alice["id"]})

    assert bad_role.status_code == 400
    assert taken.status_code == 409
    assert missing.status_code == 404
    assert empty.status_code == 400


def test_admin_deletes_user(admin, signup):
    admin_client, _ = admin
    alice, alice_user = signup("alice")
    create_blog(alice)

    assert admin_client.delete(f"/api/admin/user/{alice_user['id']}").status_code == 200
    assert admin_client.delete(f"/api/admin/user/{alice_user['id']}").status_code == 404
    assert admin_client.get("/api/admin/blogs").json()["data"]["blogs"] == []


def test_admin_manages_any_blog(admin, signup):
    admin_client, _ = admin
    alice, alice_user = signup("alice")
    blog = create_blog(alice)

    fetched = admin_client.get(f"/api/admin/blog/{blog['id']}").json()["data"]
    updated = admin_client.put("/api/admin/blog", json={"id": blog["id"], "title": "Moderated"})
    missing = admin_client.put("/api/admin/blog", json={"id": 9999, "title": "x"})

    assert fetched["user"]["id"] == alice_user["id"]
    assert updated.status_code == 200
    assert updated.json()["data"]["blog"]["title"] == "Moderated"
    assert missing.status_code == 404

    assert admin_client.delete(f"/api/admin/blog/{blog['id']}").status_code == 200
    assert admin_client.get(f"/api/admin/blog/{blog['id']}").status_code == 404


def test_admin_manages_any_comment(admin, signup):
    admin_client, _ = admin
    alice, _ = signup("alice")
    comment = create_comment(alice, create_blog(alice)["id"], "Spammy comment")

    listed = admin_client.get("/api/admin/comments").json()["data"]["comments"]
    updated = admin_client.put("/api/admin/comment", json={"id": comment["id"], "content": "[removed]"})

    assert [c["id"] for c in listed] == [comment["id"]]
    assert updated.json()["data"]["comment"]["content"] == "[removed]"
    assert admin_client.put("/api/admin/comment", json={"id": 9999, "content": "abc"}).status_code == 404

    assert admin_client.delete(f"/api/admin/comment/{comment['id']}").status_code == 200
    assert admin_client.delete(f"/api/admin/comment/{comment['id']}").status_code == 404


def test_admin_rename_rejects_at_sign_and_updates_posts(admin, signup):
    admin_client, _ = admin
    alice, alice_user = signup("alice")
    blog = create_blog(alice)

    rejected = admin_client.put("/api/admin/user", json={"id": alice_user["id"], "username": "alice@home"})
    renamed = admin_client.put("/api/admin/user", json={"id": alice_user["id"], "username": "alice_mod"})

    assert rejected.status_code == 400
    assert renamed.status_code == 200
    assert admin_client.get(f"/api/admin/blog/{blog['id']}").json()["data"]["blog"]["author"] == "alice_mod"
