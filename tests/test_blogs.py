from blogspace.models import Comment, Like, View
from tests.conftest import create_blog, create_comment


def test_create_blog(signup):
    client, user = signup("alice")

    blog = create_blog(client, title="  Hello  ", content="World")

    assert blog["title"] == "Hello"
    assert blog["author"] == "alice"
    assert blog["user_id"] == user["id"]
    assert blog["likes"] == 0
    assert blog["views"] == 0


def test_create_blog_rejects_blank_title(signup):
    client, _ = signup("alice")

    response = client.post("/api/blog", json={"title": "   ", "content": "x"})

    assert response.status_code == 400


def test_create_blog_requires_login(client):
    response = client.post("/api/blog", json={"title": "t", "content": "c"})

    assert response.status_code == 401


def test_list_blogs_newest_first(signup):
    alice, alice_user = signup("alice")
    bob, _ = signup("bob")
    create_blog(alice, title="first")
    create_blog(bob, title="second")

    listed = alice.get("/api/blog").json()["data"]["blogs"]
    listed_all = alice.get("/api/blog/all").json()["data"]["blogs"]
    mine = alice.get(f"/api/blog?user_id={alice_user['id']}").json()["data"]["blogs"]

    assert [b["title"] for b in listed] == ["second", "first"]
    assert listed_all == listed
    assert [b["title"] for b in mine] == ["first"]


def test_get_blog_includes_author(signup):
    client, user = signup("alice")
    blog = create_blog(client)

    response = client.get(f"/api/blog/b/{blog['id']}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["blog"]["id"] == blog["id"]
    assert data["user"]["id"] == user["id"]
    assert "password" not in data["user"]


def test_get_missing_blog(signup):
    client, _ = signup("alice")

    assert client.get("/api/blog/b/9999").status_code == 404


def test_owner_updates_blog(signup):
    client, _ = signup("alice")
    blog = create_blog(client)

    response = client.put(f"/api/blog/b/{blog['id']}", json={"content": "Edited"})

    assert response.status_code == 200
    assert response.json()["data"]["blog"]["content"] == "Edited"
    assert response.json()["data"]["blog"]["title"] == blog["title"]


def test_update_requires_a_field(signup):
    client, _ = signup("alice")
    blog = create_blog(client)

    assert client.put(f"/api/blog/b/{blog['id']}", json={}).status_code == 400


def test_non_owner_cannot_update_or_delete_blog(signup):
    alice, _ = signup("alice")
    bob, _ = signup("bob")
    blog = create_blog(alice)

    update = bob.put(f"/api/blog/b/{blog['id']}", json={"title": "hijacked"})
    delete = bob.delete(f"/api/blog/b/{blog['id']}")

    assert update.status_code == 404
    assert update.json()["message"] == "Blog not found or not owned by user"
    assert delete.status_code == 404
    assert alice.get(f"/api/blog/b/{blog['id']}").json()["data"]["blog"]["title"] == blog["title"]


def test_owner_deletes_blog(signup):
    client, _ = signup("alice")
    blog = create_blog(client)

    assert client.delete(f"/api/blog/b/{blog['id']}").status_code == 200
    assert client.get(f"/api/blog/b/{blog['id']}").status_code == 404


def test_view_is_counted_once_per_user(signup):
    alice, _ = signup("alice")
    bob, _ = signup("bob")
    blog = create_blog(alice)

    first = alice.post(f"/api/blog/{blog['id']}/view")
    second = alice.post(f"/api/blog/{blog['id']}/view")
    third = bob.post(f"/api/blog/{blog['id']}/view")

    assert first.status_code == 200
    assert first.json()["data"] == {"views": 1, "created": True}
    assert second.status_code == 200
    assert second.json()["data"] == {"views": 1, "created": False}
    assert third.json()["data"]["views"] == 2
    assert alice.get(f"/api/blog/b/{blog['id']}").json()["data"]["blog"]["views"] == 2


def test_view_on_missing_blog(signup):
    client, _ = signup("alice")

    assert client.post("/api/blog/9999/view").status_code == 404


def test_deleting_blog_removes_dependents(signup, db_session):
    alice, _ = signup("alice")
    bob, _ = signup("bob")
    blog = create_blog(alice)
    comment = create_comment(bob, blog["id"])
    bob.post("/api/blog/like", json={"blog_id": blog["id"]})
    bob.post(f"/api/blog/{blog['id']}/view")

    assert alice.delete(f"/api/blog/b/{blog['id']}").status_code == 200

    assert bob.get(f"/api/comment/{comment['id']}").status_code == 404
    assert db_session.query(Comment).filter(Comment.blog_id == blog["id"]).count() == 0
    assert db_session.query(Like).filter(Like.blog_id == blog["id"]).count() == 0
    assert db_session.query(View).filter(View.blog_id == blog["id"]).count() == 0


def test_deleting_user_removes_everything_they_own(signup, db_session):
    alice, _ = signup("alice")
    bob, bob_user = signup("bob")
    alice_blog = create_blog(alice)
    bob_blog = create_blog(bob)
    create_comment(bob, alice_blog["id"])
    create_comment(alice, bob_blog["id"])
    alice.post("/api/blog/like", json={"blog_id": bob_blog["id"]})
    alice.post(f"/api/user/follow/{bob_user['id']}")

    assert alice.delete("/api/user").status_code == 200

    assert bob.get(f"/api/blog/b/{alice_blog['id']}").status_code == 404
    assert bob.get("/api/user").json()["data"]["user"]["followers"] == []
    assert bob.get(f"/api/blog/b/{bob_blog['id']}").json()["data"]["blog"]["likes"] == 0
    assert db_session.query(Comment).count() == 0
    assert db_session.query(Like).count() == 0
