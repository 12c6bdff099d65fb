from tests.conftest import create_blog, create_comment


def test_create_and_list_comments(signup):
    alice, _ = signup("alice")
    bob, bob_user = signup("bob")
    blog = create_blog(alice)

    first = create_comment(bob, blog["id"], "Great read")
    create_comment(alice, blog["id"], "Thanks!")

    assert first["author"] == "bob"
    assert first["user_id"] == bob_user["id"]
    listed = alice.get(f"/api/blog/{blog['id']}/comments").json()["data"]["comments"]
    assert [c["content"] for c in listed] == ["Great read", "Thanks!"]


def test_comment_must_have_three_characters(signup):
    client, _ = signup("alice")
    blog = create_blog(client)

    too_short = client.post(f"/api/blog/{blog['id']}/comments", json={"content": "hi"})
    padded = client.post(f"/api/blog/{blog['id']}/comments", json={"content": "  hi  "})

    assert too_short.status_code == 400
    assert padded.status_code == 400


def test_comment_on_missing_blog(signup):
    client, _ = signup("alice")

    response = client.post("/api/blog/9999/comments", json={"content": "hello"})

    assert response.status_code == 404


def test_get_comment(signup):
    client, _ = signup("alice")
    comment = create_comment(client, create_blog(client)["id"])

    assert client.get(f"/api/comment/{comment['id']}").json()["data"]["comment"]["id"] == comment["id"]
    assert client.get("/api/comment/9999").status_code == 404


def test_owner_updates_comment(signup):
    client, _ = signup("alice")
    comment = create_comment(client, create_blog(client)["id"])

    response = client.put(f"/api/comment/{comment['id']}", json={"content": "Edited comment"})

    assert response.status_code == 200
    assert response.json()["data"]["comment"]["content"] == "Edited comment"


def test_non_owner_cannot_touch_comment(signup):
    alice, _ = signup("alice")
    bob, _ = signup("bob")
    comment = create_comment(alice, create_blog(alice)["id"], "Original")

    update = bob.put(f"/api/comment/{comment['id']}", json={"content": "Hijacked"})
    delete = bob.delete(f"/api/comment/{comment['id']}")
    delete_by_body = bob.request("DELETE", "/api/comment", json={"comment_id": comment["id"]})

    for response in (update, delete, delete_by_body):
        assert response.status_code == 404
        assert response.json()["message"] == "Comment not found or not owned by user"
    assert alice.get(f"/api/comment/{comment['id']}").json()["data"]["comment"]["content"] == "Original"


def test_owner_deletes_comment(signup):
    client, _ = signup("alice")
    blog = create_blog(client)
    by_path = create_comment(client, blog["id"])
    by_body = create_comment(client, blog["id"])

    assert client.delete(f"/api/comment/{by_path['id']}").status_code == 200
    assert client.request("DELETE", "/api/comment", json={"comment_id": by_body["id"]}).status_code == 200
    assert client.get(f"/api/blog/{blog['id']}/comments").json()["data"]["comments"] == []
