"""
Comments on posts: replies, threading, counters and notifications.
"""

import pytest


@pytest.fixture
def post(client, register, auto_approve):
    """An approved post by alice, with headers for alice and bob."""
    _, alice_headers = register("alice")
    _, bob_headers = register("bob")
    response = client.post("/posts/", json={"content": "Best arc in One Piece?"}, headers=alice_headers)
    assert response.status_code == 201, response.text
    return response.json(), alice_headers, bob_headers


def comment(client, headers, post_id, content, parent_comment_id=None):
    payload = {"post_id": post_id, "content": content}
    if parent_comment_id is not None:
        payload["parent_comment_id"] = parent_comment_id
    return client.post("/comments/", json=payload, headers=headers)


def test_threads_are_newest_first_with_nested_replies(client, post):
    data, alice_headers, bob_headers = post
    first = comment(client, bob_headers, data["id"], "Enies Lobby").json()
    second = comment(client, alice_headers, data["id"], "Wano, no contest").json()
    reply_a = comment(client, alice_headers, data["id"], "Agreed", first["id"]).json()
    reply_b = comment(client, bob_headers, data["id"], "The gear 5 reveal", second["id"]).json()

    threads = client.get(f"/comments/post/{data['id']}", headers=bob_headers).json()

    assert [t["id"] for t in threads] == [second["id"], first["id"]]
    assert [r["id"] for r in threads[0]["replies"]] == [reply_b["id"]]
    assert [r["id"] for r in threads[1]["replies"]] == [reply_a["id"]]
    assert threads[1]["replies"][0]["parent_comment_id"] == first["id"]
    assert "replies" not in threads[1]["replies"][0]


def test_replies_inside_a_thread_are_newest_first(client, post):
    data, alice_headers, bob_headers = post
    root = comment(client, bob_headers, data["id"], "Marineford").json()
    older = comment(client, alice_headers, data["id"], "yes", root["id"]).json()
    newer = comment(client, bob_headers, data["id"], "so sad", root["id"]).json()

    threads = client.get(f"/comments/post/{data['id']}", headers=bob_headers).json()

    assert [r["id"] for r in threads[0]["replies"]] == [newer["id"], older["id"]]


def test_comment_counter_and_notification(client, post):
    data, alice_headers, bob_headers = post

    created = comment(client, bob_headers, data["id"], "  Thriller Bark  ")
    assert created.status_code == 201
    assert created.json()["content"] == "Thriller Bark"
    assert created.json()["username"] == "bob"

    assert client.get(f"/posts/{data['id']}", headers=alice_headers).json()["comment_count"] == 1

    notifications = client.get("/notifications/", headers=alice_headers).json()
    assert notifications["unread_count"] == 1
    assert notifications["items"][0]["type"] == "comment"
    assert notifications["items"][0]["post_id"] == data["id"]

    marked = client.post("/notifications/read", headers=alice_headers)
    assert marked.json()["updated"] == 1
    assert client.get("/notifications/", headers=alice_headers).json()["unread_count"] == 0


def test_reply_to_a_reply_is_rejected(client, post):
    data, alice_headers, bob_headers = post
    root = comment(client, bob_headers, data["id"], "Skypiea").json()
    reply = comment(client, alice_headers, data["id"], "underrated", root["id"]).json()

    response = comment(client, bob_headers, data["id"], "very", reply["id"])

    assert response.status_code == 400


def test_parent_must_belong_to_the_same_post(client, post):
    data, alice_headers, bob_headers = post
    other = client.post("/posts/", json={"content": "Another post"}, headers=alice_headers).json()
    root = comment(client, bob_headers, other["id"], "elsewhere").json()

    response = comment(client, bob_headers, data["id"], "misplaced", root["id"])

    assert response.status_code == 400


def test_comment_on_unknown_post(client, register):
    _, headers = register("alice")

    assert comment(client, headers, "missing", "hello").status_code == 404
    assert client.get("/comments/post/missing", headers=headers).status_code == 404


def test_blank_comment_is_rejected(client, post):
    data, _, bob_headers = post

    assert comment(client, bob_headers, data["id"], "   ").status_code == 422


def test_zero_parent_means_top_level(client, post):
    data, _, bob_headers = post

    response = comment(client, bob_headers, data["id"], "root", "0")

    assert response.status_code == 201
    assert response.json()["parent_comment_id"] is None


def test_edit_comment_only_by_author(client, post):
    data, alice_headers, bob_headers = post
    created = comment(client, bob_headers, data["id"], "Dressrosa").json()

    forbidden = client.put(f"/comments/{created['id']}", json={"content": "hijack"}, headers=alice_headers)
    assert forbidden.status_code == 404

    edited = client.put(f"/comments/{created['id']}", json={"content": "Dressrosa, honestly"}, headers=bob_headers)
    assert edited.status_code == 200
    assert edited.json()["content"] == "Dressrosa, honestly"


def test_deleting_a_root_removes_its_replies(client, post):
    data, alice_headers, bob_headers = post
    root = comment(client, bob_headers, data["id"], "Water 7").json()
    comment(client, alice_headers, data["id"], "classic", root["id"])
    comment(client, alice_headers, data["id"], "the Merry...", root["id"])
    kept = comment(client, alice_headers, data["id"], "Impel Down").json()

    assert client.delete(f"/comments/{root['id']}", headers=alice_headers).status_code == 404
    assert client.delete(f"/comments/{root['id']}", headers=bob_headers).status_code == 204

    threads = client.get(f"/comments/post/{data['id']}", headers=bob_headers).json()
    assert [t["id"] for t in threads] == [kept["id"]]
    assert client.get(f"/posts/{data['id']}", headers=alice_headers).json()["comment_count"] == 1


def test_deleting_a_reply_keeps_the_thread(client, post):
    data, alice_headers, bob_headers = post
    root = comment(client, bob_headers, data["id"], "Alabasta").json()
    reply = comment(client, alice_headers, data["id"], "Crocodile!", root["id"]).json()

    assert client.delete(f"/comments/{reply['id']}", headers=alice_headers).status_code == 204

    threads = client.get(f"/comments/post/{data['id']}", headers=bob_headers).json()
    assert [t["id"] for t in threads] == [root["id"]]
    assert threads[0]["replies"] == []
    assert client.get(f"/posts/{data['id']}", headers=alice_headers).json()["comment_count"] == 1
