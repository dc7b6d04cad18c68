"""
Registration, login, profile and follow endpoints.
"""

import os

from animez.core import settings


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_register_and_read_me(client, register):
    user, headers = register("alice")

    assert user["username"] == "alice"
    assert user["is_admin"] is False
    assert "password" not in user

    me = client.get("/users/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["email"] == "alice@example.com"
    assert me.json()["follower_count"] == 0


def test_duplicate_email_and_username_rejected(client, register):
    register("alice")

    same_email = client.post(
        "/users/register",
        json={"email": "alice@example.com", "username": "alice2", "password": "secret123"},
    )
    same_name = client.post(
        "/users/register",
        json={"email": "other@example.com", "username": "alice", "password": "secret123"},
    )

    assert same_email.status_code == 400
    assert same_name.status_code == 400


def test_login_with_wrong_password(client, register):
    register("alice")

    response = client.post("/users/login", json={"email": "alice@example.com", "password": "nope-nope"})

    assert response.status_code == 401


def test_requests_without_valid_token_are_rejected(client):
    assert client.get("/users/me").status_code in (401, 403)
    bad = client.get("/users/me", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401


def test_update_profile(client, register):
    register("bob")
    _, headers = register("alice")

    response = client.put("/users/me", json={"username": "  alicia ", "bio": "Isekai fan"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["username"] == "alicia"
    assert response.json()["bio"] == "Isekai fan"

    taken = client.put("/users/me", json={"username": "bob"}, headers=headers)
    assert taken.status_code == 400


def test_upload_avatar(client, register):
    _, headers = register("alice")

    response = client.put(
        "/users/me/avatar",
        files={"file": ("me.png", b"\x89PNG fake", "image/png")},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["avatar_url"].startswith("/uploads/avatars/")


def test_upload_avatar_rejects_non_images(client, register):
    _, headers = register("alice")

    response = client.put(
        "/users/me/avatar",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=headers,
    )

    assert response.status_code == 400


def test_follow_lifecycle(client, register):
    alice, alice_headers = register("alice")
    bob, bob_headers = register("bob")

    follow = client.post(f"/users/{bob['id']}/follow", headers=alice_headers)
    assert follow.status_code == 200
    assert follow.json() == {"following": True}

    # Following twice is harmless
    assert client.post(f"/users/{bob['id']}/follow", headers=alice_headers).status_code == 200

    status = client.get(f"/users/{bob['id']}/follow", headers=alice_headers)
    assert status.json() == {"following": True}

    profile = client.get(f"/users/{bob['id']}").json()
    assert profile["follower_count"] == 1
    assert profile["following_count"] == 0

    followers = client.get(f"/users/{bob['id']}/followers").json()
    assert [u["username"] for u in followers] == ["alice"]
    following = client.get(f"/users/{alice['id']}/following").json()
    assert [u["username"] for u in following] == ["bob"]

    notifications = client.get("/notifications/", headers=bob_headers).json()
    assert notifications["unread_count"] == 1
    assert notifications["items"][0]["type"] == "follow"

    unfollow = client.delete(f"/users/{bob['id']}/follow", headers=alice_headers)
    assert unfollow.status_code == 200
    assert client.delete(f"/users/{bob['id']}/follow", headers=alice_headers).status_code == 404


def test_cannot_follow_self_or_unknown_user(client, register):
    alice, headers = register("alice")

    assert client.post(f"/users/{alice['id']}/follow", headers=headers).status_code == 400
    assert client.post("/users/does-not-exist/follow", headers=headers).status_code == 404


def test_search_orders_by_followers(client, register):
    _, alice_headers = register("alice")
    naruto_fan, _ = register("narutofan")
    register("narutolover")
    _, carol_headers = register("carol")

    client.post(f"/users/{naruto_fan['id']}/follow", headers=carol_headers)

    response = client.get("/users/search", params={"q": "NARUTO"}, headers=alice_headers)

    assert response.status_code == 200
    assert [u["username"] for u in response.json()] == ["narutofan", "narutolover"]


def test_suggested_users_excludes_self_and_followed(client, register):
    alice, alice_headers = register("alice")
    bob, _ = register("bob")
    carol, _ = register("carol")
    client.post(f"/users/{bob['id']}/follow", headers=alice_headers)

    response = client.get("/users/suggested", headers=alice_headers)

    assert [u["id"] for u in response.json()] == [carol["id"]]


def test_redeem_admin_key_once(client, register, seed_admin_key):
    _, alice_headers = register("alice")
    _, bob_headers = register("bob")
    seed_admin_key("LET-ME-IN")

    granted = client.post("/users/me/admin-key", json={"key_code": "LET-ME-IN"}, headers=alice_headers)
    assert granted.status_code == 200
    assert granted.json()["is_admin"] is True

    reused = client.post("/users/me/admin-key", json={"key_code": "LET-ME-IN"}, headers=bob_headers)
    assert reused.status_code == 400
    unknown = client.post("/users/me/admin-key", json={"key_code": "WRONG"}, headers=bob_headers)
    assert unknown.status_code == 400


def test_manage_issues_admin_key(client, register, capsys):
    from animez import manage

    _, headers = register("alice")
    manage.main(["create-admin-key", "FROM-CLI"])

    assert capsys.readouterr().out.strip() == "FROM-CLI"
    granted = client.post("/users/me/admin-key", json={"key_code": "FROM-CLI"}, headers=headers)
    assert granted.json()["is_admin"] is True


def _upload_avatar(client, headers, filename="me.png", content_type="image/png"):
    response = client.put(
        "/users/me/avatar",
        files={"file": (filename, b"\x89PNG fake", content_type)},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return response.json()["avatar_url"]


def _stored_path(url):
    return os.path.join(settings.UPLOAD_DIR, url[len("/uploads/"):])


def test_replacing_avatar_deletes_the_previous_one(client, register):
    _, headers = register("alice")
    first = _upload_avatar(client, headers)

    second = _upload_avatar(client, headers)

    assert not os.path.exists(_stored_path(first))
    assert os.path.exists(_stored_path(second))


def test_avatar_replace_never_deletes_outside_uploads(client, register):
    _, headers = register("alice")
    outside = os.path.join(os.path.dirname(os.path.realpath(settings.UPLOAD_DIR)), "keep-me.txt")
    with open(outside, "w") as f:
        f.write("not an upload")

    client.put("/users/me", json={"avatar_url": "/uploads/../keep-me.txt"}, headers=headers)
    _upload_avatar(client, headers)

    assert os.path.exists(outside)


def test_avatar_replace_never_deletes_other_users_files(client, register):
    alice, alice_headers = register("alice")
    bob, bob_headers = register("bob")
    bobs_avatar = _upload_avatar(client, bob_headers)
    name = bobs_avatar.rsplit("/", 1)[-1]

    for borrowed in (bobs_avatar, f"/uploads/avatars/{alice['id']}_x/../{name}"):
        client.put("/users/me", json={"avatar_url": borrowed}, headers=alice_headers)
        _upload_avatar(client, alice_headers)

    assert os.path.exists(_stored_path(bobs_avatar))


def test_upload_extension_follows_content_type(client, register):
    _, headers = register("alice")

    avatar = _upload_avatar(client, headers, filename="page.html")

    assert avatar.endswith(".png")
    served = client.get(avatar)
    assert served.status_code == 200
    assert served.headers["content-type"] == "image/png"
