"""Account API tests.

Learn: Tests cover:
1. Signup validation (empty fields, email format, password length)
2. Duplicate username/email → 409
3. Login → session token whose claims match the account
4. Undifferentiated login failures
5. Owner-only profile update and cascading delete
"""

import uuid

import pytest


def _unique(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


# ═══════════════════════════════════════════════════════════
# Signup
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_signup_user(client):
    username = _unique("alice")
    r = await client.post(
        "/api/signup",
        json={
            "username": username,
            "email": f"{username}@example.com",
            "password": "longenough1",
        },
    )
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "User created successfully"
    user = body["user"]
    assert user["username"] == username
    assert user["email"] == f"{username}@example.com"
    assert isinstance(user["id"], int)
    assert "password" not in user
    assert "password_hash" not in user


@pytest.mark.asyncio
async def test_signup_rejects_bad_email(client):
    r = await client.post(
        "/api/signup",
        json={"username": "bob", "email": "not-an-email", "password": "longenough1"},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid email format"


@pytest.mark.asyncio
async def test_signup_rejects_seven_char_password(client):
    r = await client.post(
        "/api/signup",
        json={"username": "bob", "email": "bob@example.com", "password": "short1x"},
    )
    assert r.status_code == 400
    assert "at least 8" in r.json()["detail"]


@pytest.mark.asyncio
async def test_signup_rejects_short_password(client):
    r = await client.post(
        "/api/signup",
        json={"username": "bob", "email": "bob@example.com", "password": "short1"},
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_signup_requires_all_fields(client):
    r = await client.post(
        "/api/signup",
        json={"username": "", "email": "bob@example.com", "password": "longenough1"},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "All fields are required"


@pytest.mark.asyncio
async def test_signup_malformed_body(client):
    r = await client.post("/api/signup", json={"username": ["not", "a", "string"]})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_signup_duplicate_email(client):
    email = f"{_unique('dup')}@example.com"
    r1 = await client.post(
        "/api/signup",
        json={"username": _unique("one"), "email": email, "password": "password_123"},
    )
    assert r1.status_code == 200

    r2 = await client.post(
        "/api/signup",
        json={"username": _unique("two"), "email": email, "password": "password_123"},
    )
    assert r2.status_code == 409
    assert r2.json()["detail"] == "Email already in use"


@pytest.mark.asyncio
async def test_signup_duplicate_username(client):
    username = _unique("taken")
    r1 = await client.post(
        "/api/signup",
        json={"username": username, "email": f"{_unique('a')}@example.com", "password": "password_123"},
    )
    assert r1.status_code == 200

    r2 = await client.post(
        "/api/signup",
        json={"username": username, "email": f"{_unique('b')}@example.com", "password": "password_123"},
    )
    assert r2.status_code == 409
    assert r2.json()["detail"] == "Username already taken"


# ═══════════════════════════════════════════════════════════
# Login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_token_carries_account_id(client, token_service):
    username = _unique("login")
    email = f"{username}@example.com"
    r = await client.post(
        "/api/signup",
        json={"username": username, "email": email, "password": "my_password_123"},
    )
    user_id = r.json()["user"]["id"]

    r = await client.post("/api/login", json={"email": email, "password": "my_password_123"})
    assert r.status_code == 200
    body = r.json()
    assert body["token_type"] == "bearer"

    claims = token_service.verify(body["token"])
    assert claims.user_id == user_id
    assert claims.username == username
    assert claims.email == email


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client, register):
    user, _ = await register(password="correct_password")

    wrong = await client.post(
        "/api/login", json={"email": user["email"], "password": "wrong_password"}
    )
    unknown = await client.post(
        "/api/login", json={"email": "nobody@example.com", "password": "whatever1"}
    )
    assert wrong.status_code == 401
    assert unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"detail": "Invalid email or password"}


@pytest.mark.asyncio
async def test_login_requires_fields(client):
    r = await client.post("/api/login", json={"email": "", "password": ""})
    assert r.status_code == 400


# ═══════════════════════════════════════════════════════════
# Profiles
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_get_users_and_user(client, register):
    user, _ = await register()

    r = await client.get("/api/get_users")
    assert r.status_code == 200
    assert [u["id"] for u in r.json()] == [user["id"]]

    r = await client.get(f"/api/get_user/{user['id']}")
    assert r.status_code == 200
    assert r.json()["username"] == user["username"]
    assert "password_hash" not in r.json()


@pytest.mark.asyncio
async def test_get_unknown_user(client):
    r = await client.get("/api/get_user/9999")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_update_requires_token(client, register):
    user, _ = await register()
    r = await client.put(f"/api/users/{user['id']}", json={"username": "new-name"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_update_other_account_forbidden(client, register):
    alice, _ = await register()
    _, mallory_headers = await register()

    r = await client.put(
        f"/api/users/{alice['id']}",
        json={"username": "hijacked"},
        headers=mallory_headers,
    )
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_update_is_partial(client, register):
    user, headers = await register()
    new_name = _unique("renamed")

    r = await client.put(
        f"/api/users/{user['id']}",
        json={"username": new_name, "email": ""},
        headers=headers,
    )
    assert r.status_code == 200
    assert r.json()["username"] == new_name
    assert r.json()["email"] == user["email"]


@pytest.mark.asyncio
async def test_update_rejects_bad_email(client, register):
    user, headers = await register()
    r = await client.put(
        f"/api/users/{user['id']}", json={"email": "nope"}, headers=headers
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_update_conflicting_email(client, register):
    alice, alice_headers = await register()
    bob, _ = await register()

    r = await client.put(
        f"/api/users/{alice['id']}",
        json={"email": bob["email"]},
        headers=alice_headers,
    )
    assert r.status_code == 409


# ═══════════════════════════════════════════════════════════
# Cascading delete
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_delete_user_cascades(client, register):
    alice, alice_headers = await register()
    bob, bob_headers = await register()

    r = await client.post(
        "/api/create_thread",
        json={"title": "Alice's thread", "content": "hello"},
        headers=alice_headers,
    )
    alice_thread = r.json()["id"]
    r = await client.post(
        "/api/create_thread",
        json={"title": "Bob's thread", "content": "hi"},
        headers=bob_headers,
    )
    bob_thread = r.json()["id"]

    await client.post(
        "/api/create_comment",
        json={"thread_id": alice_thread, "content": "own comment"},
        headers=alice_headers,
    )
    await client.post(
        "/api/create_comment",
        json={"thread_id": bob_thread, "content": "alice on bob's"},
        headers=alice_headers,
    )
    await client.post(
        "/api/create_comment",
        json={"thread_id": bob_thread, "content": "bob on bob's"},
        headers=bob_headers,
    )

    r = await client.delete(f"/api/delete_user/{alice['id']}", headers=alice_headers)
    assert r.status_code == 200
    assert r.json()["message"] == "User, threads, and comments deleted successfully"

    r = await client.get(f"/api/get_user/{alice['id']}")
    assert r.status_code == 404

    threads = (await client.get("/api/get_threads")).json()
    assert [t["id"] for t in threads] == [bob_thread]

    comments = (await client.get("/api/get_comments")).json()
    assert [c["user_id"] for c in comments] == [bob["id"]]


@pytest.mark.asyncio
async def test_delete_other_account_forbidden(client, register):
    alice, _ = await register()
    _, mallory_headers = await register()

    r = await client.delete(f"/api/delete_user/{alice['id']}", headers=mallory_headers)
    assert r.status_code == 403

    r = await client.get(f"/api/get_user/{alice['id']}")
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_delete_twice_is_not_found(client, register):
    """The token outlives the account (stateless), but the row is gone."""
    user, headers = await register()

    r = await client.delete(f"/api/delete_user/{user['id']}", headers=headers)
    assert r.status_code == 200

    r = await client.delete(f"/api/delete_user/{user['id']}", headers=headers)
    assert r.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "username, email, detail",
    [
        ("u" * 101, "long@example.com", "Username must be at most 100 characters long"),
        ("longmail", "e" * 250 + "@example.com", "Email must be at most 255 characters long"),
    ],
)
async def test_signup_rejects_overlong_fields(client, username, email, detail):
    r = await client.post(
        "/api/signup",
        json={"username": username, "email": email, "password": "longenough1"},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == detail

    assert (await client.get("/api/get_users")).json() == []


@pytest.mark.asyncio
async def test_signup_accepts_username_at_column_width(client):
    r = await client.post(
        "/api/signup",
        json={"username": "u" * 100, "email": "wide@example.com", "password": "longenough1"},
    )
    assert r.status_code == 200
