"""
Shared helpers for WebForum examples.

Handles the health check and account setup (signup + login) so each
example can focus on its specific workflow.
"""

import sys
import uuid

import httpx

BASE = "http://localhost:8080/api"


def check_backend() -> None:
    """Verify the backend is reachable and healthy."""
    try:
        resp = httpx.get(f"{BASE}/health", timeout=5)
    except httpx.ConnectError:
        print(f"ERROR: Backend not reachable at {BASE}")
        print("Start it with:  webforum serve")
        sys.exit(1)

    if resp.status_code != 200:
        print(f"ERROR: Health check returned {resp.status_code}")
        sys.exit(1)

    health = resp.json()
    print("Backend health:")
    print(f"  Database: {'✓' if health['database'] == 'ok' else '✗'}")

    if health["database"] != "ok":
        print(f"\nERROR: Database is not connected: {health['database']}")
        sys.exit(1)


def create_account(prefix: str = "demo") -> tuple[dict, str]:
    """Sign up a fresh account and log in, returning (user, token).

    Uses a unique username per run so examples can be re-run.
    """
    run_id = uuid.uuid4().hex[:8]
    username = f"{prefix}-{run_id}"
    email = f"{username}@example.com"
    password = "demo-password-123"

    resp = httpx.post(
        f"{BASE}/signup",
        json={"username": username, "email": email, "password": password},
        timeout=10,
    )
    if resp.status_code != 200:
        print(f"ERROR: Signup failed: {resp.status_code} {resp.text}")
        sys.exit(1)
    user = resp.json()["user"]

    resp = httpx.post(
        f"{BASE}/login",
        json={"email": email, "password": password},
        timeout=10,
    )
    if resp.status_code != 200:
        print(f"ERROR: Login failed: {resp.status_code} {resp.text}")
        sys.exit(1)

    return user, resp.json()["token"]


def create_client(prefix: str = "demo") -> tuple[dict, httpx.Client]:
    """Check backend, create an account, and return it with an authed client."""
    check_backend()
    user, token = create_account(prefix)
    print(f"  Account:  {user['username']} (id {user['id']})")
    return user, httpx.Client(
        base_url=BASE,
        timeout=10,
        headers={"Authorization": f"Bearer {token}"},
    )
