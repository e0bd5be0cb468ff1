#!/usr/bin/env python3
"""
WebForum Quickstart — full account lifecycle in one script.

Signs up two accounts → creates a category and tag → opens a thread →
both accounts comment → deletes the first account and shows that its
threads and comments went with it.

Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:8080
"""

import uuid

from _common import create_client


def main():
    run_id = uuid.uuid4().hex[:6]

    # ── Accounts ──────────────────────────────────────────────────
    print("1. Creating accounts...")
    alice, alice_client = create_client("alice")
    bob, bob_client = create_client("bob")

    resp = alice_client.get("/protected")
    assert resp.status_code == 200, f"Failed: {resp.text}"
    print(f"   Token accepted for user_id={resp.json()['user_id']}")

    # ── Category + tag ────────────────────────────────────────────
    print("\n2. Creating category and tag...")
    resp = alice_client.post("/create_category", json={"name": f"General {run_id}"})
    assert resp.status_code == 200, f"Failed: {resp.text}"
    category = resp.json()
    resp = alice_client.post("/create_tag", json={"name": f"intro-{run_id}"})
    assert resp.status_code == 200, f"Failed: {resp.text}"
    tag = resp.json()
    print(f"   Category: {category['name']}   Tag: {tag['name']}")

    # ── Thread ────────────────────────────────────────────────────
    print("\n3. Opening a thread...")
    resp = alice_client.post("/create_thread", json={
        "title": "Hello, forum",
        "content": "First post!",
        "category_id": category["id"],
        "tag_ids": [tag["id"]],
    })
    assert resp.status_code == 200, f"Failed: {resp.text}"
    thread = resp.json()
    print(f"   Thread #{thread['id']}: {thread['title']} (tags {thread['tag_ids']})")

    # ── Comments ──────────────────────────────────────────────────
    print("\n4. Commenting...")
    for client, text in ((alice_client, "Welcome everyone"), (bob_client, "Thanks Alice!")):
        resp = client.post("/create_comment", json={"thread_id": thread["id"], "content": text})
        assert resp.status_code == 200, f"Failed: {resp.text}"
    comments = alice_client.get(f"/get_comments/{thread['id']}").json()
    print(f"   {len(comments)} comments on thread #{thread['id']}")

    # ── Ownership ─────────────────────────────────────────────────
    print("\n5. Bob tries to delete Alice's account...")
    resp = bob_client.delete(f"/delete_user/{alice['id']}")
    print(f"   → {resp.status_code} {resp.json()['detail']}")

    # ── Cascading delete ──────────────────────────────────────────
    print("\n6. Alice deletes her account...")
    resp = alice_client.delete(f"/delete_user/{alice['id']}")
    assert resp.status_code == 200, f"Failed: {resp.text}"
    print(f"   {resp.json()['message']}")

    resp = bob_client.get(f"/get_thread/{thread['id']}")
    print(f"   Thread #{thread['id']} now → {resp.status_code}")
    resp = bob_client.get(f"/get_user/{alice['id']}")
    print(f"   Alice's profile now → {resp.status_code}")

    alice_client.close()
    bob_client.close()
    print(f"\nDone. Bob ({bob['username']}) is still around.")


if __name__ == "__main__":
    main()
