#!/usr/bin/env python
"""
demo.py – One-shot walkthrough of the eduflow emulation.

Runs the same calls the upload / my-content / profile pages make, against the
local emulation (no backend URL needed). State is kept in
$EDUFLOW_SNAPSHOT_DB_URL, so running it twice shows the persisted rows.
"""

import asyncio
from pprint import pprint

from eduflow import create_client
from eduflow.config import configure_logging

configure_logging()


# ────────────────────────────────── 1. Auth flow ───────────────────────────────────────
async def auth_flow(client) -> str:
    sub = client.auth.on_auth_state_change(
        lambda event, session: print(f"\n→ {event}: {session.user.email if session else None}")
    )
    await client.auth.sign_up(
        {
            "email": "teacher@example.com",
            "password": "ignored",
            "options": {"data": {"full_name": "Ajarn Demo", "role": "instructor"}},
        }
    )
    res = await client.auth.sign_in_with_password({"email": "teacher@example.com"})
    sub.unsubscribe()
    return res.data["user"].id


# ────────────────────────────────── 2. Content flow ────────────────────────────────────
async def content_flow(client, user_id: str) -> None:
    categories = (await client.table("categories").select("*").order("name")).data
    print("\nCategories:")
    pprint(categories, width=80)

    created = (
        client.table("contents")
        .insert({"title": "Intro to Python", "category_id": "cat1", "creator_id": user_id, "status": "published"})
        .select()
        .single()
        .data
    )
    print(f"\n→ Created content {created['id']} in {created['categories']['name']}")

    await client.table("view_history").insert({"user_id": user_id, "content_id": created["id"]})

    mine = (
        await client.table("contents")
        .select("*, categories(name)")
        .eq("creator_id", user_id)
        .order("created_at", ascending=False)
    ).data
    print(f"\nMy content ({len(mine)} rows):")
    pprint([(r["id"], r["title"]) for r in mine], width=80)

    await client.table("contents").update({"title": "Python, properly"}).eq("id", created["id"])
    edited = client.table("contents").select().eq("id", created["id"]).single().data
    print(f"\n→ Edited title: {edited['title']}")

    await client.table("contents").delete().eq("id", created["id"])
    gone = client.table("contents").select().eq("id", created["id"]).single().data
    print(f"\n→ After delete: {gone}")


async def main() -> None:
    client = create_client()
    user_id = await auth_flow(client)
    await content_flow(client, user_id)

    profile = client.table("profiles").select().eq("id", user_id).single().data
    print("\nProfile:")
    pprint(profile, width=80)
    await client.auth.sign_out()


if __name__ == "__main__":
    asyncio.run(main())
