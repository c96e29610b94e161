"""Write path: insert / upsert / update / delete and join-enrichment."""

import asyncio

import pytest

from eduflow.core import record as record_mod
from eduflow.core.record import new_record_id


def test_insert_assigns_id_and_created_at(client):
    row = client.table("contents").insert({"title": "Intro"}).select().single().data
    assert row["id"].startswith("demo-")
    assert row["created_at"]
    assert row["title"] == "Intro"


def test_caller_fields_override_defaults(client):
    row = client.table("contents").insert({"id": "fixed", "title": "t"}).select().single().data
    assert row["id"] == "fixed"


def test_ids_are_unique(client):
    ids = [client.table("contents").insert({"n": i}).select().single().data["id"] for i in range(200)]
    assert len(set(ids)) == len(ids)


def test_new_record_id_redraws_on_collision(monkeypatch):
    class _FakeUUID:
        def __init__(self, hex_):
            self.hex = hex_

    draws = iter([_FakeUUID("a" * 32), _FakeUUID("b" * 32)])
    monkeypatch.setattr(record_mod.uuid, "uuid4", lambda: next(draws))
    assert new_record_id({"demo-aaaaaaaaa"}) == "demo-bbbbbbbbb"


def test_insert_then_read_by_id(client):
    fields = {"title": "Algebra", "status": "draft", "creator_id": "demo-user-id"}
    inserted = client.table("contents").insert(fields).select().single().data
    found = client.table("contents").select().eq("id", inserted["id"]).single().data
    assert {k: found[k] for k in fields} == fields


def test_insert_enriches_category_author_and_tags(client):
    row = client.table("contents").insert(
        {"title": "t", "category_id": "cat2", "creator_id": "demo-user-id"}
    ).select().single().data
    assert row["categories"] == {"name": "English"}
    assert row["profiles"] == {"full_name": "Demo User"}
    assert row["content_tags"] == []


def test_enrichment_fallbacks(client):
    row = client.table("comments").insert({"body": "hi", "category_id": "missing"}).select().single().data
    assert row["categories"] == {"name": "General"}
    assert row["profiles"] == {"full_name": "You (Demo User)"}
    assert "content_tags" not in row


def test_enrichment_is_not_kept_in_sync(client):
    row = client.table("contents").insert({"category_id": "cat1"}).select().single().data
    client.table("categories").update({"name": "Renamed"}).eq("id", "cat1")
    again = client.table("contents").select().eq("id", row["id"]).single().data
    assert again["categories"] == {"name": "Computers"}


def test_insert_creates_ad_hoc_table(client):
    client.table("tags").insert({"name": "python"})
    assert client.store.has("tags")
    assert "tags" in client.store.snapshot()


def test_insert_result_is_awaitable(client):
    async def run():
        return await client.table("view_history").insert({"user_id": "u", "content_id": "c"})

    result = asyncio.run(run())
    assert result.error is None
    assert result.data[0]["content_id"] == "c"


def test_insert_result_is_a_copy(client):
    row = client.table("contents").insert({"title": "t"}).select().single().data
    row["title"] = "mutated"
    assert client.table("contents").select().single().data["title"] == "t"


def test_update_merges_matching_rows(client):
    row = client.table("contents").insert({"title": "old", "status": "draft"}).select().single().data
    result = client.table("contents").update({"title": "new"}).eq("id", row["id"])
    assert result.error is None
    updated = client.table("contents").select().eq("id", row["id"]).single().data
    assert updated["title"] == "new"
    assert updated["status"] == "draft"
    assert updated["created_at"] == row["created_at"]


def test_update_is_idempotent(client):
    client.table("contents").insert({"title": "a", "status": "draft"})
    client.table("contents").insert({"title": "b", "status": "draft"})
    client.table("contents").update({"status": "published"}).eq("status", "draft")
    once = client.store.snapshot()
    client.table("contents").update({"status": "published"}).eq("status", "draft")
    assert client.store.snapshot() == once


def test_update_zero_matches_is_success(client):
    assert client.table("contents").update({"x": 1}).eq("id", "nope").error is None
    assert client.table("nowhere").update({"x": 1}).eq("id", "nope").error is None


def test_update_map_table(client):
    client.table("profiles").update({"role": "instructor"}).eq("id", "demo-user-id")
    assert client.store.live("profiles")["demo-user-id"]["role"] == "instructor"


def test_delete_then_miss(client):
    row = client.table("contents").insert({"title": "gone"}).select().single().data
    assert client.table("contents").delete().eq("id", row["id"]).error is None
    miss = client.table("contents").select().eq("id", row["id"]).single()
    assert miss.data is None
    assert miss.error is None


def test_delete_is_awaitable(client):
    client.table("content_tags").insert({"content_id": "c1"})
    client.table("content_tags").insert({"content_id": "c1"})
    client.table("content_tags").insert({"content_id": "c2"})

    async def run():
        return await client.table("content_tags").delete().eq("content_id", "c1")

    assert asyncio.run(run()).error is None
    assert [r["content_id"] for r in client.table("content_tags").select().execute().data] == ["c2"]


def test_upsert_profile_merges(client):
    result = client.table("profiles").upsert({"id": "demo-user-id", "avatar_url": "a.png"})
    assert result.data == [
        {"id": "demo-user-id", "full_name": "Demo User", "role": "learner", "avatar_url": "a.png"}
    ]


def test_upsert_profile_without_id_is_noop(client):
    before = client.store.snapshot()
    assert client.table("profiles").upsert({"full_name": "nobody"}).data == []
    assert client.store.snapshot() == before


def test_upsert_list_table_inserts_then_merges(client):
    inserted = client.table("tags").upsert({"name": "python"}).data[0]
    client.table("tags").upsert({"id": inserted["id"], "name": "Python"})
    rows = client.table("tags").select().execute().data
    assert len(rows) == 1
    assert rows[0]["name"] == "Python"


@pytest.mark.parametrize(
    "mutate",
    [
        lambda c: c.table("contents").insert({"title": "t"}),
        lambda c: c.table("contents").update({"title": "t"}).eq("id", "x"),
        lambda c: c.table("contents").delete().eq("id", "x"),
        lambda c: c.table("profiles").upsert({"id": "u2", "role": "learner"}),
    ],
)
def test_each_mutation_persists_exactly_once(client, monkeypatch, mutate):
    calls = []
    monkeypatch.setattr(client.store.persistence, "save", lambda tables: calls.append(tables) or True)
    mutate(client)
    assert len(calls) == 1


def test_update_does_not_touch_bool_rows_for_number(client):
    client.table("contents").insert({"title": "flag", "rank": True})
    client.table("contents").insert({"title": "num", "rank": 1})
    client.table("contents").update({"status": "seen"}).eq("rank", 1)
    rows = {r["title"]: r for r in client.table("contents").select().execute().data}
    assert rows["num"]["status"] == "seen"
    assert "status" not in rows["flag"]


def test_delete_does_not_remove_bool_rows_for_number(client):
    client.table("contents").insert({"rank": True})
    client.table("contents").delete().eq("rank", 1)
    assert len(client.table("contents").select().execute().data) == 1

    client.table("contents").insert({"rank": 0})
    client.table("contents").delete().eq("rank", False)
    assert [r["rank"] for r in client.table("contents").select().execute().data] == [0, True]


def test_upsert_conflict_match_is_strict(client):
    client.table("tags").insert({"slug": True, "name": "flag"})
    client.table("tags").upsert({"slug": 1, "name": "one"}, on_conflict="slug")
    names = sorted(r["name"] for r in client.table("tags").select().execute().data)
    assert names == ["flag", "one"]
