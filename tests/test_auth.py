"""Session Bus transitions and listener bookkeeping."""

import asyncio

import pytest

from eduflow.events import AuthEvent


@pytest.fixture()
def events(client):
    seen = []
    sub = client.auth.on_auth_state_change(lambda event, session: seen.append((event, session)))
    return seen, sub


def test_get_session_is_always_empty(client):
    result = asyncio.run(client.auth.get_session())
    assert result.data == {"session": None}
    assert result.error is None


def test_sign_in_emits_once_with_session(client, events):
    seen, _ = events
    result = asyncio.run(client.auth.sign_in_with_password({"email": "a@b.c", "password": "x"}))

    assert len(seen) == 1
    event, session = seen[0]
    assert event == AuthEvent.SIGNED_IN.value
    assert session is not None
    assert session.access_token == "demo-token"
    assert session.user.id == "demo-user-id"
    assert session.user.email == "a@b.c"
    assert result.data["user"].user_metadata.role == "learner"


def test_sign_in_reads_stored_role(client, events):
    client.table("profiles").update({"role": "instructor"}).eq("id", "demo-user-id")
    asyncio.run(client.auth.sign_in_with_password({"email": "a@b.c"}))
    assert events[0][0][1].user.user_metadata.role == "instructor"


def test_sign_out_emits_null_session(client, events):
    seen, _ = events
    asyncio.run(client.auth.sign_in_with_password({}))
    asyncio.run(client.auth.sign_out())
    assert [e for e, _ in seen] == ["SIGNED_IN", "SIGNED_OUT"]
    assert seen[1][1] is None


def test_sign_out_keeps_profile(client):
    asyncio.run(client.auth.sign_up({"email": "n@x.y", "options": {"data": {"full_name": "Nok", "role": "instructor"}}}))
    asyncio.run(client.auth.sign_out())
    assert client.store.live("profiles")["demo-user-id"] == {"full_name": "Nok", "role": "instructor"}


def test_sign_up_overwrites_profile_and_persists(client, engine, settings, events):
    from eduflow.bootstrap import init_store

    seen, _ = events
    result = asyncio.run(
        client.auth.sign_up({"email": "n@x.y", "options": {"data": {"full_name": "Nok", "role": "instructor"}}})
    )
    assert seen[0][0] == "SIGNED_UP"
    assert result.data["user"].user_metadata.role == "instructor"
    assert result.data["user"].user_metadata.full_name == "Nok"
    assert init_store(engine, settings).live("profiles")["demo-user-id"]["full_name"] == "Nok"


def test_sign_up_defaults_role(client):
    asyncio.run(client.auth.sign_up({"email": "n@x.y"}))
    assert client.store.live("profiles")["demo-user-id"]["role"] == "learner"


def test_unsubscribe_stops_delivery(client, events):
    seen, sub = events
    sub.unsubscribe()
    sub.unsubscribe()
    asyncio.run(client.auth.sign_in_with_password({}))
    assert seen == []


def test_listeners_run_in_registration_order(client):
    order = []
    client.auth.on_auth_state_change(lambda e, s: order.append("first"))
    client.auth.on_auth_state_change(lambda e, s: order.append("second"))
    asyncio.run(client.auth.sign_out())
    assert order == ["first", "second"]


def test_listener_error_propagates(client):
    def boom(event, session):
        raise RuntimeError("listener failed")

    client.auth.on_auth_state_change(boom)
    with pytest.raises(RuntimeError):
        asyncio.run(client.auth.sign_out())


def test_update_user_always_succeeds(client):
    result = asyncio.run(client.auth.update_user({"password": "new"}))
    assert result.error is None
    assert result.data["user"].id == "demo-user-id"
