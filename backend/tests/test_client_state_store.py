"""
In-memory client state: JSON-valued key-value store per client.

Covers the behaviors the auth flows rely on: missing keys read as the default,
appending to a missing or non-list value starts a fresh list, and values read
back are copies of what was stored.
"""

from __future__ import annotations

import pytest

from identity_access import stores
from identity_access.stores import (
    ClientState,
    ClientStateStore,
    is_valid_client_id,
    new_client_id,
)


def test_new_client_ids_are_valid_and_unique():
    ids = {new_client_id() for _ in range(50)}
    assert len(ids) == 50
    assert all(is_valid_client_id(cid) for cid in ids)


@pytest.mark.parametrize("value", [None, "", "short", "has space in it 1234567", "x" * 65, "semi;colon_1234567890"])
def test_invalid_client_ids_are_rejected(value):
    assert is_valid_client_id(value) is False


def test_get_returns_default_for_missing_key():
    state = ClientState(new_client_id())
    assert state.get("token") is None
    assert state.get("token", "fallback") == "fallback"


def test_set_then_get_roundtrips_json_values():
    state = ClientState(new_client_id())
    state.set("token", "abc")
    state.set("mock_user", {"name": "Ada Obi", "matricNumber": "M1"})
    assert state.get("token") == "abc"
    assert state.get("mock_user") == {"name": "Ada Obi", "matricNumber": "M1"}


def test_values_read_back_are_copies():
    state = ClientState(new_client_id())
    state.set("mock_users", [{"matricNo": "M1"}])
    roster = state.get("mock_users")
    roster.append({"matricNo": "M2"})
    assert state.get("mock_users") == [{"matricNo": "M1"}]


def test_append_starts_list_and_returns_length():
    state = ClientState(new_client_id())
    assert state.append("mock_users", {"matricNo": "M1"}) == 1
    assert state.append("mock_users", {"matricNo": "M2"}) == 2
    assert [e["matricNo"] for e in state.get("mock_users")] == ["M1", "M2"]


def test_append_replaces_non_list_value():
    state = ClientState(new_client_id())
    state.set("mock_users", {"not": "a list"})
    assert state.append("mock_users", {"matricNo": "M1"}) == 1
    assert state.get("mock_users") == [{"matricNo": "M1"}]


def test_corrupt_raw_value_reads_as_default():
    state = ClientState(new_client_id())
    state._write("mock_users", "{not json")
    assert state.get("mock_users", []) == []
    assert state.append("mock_users", {"matricNo": "M1"}) == 1


def test_delete_is_idempotent():
    state = ClientState(new_client_id())
    state.set("token", "abc")
    state.delete("token")
    state.delete("token")
    assert state.get("token") is None


def test_created_state_is_kept_only_after_first_write():
    store = ClientStateStore()
    state = store.create()
    assert state.written is False
    assert store.get(state.client_id) is None

    state.get("token")
    state.delete("token")
    assert store.get(state.client_id) is None

    state.set("csrf_token", "abc")
    assert state.written is True
    assert store.get(state.client_id) is state


def test_append_counts_as_first_write():
    store = ClientStateStore()
    state = store.create()
    state.append("mock_users", {"matricNo": "M1"})
    assert store.get(state.client_id) is state


def test_unwritten_states_never_grow_the_store():
    store = ClientStateStore()
    for _ in range(50):
        store.create().get("token")
    assert store._data == {}


def test_store_keeps_clients_isolated():
    store = ClientStateStore()
    a, b = store.create(), store.create()
    a.set("token", "for-a")
    b.set("token", "for-b")
    assert store.get(a.client_id).get("token") == "for-a"
    assert store.get(b.client_id).get("token") == "for-b"


def test_delete_forgets_client():
    store = ClientStateStore()
    state = store.create()
    state.set("token", "abc")
    store.delete(state.client_id)
    assert store.get(state.client_id) is None


def test_entries_expire_after_ttl_without_access(monkeypatch: pytest.MonkeyPatch):
    clock = {"now": 1_000}
    monkeypatch.setattr(stores, "_now", lambda: clock["now"])
    store = ClientStateStore(ttl_seconds=60)
    state = store.create()
    state.set("token", "abc")

    clock["now"] += 59
    assert store.get(state.client_id) is state  # access slides the expiry

    clock["now"] += 61
    assert store.get(state.client_id) is None
    assert state.client_id not in store._data


def test_expired_entries_are_purged_when_a_new_client_registers(monkeypatch: pytest.MonkeyPatch):
    clock = {"now": 1_000}
    monkeypatch.setattr(stores, "_now", lambda: clock["now"])
    store = ClientStateStore(ttl_seconds=60)
    stale = store.create()
    stale.set("token", "old")

    clock["now"] += 120
    fresh = store.create()
    fresh.set("token", "new")

    assert list(store._data) == [fresh.client_id]
