"""
In-memory client state for development and tests: ClientState and ClientStateStore.

Why: Each visitor (a "client", identified by an opaque cookie) owns a small
key-value store holding the session token, the local roster and the mock
session identity. The browser keeps only the opaque client id; the data stays
server-side. For durable state across restarts use `stores_db.DBClientStateStore`.

Values are stored JSON-serialized, so a value read back is a fresh copy and
callers cannot mutate the stored state by accident.

Lifecycle: a new client's state is registered only when something is first
written to it, so cookieless requests (health checks, guard redirects) leave the
store untouched. Registered entries expire after `ttl_seconds` without access.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
import json
import re
import secrets
import time

# Opaque client ids are token_urlsafe(24) strings; reject anything else early.
CLIENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_\-]{16,64}$")

DEFAULT_TTL_SECONDS = 7 * 24 * 3600


def _now() -> int:
    return int(time.time())


def new_client_id() -> str:
    return secrets.token_urlsafe(24)


def is_valid_client_id(value: Optional[str]) -> bool:
    return bool(value) and bool(CLIENT_ID_PATTERN.match(str(value)))


class ClientState:
    """Key-value state of one client.

    Subclasses override `_read`, `_write` and `_remove`; `get`, `set`,
    `append` and `delete` are shared. `written` turns true on the first `set`
    (or `append`) and `on_first_write` is called once at that moment.
    """

    def __init__(self, client_id: str, *, on_first_write: Callable[["ClientState"], None] | None = None) -> None:
        self.client_id = client_id
        self.written = False
        self._on_first_write = on_first_write
        self._items: Dict[str, str] = {}

    # --- storage primitives -------------------------------------------------

    def _read(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def _write(self, key: str, raw: str) -> None:
        self._items[key] = raw

    def _remove(self, key: str) -> None:
        self._items.pop(key, None)

    # --- public interface -----------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._read(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            return default

    def set(self, key: str, value: Any) -> None:
        self._write(key, json.dumps(value))
        if not self.written:
            self.written = True
            if self._on_first_write is not None:
                self._on_first_write(self)

    def append(self, key: str, item: Any) -> int:
        """Append `item` to the list stored under `key`; return the new length.

        A missing or non-list value is treated as an empty list. Not atomic
        across processes (read-modify-write).
        """
        items = self.get(key)
        if not isinstance(items, list):
            items = []
        items.append(item)
        self.set(key, items)
        return len(items)

    def delete(self, key: str) -> None:
        self._remove(key)


@dataclass
class _Entry:
    state: ClientState
    expires_at: int


class ClientStateStore:
    def __init__(self, ttl_seconds: int = DEFAULT_TTL_SECONDS):
        self._data: Dict[str, _Entry] = {}
        self._ttl = ttl_seconds

    def create(self) -> ClientState:
        """Return a state for a new client; it is kept once something is written."""
        return ClientState(new_client_id(), on_first_write=self._register)

    def _register(self, state: ClientState) -> None:
        self._purge_expired()
        self._data[state.client_id] = _Entry(state=state, expires_at=_now() + self._ttl)

    def get(self, client_id: str) -> Optional[ClientState]:
        entry = self._data.get(client_id)
        if not entry:
            return None
        if entry.expires_at < _now():
            self.delete(client_id)
            return None
        # Sliding expiry: every access extends the lifetime.
        entry.expires_at = _now() + self._ttl
        return entry.state

    def delete(self, client_id: str) -> None:
        self._data.pop(client_id, None)

    def _purge_expired(self) -> None:
        now = _now()
        for client_id in [cid for cid, entry in self._data.items() if entry.expires_at < now]:
            self.delete(client_id)
