"""
Database-backed client state for production use (Postgres).

Why: In-memory client state is lost on restart and is not shared across
instances. This store keeps one row per (client, key) in Postgres while the
cookie stays an opaque client id.

Schema (created by the operator, not by the app):

    create table public.client_state (
        client_id  text not null,
        key        text not null,
        value      jsonb not null,
        updated_at timestamptz not null default now(),
        primary key (client_id, key)
    );

Note: This module uses psycopg3. It is imported only when enabled via
`CLIENT_STATE_BACKEND=db`. Tests use the in-memory store or a fake driver.
"""
from __future__ import annotations

from typing import Optional
import os
import re

try:
    import psycopg
    HAVE_PSYCOPG = True
except Exception:  # pragma: no cover - optional dependency in dev
    psycopg = None  # type: ignore
    HAVE_PSYCOPG = False

from .stores import ClientState, is_valid_client_id, new_client_id


_TABLE_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]{0,62}(?:\.[A-Za-z_][A-Za-z0-9_]{0,62})?$')


class DBClientState(ClientState):
    """Client state whose primitives hit Postgres directly (no local cache)."""

    def __init__(self, client_id: str, *, dsn: str, table: str) -> None:
        super().__init__(client_id)
        self._dsn = dsn
        self._table = table

    def _read(self, key: str) -> Optional[str]:
        with psycopg.connect(self._dsn) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"select value::text from {self._table} where client_id = %s and key = %s",
                    (self.client_id, key),
                )
                row = cur.fetchone()
        return str(row[0]) if row else None

    def _write(self, key: str, raw: str) -> None:
        with psycopg.connect(self._dsn, autocommit=True) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"insert into {self._table} (client_id, key, value) values (%s, %s, %s::jsonb) "
                    "on conflict (client_id, key) do update set value = excluded.value, updated_at = now()",
                    (self.client_id, key, raw),
                )

    def _remove(self, key: str) -> None:
        with psycopg.connect(self._dsn, autocommit=True) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"delete from {self._table} where client_id = %s and key = %s",
                    (self.client_id, key),
                )


class DBClientStateStore:
    """Postgres-backed client state store.

    Parameters
    ----------
    dsn:
        Psycopg3 connection string.
    table:
        Fully qualified table name. Defaults to `public.client_state`.

    A client id that has never been written simply has an empty state, the way
    a fresh browser has empty local storage.
    """

    def __init__(self, dsn: str | None = None, table: str = "public.client_state") -> None:
        if not HAVE_PSYCOPG:
            raise RuntimeError("psycopg3 is required for DBClientStateStore")
        self._dsn = dsn or os.getenv("DATABASE_URL", "")
        if not self._dsn:
            raise RuntimeError("No database DSN provided for DBClientStateStore")
        # Table name is interpolated into SQL; validate it once here.
        if not _TABLE_PATTERN.match(table or ""):
            raise ValueError("Invalid table name")
        self._table = table

    def create(self) -> DBClientState:
        return DBClientState(new_client_id(), dsn=self._dsn, table=self._table)

    def get(self, client_id: str) -> Optional[DBClientState]:
        if not is_valid_client_id(client_id):
            return None
        return DBClientState(client_id, dsn=self._dsn, table=self._table)

