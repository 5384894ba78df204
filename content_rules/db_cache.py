"""SQLite-backed content cache, scoped to one baby.

Every row belongs to a ``(baby_id, key)`` pair; family and user ids are
written on insert so row ownership is explicit. Reads of expired rows delete
them. Failures are logged and swallowed: a broken cache degrades to cache
misses, it never breaks content resolution.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator
from uuid import uuid4

from .cache import CacheEntry, now_ms

log = logging.getLogger(__name__)


def _iso(ms: float) -> str:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).isoformat(timespec="microseconds")


def _to_ms(value: str) -> float:
    return datetime.fromisoformat(value).timestamp() * 1000


def initialize_db(db_path: str | Path) -> None:
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS content_cache (
                id TEXT PRIMARY KEY,
                baby_id TEXT NOT NULL,
                family_id TEXT NOT NULL,
                user_id TEXT NOT NULL,
                key TEXT NOT NULL,
                value TEXT NOT NULL,
                expires_at TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT,
                UNIQUE (baby_id, key)
            );
            """
        )
        conn.execute(
            "CREATE INDEX IF NOT EXISTS content_cache_baby_id_key_idx ON content_cache (baby_id, key)"
        )
        conn.commit()


class DbCache:
    def __init__(self, db_path: str | Path, baby_id: str, family_id: str, user_id: str) -> None:
        self._db_path = Path(db_path)
        self.baby_id = baby_id
        self.family_id = family_id
        self.user_id = user_id

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._db_path)
        try:
            yield conn
        finally:
            conn.close()

    async def _run(self, fn, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: fn(*args))

    # ------------------------------------------------------------------
    # Blocking helpers (run in the default executor)
    # ------------------------------------------------------------------

    def _sync_get(self, key: str) -> CacheEntry | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, value, expires_at FROM content_cache WHERE baby_id = ? AND key = ? LIMIT 1",
                (self.baby_id, key),
            ).fetchone()
            if row is None:
                return None
            row_id, raw_value, expires_at = row
            entry = CacheEntry(val=json.loads(raw_value), exp=_to_ms(expires_at))
            if entry.is_expired():
                conn.execute("DELETE FROM content_cache WHERE id = ?", (row_id,))
                conn.commit()
                return None
            return entry

    def _sync_set(self, key: str, val: Any, ttl_ms: float) -> None:
        payload = json.dumps(val)
        now = now_ms()
        expires_at = _iso(now + ttl_ms)
        updated_at = _iso(now)
        with self._connect() as conn:
            existing = conn.execute(
                "SELECT id FROM content_cache WHERE baby_id = ? AND key = ? LIMIT 1",
                (self.baby_id, key),
            ).fetchone()
            if existing is not None:
                conn.execute(
                    """
                    UPDATE content_cache
                    SET value = ?, expires_at = ?, updated_at = ?
                    WHERE baby_id = ? AND key = ?
                    """,
                    (payload, expires_at, updated_at, self.baby_id, key),
                )
            else:
                conn.execute(
                    """
                    INSERT INTO content_cache (
                        id, baby_id, family_id, user_id, key, value, expires_at, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        f"cache_{uuid4().hex}",
                        self.baby_id,
                        self.family_id,
                        self.user_id,
                        key,
                        payload,
                        expires_at,
                        updated_at,
                        updated_at,
                    ),
                )
            conn.commit()

    def _sync_delete(self, expired_only: bool) -> int:
        with self._connect() as conn:
            if expired_only:
                cursor = conn.execute(
                    "DELETE FROM content_cache WHERE baby_id = ? AND expires_at < ?",
                    (self.baby_id, _iso(now_ms())),
                )
            else:
                cursor = conn.execute("DELETE FROM content_cache WHERE baby_id = ?", (self.baby_id,))
            conn.commit()
            return cursor.rowcount

    # ------------------------------------------------------------------
    # Cache interface
    # ------------------------------------------------------------------

    async def get(self, key: str) -> CacheEntry | None:
        try:
            return await self._run(self._sync_get, key)
        except Exception:
            log.exception("DbCache get failed for key %s", key)
            return None

    async def set(self, key: str, val: Any, ttl_ms: float) -> None:
        try:
            await self._run(self._sync_set, key, val, ttl_ms)
        except Exception:
            log.exception("DbCache set failed for key %s", key)

    async def is_pending(self, key: str) -> bool:
        entry = await self.get(key)
        if entry is None:
            return False
        return isinstance(entry.val, dict) and entry.val.get("_status") == "pending"

    async def cleanup(self) -> int:
        """Delete this baby's expired rows. Returns the number removed."""
        try:
            return await self._run(self._sync_delete, True)
        except Exception:
            log.exception("DbCache cleanup failed for baby %s", self.baby_id)
            return 0

    async def clear(self) -> None:
        try:
            await self._run(self._sync_delete, False)
        except Exception:
            log.exception("DbCache clear failed for baby %s", self.baby_id)
