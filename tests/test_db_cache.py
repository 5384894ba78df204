from __future__ import annotations

import asyncio
import sqlite3

from content_rules.db_cache import DbCache, initialize_db


def _cache(tmp_path, baby_id: str = "baby-1") -> DbCache:
    db_path = tmp_path / "cache.db"
    initialize_db(db_path)
    return DbCache(db_path, baby_id, "family-1", "user-1")


def test_round_trip_preserves_json_values(tmp_path) -> None:
    cache = _cache(tmp_path)

    async def run() -> None:
        await cache.set("tips", [{"title": "Tummy time"}], 60_000)
        entry = await cache.get("tips")
        assert entry is not None
        assert entry.val == [{"title": "Tummy time"}]
        assert await cache.get("missing") is None

    asyncio.run(run())


def test_set_upserts_one_row_with_ownership(tmp_path) -> None:
    cache = _cache(tmp_path)

    async def run() -> None:
        await cache.set("k", "first", 60_000)
        await cache.set("k", "second", 60_000)
        entry = await cache.get("k")
        assert entry is not None and entry.val == "second"

    asyncio.run(run())

    with sqlite3.connect(tmp_path / "cache.db") as conn:
        rows = conn.execute("SELECT baby_id, family_id, user_id, key FROM content_cache").fetchall()
    assert rows == [("baby-1", "family-1", "user-1", "k")]


def test_expired_rows_are_deleted_on_read(tmp_path) -> None:
    cache = _cache(tmp_path)

    async def run() -> None:
        await cache.set("k", "v", 50)
        await asyncio.sleep(0.1)
        assert await cache.get("k") is None

    asyncio.run(run())

    with sqlite3.connect(tmp_path / "cache.db") as conn:
        assert conn.execute("SELECT COUNT(*) FROM content_cache").fetchone()[0] == 0


def test_rows_are_scoped_per_baby(tmp_path) -> None:
    first = _cache(tmp_path, "baby-1")
    second = DbCache(tmp_path / "cache.db", "baby-2", "family-1", "user-1")

    async def run() -> None:
        await first.set("k", "one", 60_000)
        await second.set("k", "two", 60_000)
        assert (await first.get("k")).val == "one"
        assert (await second.get("k")).val == "two"
        await first.clear()
        assert await first.get("k") is None
        assert (await second.get("k")).val == "two"

    asyncio.run(run())


def test_cleanup_removes_only_expired(tmp_path) -> None:
    cache = _cache(tmp_path)

    async def run() -> None:
        await cache.set("short", 1, 10)
        await cache.set("long", 2, 60_000)
        await asyncio.sleep(0.05)
        assert await cache.cleanup() == 1
        assert (await cache.get("long")).val == 2

    asyncio.run(run())


def test_is_pending(tmp_path) -> None:
    cache = _cache(tmp_path)

    async def run() -> None:
        await cache.set("k", {"_status": "pending", "_timestamp": 1}, 60_000)
        assert await cache.is_pending("k")
        await cache.set("k", "done", 60_000)
        assert not await cache.is_pending("k")
        assert not await cache.is_pending("missing")

    asyncio.run(run())


def test_backend_failures_degrade_to_misses(tmp_path) -> None:
    # No table was created, so every statement fails.
    cache = DbCache(tmp_path / "empty.db", "baby-1", "family-1", "user-1")

    async def run() -> None:
        await cache.set("k", "v", 60_000)
        assert await cache.get("k") is None
        assert await cache.cleanup() == 0
        await cache.clear()

    asyncio.run(run())


def test_unserializable_value_is_dropped(tmp_path) -> None:
    cache = _cache(tmp_path)

    async def run() -> None:
        await cache.set("k", object(), 60_000)
        assert await cache.get("k") is None

    asyncio.run(run())
