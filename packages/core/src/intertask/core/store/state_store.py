"""StateStore SQLite 实现

键值、计数器、命名集合分别落在 kv / counters / set_members 三张表。
原语不自动提交，事务由 atomic() 统一提交或回滚。
"""

import asyncio
import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import aiosqlite


class SqliteStateStore:
    """StateStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Any | None:
        cursor = await self._conn.execute(
            "SELECT value FROM kv WHERE key = ?",
            (key,),
        )
        row = await cursor.fetchone()
        return json.loads(row[0]) if row else None

    async def set(self, key: str, value: Any) -> None:
        await self._conn.execute(
            """
            INSERT INTO kv (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """,
            (key, json.dumps(value, ensure_ascii=False, sort_keys=True)),
        )

    async def increment(self, counter_key: str) -> int:
        await self._conn.execute(
            """
            INSERT INTO counters (key, value) VALUES (?, 1)
            ON CONFLICT(key) DO UPDATE SET value = value + 1
            """,
            (counter_key,),
        )
        cursor = await self._conn.execute(
            "SELECT value FROM counters WHERE key = ?",
            (counter_key,),
        )
        row = await cursor.fetchone()
        return int(row[0])

    async def sadd(self, set_key: str, member: str) -> None:
        await self._conn.execute(
            "INSERT OR IGNORE INTO set_members (set_key, member) VALUES (?, ?)",
            (set_key, member),
        )

    async def srem(self, set_key: str, member: str) -> None:
        await self._conn.execute(
            "DELETE FROM set_members WHERE set_key = ? AND member = ?",
            (set_key, member),
        )

    async def smembers(self, set_key: str) -> list[str]:
        cursor = await self._conn.execute(
            "SELECT member FROM set_members WHERE set_key = ? ORDER BY member",
            (set_key,),
        )
        rows = await cursor.fetchall()
        return [row[0] for row in rows]

    async def scard(self, set_key: str) -> int:
        cursor = await self._conn.execute(
            "SELECT COUNT(*) FROM set_members WHERE set_key = ?",
            (set_key,),
        )
        row = await cursor.fetchone()
        return int(row[0]) if row else 0

    async def clear(self) -> None:
        """清空全部状态表（调用方管理事务）"""
        await self._conn.execute("DELETE FROM kv")
        await self._conn.execute("DELETE FROM counters")
        await self._conn.execute("DELETE FROM set_members")

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        async with self._lock:
            try:
                yield
                await self._conn.commit()
            except BaseException:
                await self._conn.rollback()
                raise

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator[None]:
        async with self._lock:
            yield

    async def dump(self) -> dict[str, Any]:
        """规范化状态快照，与 MemoryStateStore.dump() 结构一致"""
        cursor = await self._conn.execute("SELECT key, value FROM kv ORDER BY key")
        values = {row[0]: json.loads(row[1]) for row in await cursor.fetchall()}

        cursor = await self._conn.execute("SELECT key, value FROM counters ORDER BY key")
        counters = {row[0]: int(row[1]) for row in await cursor.fetchall()}

        cursor = await self._conn.execute(
            "SELECT set_key, member FROM set_members ORDER BY set_key, member"
        )
        sets: dict[str, list[str]] = {}
        for row in await cursor.fetchall():
            sets.setdefault(row[0], []).append(row[1])

        return {"values": values, "counters": counters, "sets": sets}
