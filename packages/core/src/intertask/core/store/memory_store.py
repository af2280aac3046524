"""StateStore 内存实现

用于测试与一次性重放。atomic() 在进入时拍快照，异常时整体恢复。
"""

import asyncio
import copy
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any


class MemoryStateStore:
    """StateStore 的内存实现"""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        self._counters: dict[str, int] = {}
        self._sets: dict[str, set[str]] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Any | None:
        # 返回副本，调用方修改不会绕过 set() 写回
        return copy.deepcopy(self._values.get(key))

    async def set(self, key: str, value: Any) -> None:
        self._values[key] = copy.deepcopy(value)

    async def increment(self, counter_key: str) -> int:
        value = self._counters.get(counter_key, 0) + 1
        self._counters[counter_key] = value
        return value

    async def sadd(self, set_key: str, member: str) -> None:
        self._sets.setdefault(set_key, set()).add(member)

    async def srem(self, set_key: str, member: str) -> None:
        members = self._sets.get(set_key)
        if members is None:
            return
        members.discard(member)
        if not members:
            del self._sets[set_key]

    async def smembers(self, set_key: str) -> list[str]:
        return sorted(self._sets.get(set_key, ()))

    async def scard(self, set_key: str) -> int:
        return len(self._sets.get(set_key, ()))

    async def clear(self) -> None:
        """清空全部状态（调用方管理事务）"""
        self._values.clear()
        self._counters.clear()
        self._sets.clear()

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        async with self._lock:
            saved = (
                copy.deepcopy(self._values),
                dict(self._counters),
                {k: set(v) for k, v in self._sets.items()},
            )
            try:
                yield
            except BaseException:
                self._values, self._counters, self._sets = saved
                raise

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator[None]:
        async with self._lock:
            yield

    async def dump(self) -> dict[str, Any]:
        """规范化状态快照，用于比较不同节点的状态是否收敛"""
        return {
            "values": {k: self._values[k] for k in sorted(self._values)},
            "counters": {k: self._counters[k] for k in sorted(self._counters)},
            "sets": {k: sorted(self._sets[k]) for k in sorted(self._sets) if self._sets[k]},
        }
