"""packages/core 测试配置 -- 核心层 fixture"""

import itertools
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

import aiosqlite
import pytest
import pytest_asyncio
from intertask.core.admins import StaticAdminDirectory
from intertask.core.models import Operation

BASE_TS = 1_760_000_000_000


@pytest_asyncio.fixture(params=["memory", "sqlite"])
async def state_store(request, tmp_path: Path) -> AsyncGenerator[Any, None]:
    """同一组用例分别运行在内存实现和 SQLite 实现上"""
    if request.param == "memory":
        from intertask.core.store import MemoryStateStore

        yield MemoryStateStore()
        return

    from intertask.core.store import SqliteStateStore
    from intertask.core.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(tmp_path / "state.db"))
    await init_db(conn)
    yield SqliteStateStore(conn)
    await conn.close()


@pytest.fixture
def admins() -> StaticAdminDirectory:
    """admin 是唯一的管理员"""
    return StaticAdminDirectory({"admin"})


@pytest.fixture
def op_factory() -> Callable[..., Operation]:
    """按调用顺序分配 seq 的 Operation 构造器，ts 随 seq 递增"""
    counter = itertools.count(1)

    def _make(
        method: str,
        params: dict[str, Any] | None = None,
        signer: str = "alice",
        ts: int | None = None,
    ) -> Operation:
        seq = next(counter)
        return Operation(
            seq=seq,
            op_id=f"op-{seq:06d}",
            method=method,
            params=params or {},
            signer=signer,
            ts=BASE_TS + seq if ts is None else ts,
        )

    return _make


@pytest_asyncio.fixture
async def store_group(tmp_path: Path) -> AsyncGenerator[Any, None]:
    """基于临时 SQLite 文件的 StoreGroup"""
    from intertask.core.store import create_store_group

    group = await create_store_group(str(tmp_path / "ledger.db"))
    yield group
    await group.conn.close()
