"""apps/gateway 测试配置 -- 完整 app + 手动初始化的节点组件"""

import itertools
import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

BASE_TS = 1_760_000_000_000

ADMIN = "admin"


@pytest_asyncio.fixture
async def test_app(tmp_path: Path):
    """创建测试用 FastAPI app，手动初始化 lifespan 状态

    管理员固定为 admin；时钟从 BASE_TS 起每次提交递增 1ms。
    """
    os.environ["INTERTASK_DB_PATH"] = str(tmp_path / "test.db")
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from intertask.core.admins import StaticAdminDirectory
    from intertask.core.store import create_store_group
    from intertask.gateway.main import create_app
    from intertask.gateway.services.ledger_service import LedgerService
    from intertask.gateway.services.notification_hub import NotificationHub

    app = create_app()

    # 手动初始化（绕过 lifespan）
    store_group = await create_store_group(str(tmp_path / "test.db"))
    ticks = itertools.count(BASE_TS + 1)
    app.state.store_group = store_group
    app.state.admins = StaticAdminDirectory({ADMIN})
    app.state.notification_hub = NotificationHub()
    app.state.ledger_service = LedgerService(
        store_group,
        app.state.admins,
        app.state.notification_hub,
        clock=lambda: next(ticks),
    )

    yield app

    await store_group.conn.close()
    os.environ.pop("INTERTASK_DB_PATH", None)
    os.environ.pop("LOGFIRE_SEND_TO_LOGFIRE", None)


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac
