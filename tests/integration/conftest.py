"""集成测试共享 fixture"""

import itertools
import os
from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from intertask.core.admins import StaticAdminDirectory
from intertask.core.store import StoreGroup, create_store_group
from intertask.gateway.services.ledger_service import LedgerService
from intertask.gateway.services.notification_hub import NotificationHub

ADMINS = {"admin"}


async def build_node(db_path: str):
    """创建节点 app 并手动初始化组件（绕过 lifespan）"""
    from intertask.gateway.main import create_app

    app = create_app()
    store_group = await create_store_group(db_path)
    ticks = itertools.count(1_760_000_000_001)
    app.state.store_group = store_group
    app.state.admins = StaticAdminDirectory(ADMINS)
    app.state.notification_hub = NotificationHub()
    app.state.ledger_service = LedgerService(
        store_group,
        app.state.admins,
        app.state.notification_hub,
        clock=lambda: next(ticks),
    )
    return app


@pytest_asyncio.fixture
async def node_factory(tmp_path: Path) -> AsyncGenerator[Callable, None]:
    """按名称创建独立节点，每个节点一个数据库文件"""
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"
    groups: list[StoreGroup] = []

    async def _make(name: str):
        app = await build_node(str(tmp_path / f"{name}.db"))
        groups.append(app.state.store_group)
        return app

    yield _make

    for group in groups:
        await group.conn.close()
    os.environ.pop("LOGFIRE_SEND_TO_LOGFIRE", None)


@pytest_asyncio.fixture
async def integration_app(node_factory):
    """集成测试用 FastAPI app"""
    return await node_factory("node")


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
