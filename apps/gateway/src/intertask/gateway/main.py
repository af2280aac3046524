"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭 + 节点组件初始化 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from intertask.core.admins import StaticAdminDirectory
from intertask.core.config import get_db_path, get_node_id
from intertask.core.store import create_store_group

from .error_handlers import register_error_handlers
from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .routes import chat, health, operations, stream, tasks, transactions
from .services.ledger_service import LedgerService
from .services.notification_hub import NotificationHub

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 Store 和节点组件，关闭时清理连接"""
    db_path = get_db_path()
    store_group = await create_store_group(db_path)
    app.state.store_group = store_group

    admins = StaticAdminDirectory.from_env()
    app.state.admins = admins

    app.state.notification_hub = NotificationHub()
    app.state.ledger_service = LedgerService(
        store_group,
        admins,
        app.state.notification_hub,
    )

    log.info(
        "node_started",
        node_id=get_node_id(),
        db_path=db_path,
        admin_count=len(admins.identities),
    )

    yield

    # 关闭：清理数据库连接
    if hasattr(app.state, "store_group") and app.state.store_group:
        await app.state.store_group.conn.close()
    log.info("node_stopped", node_id=get_node_id())


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="InterTask Node",
        version="0.1.0",
        description="InterTask 复制任务账本节点 API",
        lifespan=lifespan,
    )

    # 注册中间件
    app.add_middleware(LoggingMiddleware)

    register_error_handlers(app)

    # 初始化日志
    setup_logging()
    setup_logfire(app)

    # 注册路由
    app.include_router(transactions.router, tags=["transactions"])
    app.include_router(tasks.router, tags=["views"])
    app.include_router(chat.router, tags=["chat"])
    app.include_router(operations.router, tags=["operations"])
    app.include_router(stream.router, tags=["stream"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
