"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，包含 SQLite 连通性、WAL 模式、磁盘空间。
"""

import shutil

import structlog
from fastapi import APIRouter, Depends
from intertask.core.store import StoreGroup
from intertask.core.store.sqlite_init import verify_wal_mode
from starlette.responses import JSONResponse

from ..deps import get_store_group

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(store_group: StoreGroup = Depends(get_store_group)):
    """Readiness 检查 -- 验证核心依赖可用性

    检查项：
    1. sqlite: 数据库连通性
    2. wal_mode: WAL 是否启用
    3. disk_space_mb: 磁盘剩余空间
    """
    checks = {}
    all_ok = True

    # 1. SQLite 连通性检查
    try:
        cursor = await store_group.conn.execute("SELECT 1")
        await cursor.fetchone()
        checks["sqlite"] = "ok"
        checks["wal_mode"] = "ok" if await verify_wal_mode(store_group.conn) else "off"
    except Exception as e:
        log.warning("readiness_sqlite_failed", error=str(e))
        checks["sqlite"] = "unavailable"
        all_ok = False

    # 2. 磁盘空间检查
    try:
        disk_usage = shutil.disk_usage("/")
        checks["disk_space_mb"] = disk_usage.free // (1024 * 1024)
    except OSError:
        checks["disk_space_mb"] = 0
        all_ok = False

    status_code = 200 if all_ok else 503
    status_text = "ready" if all_ok else "not_ready"

    return JSONResponse(
        status_code=status_code,
        content={"status": status_text, "checks": checks},
    )
