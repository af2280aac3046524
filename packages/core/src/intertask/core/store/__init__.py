"""InterTask Core Store -- 状态存储与操作日志

提供工厂函数创建共享数据库连接的 Store 实例组。
"""

from pathlib import Path

import aiosqlite

from .memory_store import MemoryStateStore
from .operation_log import SqliteOperationLog
from .sqlite_init import init_db
from .state_store import SqliteStateStore


class StoreGroup:
    """Store 实例组 -- 共享同一个数据库连接

    state_store 与 operation_log 的写入处于同一 SQLite 事务中。
    """

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn
        self.state_store = SqliteStateStore(conn)
        self.operation_log = SqliteOperationLog(conn)


async def create_store_group(db_path: str) -> StoreGroup:
    """创建 Store 实例组

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        StoreGroup 实例
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    conn.row_factory = aiosqlite.Row
    await init_db(conn)

    return StoreGroup(conn=conn)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "MemoryStateStore",
    "SqliteStateStore",
    "SqliteOperationLog",
    "init_db",
]
