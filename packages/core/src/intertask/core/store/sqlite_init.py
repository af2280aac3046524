"""SQLite 数据库初始化

PRAGMA 配置 + 状态表 / 操作日志表 DDL + 索引创建。
使用 aiosqlite 异步操作。
"""

import aiosqlite

# 键值表：value 为 JSON 文本
_KV_DDL = """
CREATE TABLE IF NOT EXISTS kv (
    key    TEXT PRIMARY KEY,
    value  TEXT NOT NULL
);
"""

# 计数器表
_COUNTERS_DDL = """
CREATE TABLE IF NOT EXISTS counters (
    key    TEXT PRIMARY KEY,
    value  INTEGER NOT NULL DEFAULT 0
);
"""

# 命名集合表：(set_key, member) 唯一
_SET_MEMBERS_DDL = """
CREATE TABLE IF NOT EXISTS set_members (
    set_key  TEXT NOT NULL,
    member   TEXT NOT NULL,

    PRIMARY KEY (set_key, member)
);
"""

# 操作日志表：seq 即全局顺序
_OPERATIONS_DDL = """
CREATE TABLE IF NOT EXISTS operations (
    seq      INTEGER PRIMARY KEY,
    op_id    TEXT NOT NULL,
    method   TEXT NOT NULL,
    params   TEXT NOT NULL DEFAULT '{}',
    signer   TEXT NOT NULL,
    ts       INTEGER NOT NULL
);
"""

_OPERATIONS_INDEXES = [
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_operations_op_id ON operations(op_id);",
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    # 设置 PRAGMA
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    # 创建表
    await conn.execute(_KV_DDL)
    await conn.execute(_COUNTERS_DDL)
    await conn.execute(_SET_MEMBERS_DDL)
    await conn.execute(_OPERATIONS_DDL)

    # 创建索引
    for idx_sql in _OPERATIONS_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
