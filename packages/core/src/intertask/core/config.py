"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、管理员列表、通知队列与心跳参数，以及字段长度限制。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取节点 data 基础目录"""
    return Path(os.environ.get("INTERTASK_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "INTERTASK_DB_PATH",
        str(_get_base_dir() / "sqlite" / "intertask.db"),
    )


def get_admin_identities() -> frozenset[str]:
    """获取管理员身份集合（逗号分隔，忽略空白项）"""
    raw = os.environ.get("INTERTASK_ADMINS", "")
    return frozenset(item.strip() for item in raw.split(",") if item.strip())


def get_node_id() -> str:
    """获取本节点标识（仅用于日志）"""
    return os.environ.get("INTERTASK_NODE_ID", "node-local")


# 字段长度限制（按原始输入长度判断）
TITLE_MAX_LENGTH: int = 140
DESC_MAX_LENGTH: int = 1000
CHAT_MAX_LENGTH: int = 1000

# task_000001 形式的序号宽度
TASK_ID_WIDTH: int = 6

# SSE 心跳间隔（秒）
SSE_HEARTBEAT_INTERVAL: int = int(
    os.environ.get("INTERTASK_SSE_HEARTBEAT_INTERVAL", "15")
)

# 每个订阅者的通知队列上限，满了直接丢弃该订阅者
NOTIFY_QUEUE_MAXSIZE: int = int(
    os.environ.get("INTERTASK_NOTIFY_QUEUE_MAXSIZE", "100")
)
