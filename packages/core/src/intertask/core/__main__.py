"""CLI 入口模块 -- python -m intertask.core <command>

支持的命令：
  rebuild-state  从 operations 表重放重建状态
  stats          打印各状态索引集合的基数
"""

import asyncio
import sys

from .config import get_db_path

_USAGE = """用法: python -m intertask.core <command>
命令:
  rebuild-state  从 operations 表重放重建状态
  stats          打印任务统计"""


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print(_USAGE)
        sys.exit(1)

    command = sys.argv[1]

    if command == "rebuild-state":
        asyncio.run(rebuild())
    elif command == "stats":
        asyncio.run(print_stats())
    else:
        print(f"未知命令: {command}")
        print("可用命令: rebuild-state, stats")
        sys.exit(1)


async def rebuild() -> None:
    """执行状态重建"""
    from .admins import StaticAdminDirectory
    from .replay import rebuild_state
    from .store import create_store_group

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")
    print("开始重建状态...")

    store_group = await create_store_group(db_path)
    try:
        report = await rebuild_state(store_group, StaticAdminDirectory.from_env())
        print(f"重建完成，应用 {report.applied} 条操作，拒绝 {report.rejected} 条")
    finally:
        await store_group.conn.close()


async def print_stats() -> None:
    """打印任务统计"""
    from .machine import run_view
    from .models import ViewMethod
    from .store import create_store_group

    store_group = await create_store_group(get_db_path())
    try:
        result = await run_view(store_group.state_store, ViewMethod.STATS)
        for name, value in result.model_dump().items():
            print(f"{name:<10} {value}")
    finally:
        await store_group.conn.close()


if __name__ == "__main__":
    main()
