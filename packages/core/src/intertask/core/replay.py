"""状态重建模块

按 seq 顺序重放操作日志重建状态，确保同一日志在任意节点得到同一状态。
支持对任意 StateStore 重放，以及从持久化日志全量重建两种模式。
"""

import time
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from .exceptions import LedgerError
from .machine import apply_operation, execute_operation
from .models.operation import Operation
from .store import StoreGroup
from .store.protocols import AdminDirectory, StateStore

log = structlog.get_logger()


@dataclass
class ReplayReport:
    """重放统计"""

    applied: int = 0
    rejected: int = 0

    @property
    def total(self) -> int:
        return self.applied + self.rejected


async def replay_operations(
    store: StateStore,
    admins: AdminDirectory,
    operations: Iterable[Operation],
) -> ReplayReport:
    """按 seq 顺序将操作逐个应用到 store

    被拒绝的操作只计数：拒绝同样是确定性的，每个节点都会拒绝。

    Args:
        store: 目标状态存储
        admins: 管理员目录
        operations: 操作序列（无需预先排序）

    Returns:
        ReplayReport
    """
    report = ReplayReport()
    for op in sorted(operations, key=lambda o: o.seq):
        try:
            await apply_operation(store, admins, op)
        except LedgerError:
            report.rejected += 1
        else:
            report.applied += 1
    return report


async def rebuild_state(store_group: StoreGroup, admins: AdminDirectory) -> ReplayReport:
    """从 operations 表重建状态表

    流程：
    1. 读取所有操作（按 seq 排序）
    2. 在单个事务内清空状态表
    3. 依次执行所有操作后提交

    Args:
        store_group: Store 实例组
        admins: 管理员目录

    Returns:
        ReplayReport
    """
    start_time = time.monotonic()

    operations = await store_group.operation_log.get_all_operations()
    await log.ainfo("state_rebuild_started", operation_count=len(operations))

    report = ReplayReport()
    state_store = store_group.state_store
    async with state_store.atomic():
        await state_store.clear()
        for op in operations:
            try:
                await execute_operation(state_store, admins, op)
            except LedgerError as e:
                # 日志中只有成功应用过的操作，出现拒绝说明管理员配置与当初不同
                report.rejected += 1
                log.warning("state_rebuild_rejected", seq=op.seq, code=e.code, reason=e.message)
            else:
                report.applied += 1

    elapsed_ms = int((time.monotonic() - start_time) * 1000)
    await log.ainfo(
        "state_rebuild_completed",
        applied=report.applied,
        rejected=report.rejected,
        elapsed_ms=elapsed_ms,
    )
    return report
