"""状态写入 + 操作日志原子事务封装

在同一 SQLite 事务内提交交易的状态写入和操作日志记录。
任一步失败整体回滚，日志中只会出现成功应用的操作。
"""

from collections.abc import Callable

import structlog

from ..exceptions import DuplicateOperationError, LedgerError, OutOfOrderOperationError
from ..machine import ApplyOutcome, execute_operation
from ..models.operation import Operation
from .protocols import AdminDirectory, OperationLog, StateStore

log = structlog.get_logger()


async def sequence_and_apply(
    state_store: StateStore,
    operation_log: OperationLog,
    admins: AdminDirectory,
    build_op: Callable[[int], Operation],
) -> tuple[Operation, ApplyOutcome]:
    """为新操作分配 seq 并应用（本节点充当排序方）

    seq 的分配与应用处于同一把锁、同一事务内，并发提交不会拿到相同的 seq。

    Args:
        state_store: 状态存储
        operation_log: 操作日志
        admins: 管理员目录
        build_op: 接收 seq、返回完整 Operation 的构造函数

    Returns:
        (已应用的 Operation, ApplyOutcome)
    """
    op: Operation | None = None
    try:
        async with state_store.atomic():
            seq = await operation_log.get_next_seq()
            op = build_op(seq)
            outcome = await execute_operation(state_store, admins, op)
            await operation_log.append_operation(op)
    except LedgerError as e:
        log.info(
            "transaction_rejected",
            candidate_seq=op.seq if op else None,
            method=op.method if op else None,
            code=e.code,
            reason=e.message,
        )
        raise

    log.info(
        "transaction_applied",
        seq=op.seq,
        op_id=op.op_id,
        method=op.method,
        signer=op.signer,
        task_id=outcome.result.id,
    )
    return op, outcome


async def apply_and_record(
    state_store: StateStore,
    operation_log: OperationLog,
    admins: AdminDirectory,
    op: Operation,
) -> ApplyOutcome:
    """应用一个已由上游排好序的操作

    seq 必须晚于已记录的最后一个操作（被上游各节点一致拒绝的操作不入日志，
    因此允许出现空洞），op_id 不得重复。

    Raises:
        OutOfOrderOperationError: seq 不晚于已应用的操作
        DuplicateOperationError: op_id 已应用
    """
    try:
        async with state_store.atomic():
            next_seq = await operation_log.get_next_seq()
            if op.seq < next_seq:
                raise OutOfOrderOperationError(next_seq, op.seq)
            if await operation_log.has_operation(op.op_id):
                raise DuplicateOperationError(op.op_id)
            outcome = await execute_operation(state_store, admins, op)
            await operation_log.append_operation(op)
    except LedgerError as e:
        log.info(
            "transaction_rejected",
            candidate_seq=op.seq,
            op_id=op.op_id,
            method=op.method,
            code=e.code,
            reason=e.message,
        )
        raise

    log.info(
        "transaction_applied",
        seq=op.seq,
        op_id=op.op_id,
        method=op.method,
        signer=op.signer,
        task_id=outcome.result.id,
    )
    return outcome
