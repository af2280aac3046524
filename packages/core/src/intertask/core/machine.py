"""任务状态机 -- 交易处理函数与视图处理函数

每个节点按同一顺序对本地 StateStore 应用同一串操作，状态即可收敛。
交易流程：校验参数 -> 检查授权 -> 写入 Task 与索引 -> 产生通知 effect。
校验与授权都在第一次写入之前完成；通知只作为 effect 返回，由调用方投递。

键布局：
  task_seq                   全局任务序号计数器
  task:<id>                  Task 记录
  tasks:all|open|completed|cancelled   状态索引集合
  tasks:assignee:<identity>  被指派者索引集合（仅创建时写入）
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import structlog
from pydantic import BaseModel

from .config import TASK_ID_WIDTH
from .exceptions import (
    AuthorizationError,
    InvalidStateError,
    LedgerError,
    NotFoundError,
    ValidationError,
)
from .models.enums import TaskStatus, TransactionMethod, ViewMethod, validate_transition
from .models.notification import Notification, TaskUpdateNotification
from .models.operation import Operation
from .models.params import (
    AddTaskParams,
    CancelTaskParams,
    CompleteTaskParams,
    GetTaskParams,
    ListTasksParams,
    StatsParams,
    parse_params,
)
from .models.results import StatsResult, TaskDetailResult, TaskListResult, TaskMutationResult
from .models.task import Task
from .store.protocols import AdminDirectory, StateStore

log = structlog.get_logger()

TASK_SEQ_KEY = "task_seq"
ALL_TASKS_KEY = "tasks:all"


def format_task_id(seq: int) -> str:
    return f"task_{seq:0{TASK_ID_WIDTH}d}"


def task_key(task_id: str) -> str:
    return f"task:{task_id}"


def status_set_key(status: TaskStatus) -> str:
    return f"tasks:{status.value}"


def assignee_set_key(identity: str) -> str:
    return f"tasks:assignee:{identity}"


@dataclass
class TransactionContext:
    """交易执行上下文：签名者与时间均来自操作信封"""

    store: StateStore
    admins: AdminDirectory
    signer: str
    ts: int


@dataclass
class ApplyOutcome:
    """交易结果 + 待投递的通知"""

    result: TaskMutationResult
    effects: list[Notification] = field(default_factory=list)


async def _load_task(store: StateStore, task_id: str) -> Task:
    raw = await store.get(task_key(task_id))
    if raw is None:
        raise NotFoundError(task_id)
    return Task.model_validate(raw)


async def _save_task(store: StateStore, task: Task) -> None:
    await store.set(task_key(task.id), task.model_dump(mode="json"))


def _require_open(task: Task) -> None:
    if task.status != TaskStatus.OPEN:
        raise InvalidStateError(task.id, task.status.value)


async def _transition(
    ctx: TransactionContext,
    task: Task,
    to_status: TaskStatus,
    actor_field: str,
) -> ApplyOutcome:
    """终态流转：更新字段并在状态索引之间移动 id（同一事务内）"""
    if not validate_transition(task.status, to_status):
        raise InvalidStateError(task.id, task.status.value)

    updated = task.model_copy(
        update={
            "status": to_status,
            "updated_at": ctx.ts,
            actor_field: ctx.signer,
        }
    )
    await _save_task(ctx.store, updated)
    await ctx.store.srem(status_set_key(task.status), task.id)
    await ctx.store.sadd(status_set_key(to_status), task.id)

    return ApplyOutcome(
        result=TaskMutationResult(id=updated.id, task=updated),
        effects=[TaskUpdateNotification(id=updated.id, status=to_status)],
    )


# ─── 交易 ───────────────────────────────────────────────────────────────


async def add_task(ctx: TransactionContext, params: AddTaskParams) -> ApplyOutcome:
    """创建任务，任何签名者均可调用"""
    seq = await ctx.store.increment(TASK_SEQ_KEY)
    task_id = format_task_id(seq)

    task = Task(
        id=task_id,
        title=params.title,
        desc=params.desc,
        assignee=params.assignee,
        creator=ctx.signer,
        status=TaskStatus.OPEN,
        created_at=ctx.ts,
        updated_at=ctx.ts,
    )

    await _save_task(ctx.store, task)
    await ctx.store.sadd(ALL_TASKS_KEY, task_id)
    await ctx.store.sadd(status_set_key(TaskStatus.OPEN), task_id)
    if task.assignee:
        await ctx.store.sadd(assignee_set_key(task.assignee), task_id)

    return ApplyOutcome(
        result=TaskMutationResult(id=task_id, task=task),
        effects=[TaskUpdateNotification(id=task_id, status=TaskStatus.OPEN)],
    )


async def complete_task(ctx: TransactionContext, params: CompleteTaskParams) -> ApplyOutcome:
    """完成任务：仅创建者或被指派者，管理员也不行"""
    task = await _load_task(ctx.store, params.id)
    _require_open(task)

    if ctx.signer not in (task.creator, task.assignee):
        raise AuthorizationError("Only the creator or assignee may complete this task")

    return await _transition(ctx, task, TaskStatus.COMPLETED, "completed_by")


async def cancel_task(ctx: TransactionContext, params: CancelTaskParams) -> ApplyOutcome:
    """取消任务：仅创建者或管理员，被指派者不行"""
    task = await _load_task(ctx.store, params.id)
    _require_open(task)

    if task.creator != ctx.signer and not await ctx.admins.is_admin(ctx.signer):
        raise AuthorizationError("Only the creator or an admin may cancel this task")

    return await _transition(ctx, task, TaskStatus.CANCELLED, "cancelled_by")


# ─── 视图 ───────────────────────────────────────────────────────────────


async def list_tasks(store: StateStore, params: ListTasksParams) -> TaskListResult:
    """列出任务，按 created_at 倒序

    有 assignee 时读被指派者索引，再按 status 后置过滤；
    只有 status 时直接读对应状态集合；否则读 tasks:all。
    """
    if params.assignee:
        ids = await store.smembers(assignee_set_key(params.assignee))
    elif params.status:
        ids = await store.smembers(status_set_key(params.status))
    else:
        ids = await store.smembers(ALL_TASKS_KEY)

    tasks: list[Task] = []
    for task_id in ids:
        raw = await store.get(task_key(task_id))
        if raw is None:
            continue
        task = Task.model_validate(raw)
        if params.status is None or task.status == params.status:
            tasks.append(task)

    # 同一时间戳按 id 倒序，结果在各节点上一致
    tasks.sort(key=lambda t: (t.created_at, t.id), reverse=True)
    return TaskListResult(tasks=tasks, count=len(tasks))


async def get_task(store: StateStore, params: GetTaskParams) -> TaskDetailResult:
    return TaskDetailResult(task=await _load_task(store, params.id))


async def stats(store: StateStore, params: StatsParams) -> StatsResult:
    return StatsResult(
        total=await store.scard(ALL_TASKS_KEY),
        open=await store.scard(status_set_key(TaskStatus.OPEN)),
        completed=await store.scard(status_set_key(TaskStatus.COMPLETED)),
        cancelled=await store.scard(status_set_key(TaskStatus.CANCELLED)),
    )


TRANSACTIONS: dict[str, Callable[[TransactionContext, Any], Awaitable[ApplyOutcome]]] = {
    TransactionMethod.ADD_TASK: add_task,
    TransactionMethod.COMPLETE_TASK: complete_task,
    TransactionMethod.CANCEL_TASK: cancel_task,
}

VIEWS: dict[str, Callable[[StateStore, Any], Awaitable[BaseModel]]] = {
    ViewMethod.LIST_TASKS: list_tasks,
    ViewMethod.GET_TASK: get_task,
    ViewMethod.STATS: stats,
}


# ─── 入口 ───────────────────────────────────────────────────────────────


async def execute_operation(
    store: StateStore,
    admins: AdminDirectory,
    op: Operation,
) -> ApplyOutcome:
    """执行单个交易

    注意：此函数不管理事务，需由调用方在 store.atomic() 内调用。

    Raises:
        ValidationError / NotFoundError / InvalidStateError / AuthorizationError
    """
    handler = TRANSACTIONS.get(op.method)
    if handler is None:
        raise ValidationError(f"unknown transaction method: {op.method}")
    params = parse_params(op.method, op.params)
    ctx = TransactionContext(store=store, admins=admins, signer=op.signer, ts=op.ts)
    return await handler(ctx, params)


async def apply_operation(
    store: StateStore,
    admins: AdminDirectory,
    op: Operation,
) -> ApplyOutcome:
    """在独占事务内应用一个交易：要么全部写入，要么什么都不写"""
    try:
        async with store.atomic():
            outcome = await execute_operation(store, admins, op)
    except LedgerError as e:
        log.info(
            "transaction_rejected",
            candidate_seq=op.seq,
            method=op.method,
            signer=op.signer,
            code=e.code,
            reason=e.message,
        )
        raise

    log.info(
        "transaction_applied",
        seq=op.seq,
        method=op.method,
        signer=op.signer,
        task_id=outcome.result.id,
    )
    return outcome


async def run_view(store: StateStore, method: str, raw_params: Any = None) -> BaseModel:
    """执行只读视图，不做授权检查

    Raises:
        ValidationError: 方法未知或参数非法
        NotFoundError: get_task 的任务不存在
    """
    handler = VIEWS.get(method)
    if handler is None:
        raise ValidationError(f"unknown view method: {method}")
    params = parse_params(method, raw_params)
    async with store.snapshot():
        return await handler(store, params)
