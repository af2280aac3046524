"""LedgerService -- 节点运行时：排序、应用、查询、通知投递

本节点充当上游排序方时，为每个提交分配 seq / op_id / ts，
在单个事务内应用交易并写入操作日志，提交成功后再投递通知。
通知投递失败只记日志，不回滚、不重试。
"""

from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any

import structlog
from intertask.core.config import CHAT_MAX_LENGTH
from intertask.core.exceptions import ValidationError
from intertask.core.machine import run_view
from intertask.core.models import (
    ChatNotification,
    Notification,
    Operation,
    TaskMutationResult,
    parse_notification,
)
from intertask.core.store import StoreGroup
from intertask.core.store.protocols import AdminDirectory
from intertask.core.store.transaction import apply_and_record, sequence_and_apply
from pydantic import BaseModel
from ulid import ULID

from .notification_hub import NotificationHub

log = structlog.get_logger()


def _now_ms() -> int:
    return int(datetime.now(UTC).timestamp() * 1000)


class LedgerService:
    """节点业务服务"""

    def __init__(
        self,
        store_group: StoreGroup,
        admins: AdminDirectory,
        hub: NotificationHub | None = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._stores = store_group
        self._admins = admins
        self._hub = hub
        self._clock = clock

    async def submit_transaction(
        self,
        method: str,
        params: dict[str, Any] | None,
        signer: str,
    ) -> TaskMutationResult:
        """提交新交易（本节点排序）

        Args:
            method: 交易方法名
            params: 原始参数
            signer: 已由签名层认证的身份

        Returns:
            交易结果

        Raises:
            LedgerError 子类: 校验、存在性、状态或授权失败，状态不变
        """
        if not signer:
            raise ValidationError("signer is required")
        if params is not None and not isinstance(params, dict):
            raise ValidationError("params must be an object")

        op_id = str(ULID())
        ts = self._clock()

        def build_op(seq: int) -> Operation:
            return Operation(
                seq=seq,
                op_id=op_id,
                method=method,
                params=params or {},
                signer=signer,
                ts=ts,
            )

        _, outcome = await sequence_and_apply(
            self._stores.state_store,
            self._stores.operation_log,
            self._admins,
            build_op,
        )
        await self._dispatch(outcome.effects)
        return outcome.result

    async def apply_sequenced(self, op: Operation) -> TaskMutationResult:
        """应用一个已由复制层排好序的操作"""
        outcome = await apply_and_record(
            self._stores.state_store,
            self._stores.operation_log,
            self._admins,
            op,
        )
        await self._dispatch(outcome.effects)
        return outcome.result

    async def query(self, method: str, params: dict[str, Any] | None = None) -> BaseModel:
        """执行只读视图"""
        return await run_view(self._stores.state_store, method, params)

    async def list_operations(self, after: int = 0, limit: int | None = None) -> list[Operation]:
        """读取已提交的有序操作日志

        与交易共用同一把锁：追加后尚未提交的操作不会被读到。
        """
        async with self._stores.state_store.snapshot():
            return await self._stores.operation_log.get_operations_after(after, limit)

    async def send_chat(self, signer: str, text: str) -> ChatNotification:
        """广播聊天消息（不落盘、不参与状态）"""
        text = (text or "").strip()
        if not text:
            raise ValidationError("text is required")
        if len(text) > CHAT_MAX_LENGTH:
            raise ValidationError(f"text exceeds {CHAT_MAX_LENGTH} characters")

        notification = ChatNotification(text=text, sender=signer)
        await self._dispatch([notification])
        return notification

    async def relay_notification(self, raw: str | bytes) -> Notification | None:
        """转发其他节点发来的通知给本地订阅者

        无法解析的载荷直接忽略，返回 None。
        """
        notification = parse_notification(raw)
        if notification is not None:
            await self._dispatch([notification])
        return notification

    async def _dispatch(self, effects: Iterable[Notification]) -> None:
        """投递通知 effect，失败不影响已提交的状态"""
        if self._hub is None:
            return
        for notification in effects:
            try:
                await self._hub.broadcast(notification)
            except Exception as e:
                log.warning(
                    "notification_dispatch_failed",
                    type=notification.type,
                    error=str(e),
                )
