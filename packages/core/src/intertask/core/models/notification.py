"""旁路通知模型

通知不属于复制状态，仅尽力投递给在线节点。
网关经 POST /api/notifications 接收其他节点的通知，无法解析的载荷直接忽略。
"""

import json
from typing import Annotated, Literal

import structlog
from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .enums import NotificationType, TaskStatus

log = structlog.get_logger()


class TaskUpdateNotification(BaseModel):
    """任务状态变更通知"""

    type: Literal[NotificationType.TASK_UPDATE] = NotificationType.TASK_UPDATE
    id: str
    status: TaskStatus


class ChatNotification(BaseModel):
    """聊天消息"""

    type: Literal[NotificationType.CHAT] = NotificationType.CHAT
    text: str
    sender: str | None = None


Notification = Annotated[
    TaskUpdateNotification | ChatNotification,
    Field(discriminator="type"),
]

_notification_adapter: TypeAdapter[Notification] = TypeAdapter(Notification)


def parse_notification(raw: str | bytes | dict) -> Notification | None:
    """解析接收到的通知载荷

    Returns:
        通知模型；非 JSON、类型未知或字段缺失时返回 None
    """
    try:
        data = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
        return _notification_adapter.validate_python(data)
    except (ValueError, PydanticValidationError):
        log.debug("notification_ignored")
        return None
