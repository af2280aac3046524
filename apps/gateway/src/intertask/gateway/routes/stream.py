"""通知路由

GET /api/stream: SSE 实时推送 task_update / chat 通知。
POST /api/notifications: 接收传输层转来的其他节点通知，转发给本地订阅者。
不推送历史（通知不持久化），空闲时按间隔发送心跳。
"""

import asyncio

from fastapi import APIRouter, Depends, Request, status
from intertask.core.config import SSE_HEARTBEAT_INTERVAL
from intertask.core.models import Notification
from sse_starlette.sse import EventSourceResponse

from ..deps import get_ledger_service, get_notification_hub

router = APIRouter()


def notification_to_sse(notification: Notification) -> dict:
    """将通知模型转换为 SSE 消息"""
    return {
        "event": notification.type,
        "data": notification.model_dump_json(),
    }


@router.get("/api/stream")
async def stream_notifications(
    request: Request,
    hub=Depends(get_notification_hub),
):
    """SSE 通知流端点

    1. 注册到 NotificationHub
    2. 实时推送新通知
    3. 心跳保活，客户端断开后取消订阅
    """

    async def event_generator():
        queue = await hub.subscribe()
        try:
            while True:
                if await request.is_disconnected():
                    return
                try:
                    notification = await asyncio.wait_for(
                        queue.get(), timeout=SSE_HEARTBEAT_INTERVAL
                    )
                    yield notification_to_sse(notification)
                except TimeoutError:
                    # 心跳保活
                    yield {"comment": "heartbeat"}
        finally:
            await hub.unsubscribe(queue)

    return EventSourceResponse(event_generator())


@router.post("/api/notifications", status_code=status.HTTP_202_ACCEPTED)
async def receive_notification(request: Request, service=Depends(get_ledger_service)):
    """接收其他节点的通知，非法载荷忽略"""
    notification = await service.relay_notification(await request.body())
    return {"accepted": notification is not None}
