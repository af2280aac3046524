"""聊天路由

POST /api/chat: 向在线节点广播聊天消息。消息只走旁路通知，不落盘。
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..deps import get_ledger_service, get_signer

router = APIRouter()


class ChatRequest(BaseModel):
    """聊天请求体"""

    text: str = Field(description="消息文本")


@router.post("/api/chat")
async def send_chat(
    body: ChatRequest,
    signer: str = Depends(get_signer),
    service=Depends(get_ledger_service),
):
    """广播聊天消息"""
    notification = await service.send_chat(signer, body.text)
    return {"success": True, "message": notification.model_dump(mode="json")}
