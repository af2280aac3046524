"""交易提交路由

POST /api/tx: 提交交易（add_task / complete_task / cancel_task），
签名者身份取自 X-Signer 头。
- 200: 应用成功，返回 {success, id, task}
- 401: 缺少签名者
- 403/404/409/422: 授权、存在性、状态、参数错误，状态不变
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..deps import get_ledger_service, get_signer

router = APIRouter()


class TransactionRequest(BaseModel):
    """交易请求体"""

    method: str = Field(description="交易方法名")
    params: dict[str, Any] = Field(default_factory=dict, description="交易参数")


@router.post("/api/tx")
async def submit_transaction(
    body: TransactionRequest,
    signer: str = Depends(get_signer),
    service=Depends(get_ledger_service),
):
    """排序并应用一笔交易"""
    result = await service.submit_transaction(body.method, body.params, signer)
    return result.model_dump(mode="json")
