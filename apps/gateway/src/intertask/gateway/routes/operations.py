"""操作日志路由

GET /api/operations?after=<seq>&limit=<n>: 按 seq 正序读取已应用的操作，
供其他节点追赶或审计。
"""

from fastapi import APIRouter, Depends, Query

from ..deps import get_ledger_service

router = APIRouter()


@router.get("/api/operations")
async def list_operations(
    after: int = Query(default=0, ge=0, description="只返回 seq 大于该值的操作"),
    limit: int = Query(default=100, ge=1, le=1000, description="最多返回条数"),
    service=Depends(get_ledger_service),
):
    """读取有序操作日志"""
    operations = await service.list_operations(after, limit)
    return {
        "operations": [op.model_dump(mode="json") for op in operations],
        "count": len(operations),
    }
