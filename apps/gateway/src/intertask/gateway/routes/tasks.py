"""视图查询路由

POST /api/view: 通用视图调用 {method, params}。
GET /api/tasks: list_tasks，支持 status / assignee 筛选。
GET /api/tasks/{task_id}: get_task。
GET /api/stats: stats。
视图只读、不做授权检查。
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from intertask.core.models import ViewMethod
from pydantic import BaseModel, Field

from ..deps import get_ledger_service

router = APIRouter()


class ViewRequest(BaseModel):
    """视图请求体"""

    method: str = Field(description="视图方法名")
    params: dict[str, Any] = Field(default_factory=dict, description="视图参数")


@router.post("/api/view")
async def run_view(body: ViewRequest, service=Depends(get_ledger_service)):
    """执行任意视图"""
    result = await service.query(body.method, body.params)
    return result.model_dump(mode="json")


@router.get("/api/tasks")
async def list_tasks(
    status: str | None = Query(default=None, description="按状态筛选"),
    assignee: str | None = Query(default=None, description="按被指派者筛选"),
    service=Depends(get_ledger_service),
):
    """查询任务列表，按 created_at 倒序"""
    result = await service.query(
        ViewMethod.LIST_TASKS,
        {"status": status, "assignee": assignee},
    )
    return result.model_dump(mode="json")


@router.get("/api/tasks/{task_id}")
async def get_task(task_id: str, service=Depends(get_ledger_service)):
    """查询单个任务，不存在返回 404"""
    result = await service.query(ViewMethod.GET_TASK, {"id": task_id})
    return result.model_dump(mode="json")


@router.get("/api/stats")
async def stats(service=Depends(get_ledger_service)):
    """各状态任务数"""
    result = await service.query(ViewMethod.STATS)
    return result.model_dump(mode="json")
