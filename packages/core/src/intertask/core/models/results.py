"""交易与视图的返回结构"""

from pydantic import BaseModel

from .task import Task


class TaskMutationResult(BaseModel):
    """add_task / complete_task / cancel_task 返回"""

    success: bool = True
    id: str
    task: Task


class TaskListResult(BaseModel):
    """list_tasks 返回，tasks 按 created_at 倒序"""

    tasks: list[Task]
    count: int


class TaskDetailResult(BaseModel):
    """get_task 返回"""

    task: Task


class StatsResult(BaseModel):
    """stats 返回，各索引集合的基数"""

    total: int
    open: int
    completed: int
    cancelled: int
