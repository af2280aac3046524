"""Task Domain Model

Task 记录以 task:<id> 为键保存在 StateStore 中，
状态索引集合（tasks:open 等）必须与 status 字段保持一致。
"""

from pydantic import BaseModel, Field

from .enums import TaskStatus


class Task(BaseModel):
    """Task 数据模型

    id 与 creator 创建后不可变；时间戳为 epoch 毫秒，取自操作信封，
    仅作展示用途，不参与排序以外的任何判定。
    """

    id: str = Field(description="task_NNNNNN 格式的唯一标识")
    title: str = Field(description="任务标题（已去除首尾空白）")
    desc: str = Field(default="", description="任务描述")
    assignee: str | None = Field(default=None, description="被指派者身份")
    creator: str = Field(description="创建者身份，即创建交易的签名者")
    status: TaskStatus = Field(default=TaskStatus.OPEN, description="当前状态")
    created_at: int = Field(description="创建时间（epoch 毫秒）")
    updated_at: int = Field(description="最近一次变更时间（epoch 毫秒）")
    completed_by: str | None = Field(default=None, description="完成者身份")
    cancelled_by: str | None = Field(default=None, description="取消者身份")
