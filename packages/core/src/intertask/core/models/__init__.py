"""InterTask Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    NotificationType,
    TaskStatus,
    TransactionMethod,
    ViewMethod,
    validate_transition,
)
from .notification import (
    ChatNotification,
    Notification,
    TaskUpdateNotification,
    parse_notification,
)
from .operation import Operation
from .params import (
    AddTaskParams,
    CancelTaskParams,
    CompleteTaskParams,
    GetTaskParams,
    ListTasksParams,
    StatsParams,
    parse_params,
)
from .results import StatsResult, TaskDetailResult, TaskListResult, TaskMutationResult
from .task import Task

__all__ = [
    # 枚举
    "TaskStatus",
    "TransactionMethod",
    "ViewMethod",
    "NotificationType",
    # 状态机
    "VALID_TRANSITIONS",
    "TERMINAL_STATES",
    "validate_transition",
    # Task
    "Task",
    # Operation
    "Operation",
    # Params
    "AddTaskParams",
    "CompleteTaskParams",
    "CancelTaskParams",
    "ListTasksParams",
    "GetTaskParams",
    "StatsParams",
    "parse_params",
    # Results
    "TaskMutationResult",
    "TaskListResult",
    "TaskDetailResult",
    "StatsResult",
    # Notifications
    "Notification",
    "TaskUpdateNotification",
    "ChatNotification",
    "parse_notification",
]
