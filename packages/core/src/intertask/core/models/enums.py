"""枚举定义

包含 TaskStatus 状态机、交易/视图方法名、通知类型，
以及 VALID_TRANSITIONS 合法流转映射和 TERMINAL_STATES 终态集合。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """Task 状态机"""

    OPEN = "open"

    # 终态
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# 合法状态流转：只允许 open -> 终态，且不可逆
VALID_TRANSITIONS: dict[TaskStatus, set[TaskStatus]] = {
    TaskStatus.OPEN: {TaskStatus.COMPLETED, TaskStatus.CANCELLED},
    TaskStatus.COMPLETED: set(),
    TaskStatus.CANCELLED: set(),
}

TERMINAL_STATES: set[TaskStatus] = {
    TaskStatus.COMPLETED,
    TaskStatus.CANCELLED,
}


class TransactionMethod(StrEnum):
    """写操作（交易）方法名"""

    ADD_TASK = "add_task"
    COMPLETE_TASK = "complete_task"
    CANCEL_TASK = "cancel_task"


class ViewMethod(StrEnum):
    """只读查询（视图）方法名"""

    LIST_TASKS = "list_tasks"
    GET_TASK = "get_task"
    STATS = "stats"


class NotificationType(StrEnum):
    """旁路通知类型"""

    TASK_UPDATE = "task_update"
    CHAT = "chat"


def validate_transition(from_status: TaskStatus, to_status: TaskStatus) -> bool:
    """验证状态流转是否合法

    Args:
        from_status: 当前状态
        to_status: 目标状态

    Returns:
        True 如果流转合法，否则 False
    """
    allowed = VALID_TRANSITIONS.get(from_status, set())
    return to_status in allowed
