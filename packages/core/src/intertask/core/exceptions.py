"""InterTask 核心异常体系

所有异常都在写入任何状态之前同步抛出，不做重试。
code / http_status 供网关层映射为 REST 错误响应。
"""


class LedgerError(Exception):
    """状态机基础异常"""

    code: str = "LEDGER_ERROR"
    http_status: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        """REST 错误响应体"""
        return {"error": {"code": self.code, "message": self.message}}


class ValidationError(LedgerError):
    """参数缺失、类型错误或超长"""

    code = "VALIDATION_ERROR"
    http_status = 422


class NotFoundError(LedgerError):
    """引用的任务不存在"""

    code = "TASK_NOT_FOUND"
    http_status = 404

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class InvalidStateError(LedgerError):
    """任务存在但不处于所需状态"""

    code = "INVALID_STATE"
    http_status = 409

    def __init__(self, task_id: str, status: str) -> None:
        super().__init__(f"Task {task_id} is not open (status: {status})")
        self.task_id = task_id
        self.status = status


class AuthorizationError(LedgerError):
    """签名者缺少所需的关系或角色"""

    code = "FORBIDDEN"
    http_status = 403


class OutOfOrderOperationError(LedgerError):
    """操作的 seq 不晚于已应用的最后一个操作"""

    code = "OUT_OF_ORDER"
    http_status = 409

    def __init__(self, expected_min: int, actual: int) -> None:
        super().__init__(f"operation seq {actual} is out of order (expected >= {expected_min})")
        self.expected_min = expected_min
        self.actual = actual


class DuplicateOperationError(LedgerError):
    """op_id 已经应用过"""

    code = "DUPLICATE_OPERATION"
    http_status = 409

    def __init__(self, op_id: str) -> None:
        super().__init__(f"operation {op_id} already applied")
        self.op_id = op_id
