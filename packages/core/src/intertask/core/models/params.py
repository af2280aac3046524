"""操作参数子类型

每个交易/视图方法对应一个结构化参数模型，在边界处统一校验；
pydantic 的校验失败统一转换为 ValidationError。
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..config import DESC_MAX_LENGTH, TITLE_MAX_LENGTH
from ..exceptions import ValidationError
from .enums import TaskStatus, TransactionMethod, ViewMethod


class _Params(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class AddTaskParams(_Params):
    """add_task 参数"""

    title: str
    desc: str = ""
    assignee: str | None = None

    @field_validator("title")
    @classmethod
    def _check_title(cls, value: str) -> str:
        if len(value) > TITLE_MAX_LENGTH:
            raise ValueError(f"title exceeds {TITLE_MAX_LENGTH} characters")
        stripped = value.strip()
        if not stripped:
            raise ValueError("title is required")
        return stripped

    @field_validator("desc", mode="before")
    @classmethod
    def _default_desc(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("desc")
    @classmethod
    def _check_desc(cls, value: str) -> str:
        if len(value) > DESC_MAX_LENGTH:
            raise ValueError(f"desc exceeds {DESC_MAX_LENGTH} characters")
        return value.strip()

    @field_validator("assignee")
    @classmethod
    def _blank_assignee(cls, value: str | None) -> str | None:
        # 空字符串视为未指派
        return value or None


class _TaskIdParams(_Params):
    id: str = Field(min_length=1)


class CompleteTaskParams(_TaskIdParams):
    """complete_task 参数"""


class CancelTaskParams(_TaskIdParams):
    """cancel_task 参数"""


class GetTaskParams(_TaskIdParams):
    """get_task 参数"""


class ListTasksParams(_Params):
    """list_tasks 参数，两个过滤条件均可选"""

    status: TaskStatus | None = None
    assignee: str | None = None

    @field_validator("status", "assignee", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return None if value == "" else value


class StatsParams(_Params):
    """stats 无参数"""


PARAMS_MODELS: dict[str, type[_Params]] = {
    TransactionMethod.ADD_TASK: AddTaskParams,
    TransactionMethod.COMPLETE_TASK: CompleteTaskParams,
    TransactionMethod.CANCEL_TASK: CancelTaskParams,
    ViewMethod.LIST_TASKS: ListTasksParams,
    ViewMethod.GET_TASK: GetTaskParams,
    ViewMethod.STATS: StatsParams,
}


def _format_errors(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(item) for item in err["loc"]) or "params"
        msg = err["msg"].removeprefix("Value error, ")
        parts.append(f"{loc}: {msg}")
    return "; ".join(parts)


def parse_params(method: str, raw: Any) -> _Params:
    """按方法名校验原始参数

    Args:
        method: 交易或视图方法名
        raw: 原始参数（dict 或 None）

    Returns:
        对应方法的参数模型实例

    Raises:
        ValidationError: 方法未知、参数不是对象或字段校验失败
    """
    model = PARAMS_MODELS.get(method)
    if model is None:
        raise ValidationError(f"unknown method: {method}")
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValidationError("params must be an object")
    try:
        return model.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError(_format_errors(e)) from e
