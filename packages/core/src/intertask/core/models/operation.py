"""Operation 信封模型

复制层交付的有序操作。seq 为全局顺序位置，ts 由排序方写入，
处理函数只从这里读取时间，保证任意节点重放结果一致。
"""

from typing import Any

from pydantic import BaseModel, Field


class Operation(BaseModel):
    """已排序、已签名的操作"""

    seq: int = Field(ge=1, description="全局顺序位置，从 1 开始")
    op_id: str = Field(description="唯一标识，ULID 格式")
    method: str = Field(description="交易方法名")
    params: dict[str, Any] = Field(default_factory=dict, description="原始参数")
    signer: str = Field(min_length=1, description="签名者身份")
    ts: int = Field(ge=0, description="排序时写入的 epoch 毫秒")
