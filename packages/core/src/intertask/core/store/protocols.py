"""Store Protocol 接口定义

定义 StateStore、OperationLog、AdminDirectory 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
同一套状态机逻辑既可运行在内存实现上（测试），也可运行在 SQLite 实现上（生产）。
"""

from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol

from ..models.operation import Operation


class StateStore(Protocol):
    """确定性键值 + 命名集合存储

    所有原语都是确定性的：不读时钟、不取随机数、不访问网络。
    原语本身不加锁，互斥由 atomic() / snapshot() 在存储边界提供。
    """

    async def get(self, key: str) -> Any | None:
        """读取键值，不存在返回 None"""
        ...

    async def set(self, key: str, value: Any) -> None:
        """写入键值（upsert）"""
        ...

    async def increment(self, counter_key: str) -> int:
        """原子自增并返回新值，首次调用返回 1"""
        ...

    async def sadd(self, set_key: str, member: str) -> None:
        """向集合添加成员（已存在则无效果）"""
        ...

    async def srem(self, set_key: str, member: str) -> None:
        """从集合移除成员"""
        ...

    async def smembers(self, set_key: str) -> list[str]:
        """列出集合成员（顺序无语义）"""
        ...

    async def scard(self, set_key: str) -> int:
        """集合基数"""
        ...

    def atomic(self) -> AbstractAsyncContextManager[None]:
        """独占写事务：正常退出提交全部写入，异常退出丢弃全部写入"""
        ...

    def snapshot(self) -> AbstractAsyncContextManager[None]:
        """独占读：视图执行期间不会与进行中的交易交错"""
        ...


class OperationLog(Protocol):
    """已应用操作的有序日志

    只追加成功应用的操作，且与其状态写入处于同一事务。
    """

    async def append_operation(self, op: Operation) -> None:
        """追加操作（调用方管理事务）"""
        ...

    async def get_operations_after(self, seq: int, limit: int | None = None) -> list[Operation]:
        """查询 seq 之后的操作，按 seq 正序"""
        ...

    async def get_all_operations(self) -> list[Operation]:
        """查询全部操作（用于状态重建）"""
        ...

    async def get_next_seq(self) -> int:
        """下一个可用的 seq（MAX+1）"""
        ...

    async def has_operation(self, op_id: str) -> bool:
        """op_id 是否已记录"""
        ...


class AdminDirectory(Protocol):
    """管理员成员关系查询（由外部成员管理机制维护）"""

    async def is_admin(self, identity: str) -> bool:
        """该身份是否持有管理员能力"""
        ...
