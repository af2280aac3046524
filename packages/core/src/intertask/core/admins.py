"""管理员目录

成员管理（添加管理员、写入节点等）由外部机制负责，
核心只通过 is_admin 查询管理员能力。
"""

from collections.abc import Iterable

from .config import get_admin_identities


class StaticAdminDirectory:
    """基于固定身份集合的 AdminDirectory 实现"""

    def __init__(self, identities: Iterable[str] = ()) -> None:
        self._identities = frozenset(identities)

    @classmethod
    def from_env(cls) -> "StaticAdminDirectory":
        """从 INTERTASK_ADMINS 环境变量加载"""
        return cls(get_admin_identities())

    async def is_admin(self, identity: str) -> bool:
        return identity in self._identities

    @property
    def identities(self) -> frozenset[str]:
        return self._identities
