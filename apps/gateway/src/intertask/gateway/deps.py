"""依赖注入模块 -- 通过 FastAPI Depends 注入节点组件

组件实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from fastapi import Header, Request
from intertask.core.exceptions import LedgerError
from intertask.core.store import StoreGroup

from .services.ledger_service import LedgerService
from .services.notification_hub import NotificationHub


class SignerRequiredError(LedgerError):
    """请求未携带签名者身份"""

    code = "SIGNER_REQUIRED"
    http_status = 401


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_notification_hub(request: Request) -> NotificationHub:
    """从 app.state 获取 NotificationHub 实例"""
    return request.app.state.notification_hub


def get_ledger_service(request: Request) -> LedgerService:
    """从 app.state 获取 LedgerService 实例"""
    return request.app.state.ledger_service


def get_signer(x_signer: str | None = Header(default=None)) -> str:
    """从 X-Signer 头读取签名者（签名校验由上游签名层完成）"""
    if not x_signer or not x_signer.strip():
        raise SignerRequiredError("X-Signer header is required")
    return x_signer.strip()
