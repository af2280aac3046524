"""请求日志中间件

每个请求绑定 request_id，以及路径中的 task_id 和 X-Signer 中的签名者，
请求内的所有日志（含状态机的 transaction_applied / transaction_rejected）都带上这些字段。
"""

import re
import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

_TASK_PATH = re.compile(r"^/api/tasks/(task_\d+)$")


def request_context(request: Request) -> dict[str, str]:
    """从请求中提取需要绑定到日志的字段"""
    context = {"method": request.method, "path": request.url.path}

    match = _TASK_PATH.match(request.url.path)
    if match:
        context["task_id"] = match.group(1)

    signer = (request.headers.get("x-signer") or "").strip()
    if signer:
        context["signer"] = signer
    return context


class LoggingMiddleware(BaseHTTPMiddleware):
    """请求级日志：绑定上下文，记录耗时，回写 X-Request-ID"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = str(ULID())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id, **request_context(request))

        log = structlog.get_logger()
        started = time.monotonic()
        response = await call_next(request)

        await log.ainfo(
            "request_completed",
            status_code=response.status_code,
            elapsed_ms=int((time.monotonic() - started) * 1000),
        )
        response.headers["X-Request-ID"] = request_id
        return response
