"""全局异常处理

- LedgerError -> {"error": {code, message}}，状态码取 http_status
- RequestValidationError -> 422 VALIDATION_ERROR，附字段明细
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from intertask.core.exceptions import LedgerError

log = structlog.get_logger()


def register_error_handlers(app: FastAPI) -> None:
    """在 app 上注册全部异常处理器"""

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        log.info(
            "request_rejected",
            code=exc.code,
            reason=exc.message,
            path=request.url.path,
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={
                "error": {
                    "code": "VALIDATION_ERROR",
                    "message": "Invalid request data",
                    "details": [
                        {
                            "field": ".".join(str(loc) for loc in e["loc"]),
                            "message": e["msg"],
                        }
                        for e in exc.errors()
                    ],
                }
            },
        )
