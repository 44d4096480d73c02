"""
全域錯誤處理

所有錯誤都序列化成 {"error": "<message>"}，status code 依錯誤種類決定：
- ValidationError / 請求格式錯誤 -> 400
- NotFoundError / UnknownOperationError -> 404
- StorageError / 其他未預期錯誤 -> 500
- 路由層的 HTTPException（找不到路徑、方法不允許）沿用原本的 status code
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.exceptions import PlanningPokerException, StorageError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(PlanningPokerException)
    async def planning_poker_error_handler(request: Request, exc: PlanningPokerException):
        if isinstance(exc, StorageError):
            logger.error(f"Storage error on {request.url.path}: {exc}", exc_info=exc)
        else:
            logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc}")
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(f"HTTP {exc.status_code} on {request.method} {request.url.path}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Invalid request on {request.url.path}: {exc.errors()}")
        messages = [
            f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}"
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "; ".join(messages) or "invalid request"},
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal error"},
        )
