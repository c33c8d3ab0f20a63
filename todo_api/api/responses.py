"""
统一响应信封 { success, data?, message? } + 异常到 HTTP 状态码的映射

业务异常在 HTTP 边界统一转换，不会落到通用 500 处理。
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from todo_api.todo.errors import TodoError

log = structlog.get_logger()


def ok(data: Any = None, *, message: str | None = None, status_code: int = 200) -> JSONResponse:
    """成功信封"""
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    return JSONResponse(body, status_code=status_code)


def fail(message: str, status_code: int) -> JSONResponse:
    """失败信封"""
    return JSONResponse({"success": False, "message": message}, status_code=status_code)


async def _todo_error_handler(request: Request, exc: TodoError) -> JSONResponse:
    log.info(
        "请求被拒绝",
        method=request.method,
        path=request.url.path,
        status_code=exc.status_code,
        reason=exc.message,
    )
    return fail(exc.message, exc.status_code)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # 请求体不是合法 JSON 或字段类型不对，一律 400，不产生任何变更
    log.info(
        "请求体校验失败",
        method=request.method,
        path=request.url.path,
        errors=[e.get("msg") for e in exc.errors()],
    )
    return fail("Invalid request body", 400)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TodoError, _todo_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
