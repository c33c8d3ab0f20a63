"""
FastAPI 应用主入口
"""

import sys
from collections.abc import Callable
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

# 将项目根目录添加到 python path，以便直接运行 main.py 时能找到 todo_api 模块
sys.path.append(str(Path(__file__).resolve().parent.parent))

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from todo_api.api.responses import register_exception_handlers
from todo_api.config import Settings, get_settings
from todo_api.observability.logging_config import setup_logging
from todo_api.observability.metrics_middleware import MetricsMiddleware
from todo_api.observability.request_logger import RequestLoggerMiddleware
from todo_api.todo.persistence import SnapshotPersistence
from todo_api.todo.schemas import utc_now
from todo_api.todo.store import TodoStore

log = structlog.get_logger()


def create_app(
    settings: Settings | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> FastAPI:
    """
    组装应用：Store / 快照持久化的生命周期都挂在 app.state 上。
    clock 供测试注入可控时钟。
    """
    settings = settings or get_settings()
    setup_logging(env=settings.ENV)

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        """应用生命周期：启动时加载快照，关闭时释放 Store"""
        log.info("应用启动", env=settings.ENV, app=settings.APP_NAME)

        store = TodoStore(clock=clock)
        persistence = SnapshotPersistence(store, settings.DATA_FILE, indent=settings.SNAPSHOT_INDENT)

        # 加载失败不阻止启动，降级为空 Store（可能掩盖数据丢失，日志需关注）
        result = await persistence.load()
        if not result.ok:
            log.warning("快照不可用，以空数据继续运行", path=str(persistence.path), error=str(result.error))

        application.state.todo_store = store
        application.state.persistence = persistence
        log.info(
            "Todo API 已就绪",
            url=f"http://{settings.APP_HOST}:{settings.APP_PORT}",
            loaded=store.count,
            snapshot=result.action,
        )

        yield

        del application.state.todo_store
        del application.state.persistence
        log.info("应用关闭")

    application = FastAPI(
        title=settings.APP_NAME,
        version="0.1.0",
        lifespan=lifespan,
    )

    # ── 中间件（执行顺序：从下往上注册，从上往下执行） ──
    application.add_middleware(RequestLoggerMiddleware)
    application.add_middleware(MetricsMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(application)

    # ── Prometheus 指标端点 ──
    application.mount("/metrics", make_asgi_app())

    # ── 路由注册 ──
    from todo_api.api.health import router as health_router
    from todo_api.api.todos import router as todos_router

    application.include_router(health_router)
    application.include_router(todos_router)

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("todo_api.main:app", host=settings.APP_HOST, port=settings.APP_PORT)
