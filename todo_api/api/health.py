"""
健康检查接口：探活 + 当前 Todo 数量（不触碰快照文件）
"""

from fastapi import APIRouter, Depends

from todo_api.api.deps import get_store
from todo_api.todo.store import TodoStore

router = APIRouter(tags=["健康检查"])


@router.get("/health")
async def health_check(store: TodoStore = Depends(get_store)):
    return {"status": "ok", "todos": store.count}
