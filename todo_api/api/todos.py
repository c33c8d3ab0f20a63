"""
/api/todos 资源接口

端点：
- GET    /api/todos                 — 全量列表
- GET    /api/todos/{id}            — 单条
- POST   /api/todos                 — 新建（201）
- PUT    /api/todos/{id}            — 部分更新
- PATCH  /api/todos/{id}/toggle     — 切换完成状态
- DELETE /api/todos/completed/all   — 清理已完成
- DELETE /api/todos/{id}            — 删除单条

变更类接口先改 Store，再 await 快照写入，最后响应；
写入失败只记日志，响应仍以内存 Store 为准。
"""

import structlog
from fastapi import APIRouter, Depends

from todo_api.api.deps import get_persistence, get_store, parse_todo_id
from todo_api.api.responses import ok
from todo_api.observability.metrics import MUTATION_TOTAL
from todo_api.todo.persistence import SnapshotPersistence
from todo_api.todo.schemas import TodoCreate, TodoPatch
from todo_api.todo.store import TodoStore

router = APIRouter(prefix="/api/todos", tags=["Todo"])
log = structlog.get_logger()


# ── 读 ──

@router.get("")
async def list_todos(store: TodoStore = Depends(get_store)):
    """全量列表，不分页"""
    todos = store.list()
    log.info("查询 Todo 列表", count=len(todos))
    return ok([t.to_json() for t in todos])


@router.get("/{todo_id}")
async def get_todo(todo_id: str, store: TodoStore = Depends(get_store)):
    todo = store.get(parse_todo_id(todo_id))
    return ok(todo.to_json())


# ── 写 ──

@router.post("")
async def create_todo(
    body: TodoCreate | None = None,
    store: TodoStore = Depends(get_store),
    persistence: SnapshotPersistence = Depends(get_persistence),
):
    """新建 Todo，title 必填"""
    body = body or TodoCreate()
    todo = store.create(body.title, body.description)
    MUTATION_TOTAL.labels(operation="create").inc()
    await persistence.save()
    return ok(todo.to_json(), status_code=201)


@router.put("/{todo_id}")
async def update_todo(
    todo_id: str,
    patch: TodoPatch | None = None,
    store: TodoStore = Depends(get_store),
    persistence: SnapshotPersistence = Depends(get_persistence),
):
    """部分更新：只覆盖请求中给出的字段"""
    todo = store.update(parse_todo_id(todo_id), patch or TodoPatch())
    MUTATION_TOTAL.labels(operation="update").inc()
    await persistence.save()
    return ok(todo.to_json())


@router.patch("/{todo_id}/toggle")
async def toggle_todo(
    todo_id: str,
    store: TodoStore = Depends(get_store),
    persistence: SnapshotPersistence = Depends(get_persistence),
):
    todo = store.toggle(parse_todo_id(todo_id))
    MUTATION_TOTAL.labels(operation="toggle").inc()
    await persistence.save()
    return ok(todo.to_json())


# 必须先于 /{todo_id} 注册
@router.delete("/completed/all")
async def delete_completed_todos(
    store: TodoStore = Depends(get_store),
    persistence: SnapshotPersistence = Depends(get_persistence),
):
    """清理全部已完成条目"""
    deleted_count = store.delete_completed()
    MUTATION_TOTAL.labels(operation="delete_completed").inc()
    await persistence.save()
    return ok(message=f"Deleted {deleted_count} completed todos")


@router.delete("/{todo_id}")
async def delete_todo(
    todo_id: str,
    store: TodoStore = Depends(get_store),
    persistence: SnapshotPersistence = Depends(get_persistence),
):
    todo = store.delete(parse_todo_id(todo_id))
    MUTATION_TOTAL.labels(operation="delete").inc()
    await persistence.save()
    return ok(todo.to_json())
