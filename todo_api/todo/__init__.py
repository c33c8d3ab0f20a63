"""
Todo 模块：单资源 CRUD 的领域层

提供内存 TodoStore、快照持久化 SnapshotPersistence 以及 Todo schema，
供 api.todos 路由和应用启动流程使用。
"""

from todo_api.todo.errors import PersistenceError, TodoError, TodoNotFoundError, TodoValidationError
from todo_api.todo.persistence import PersistenceResult, SnapshotPersistence
from todo_api.todo.schemas import Todo, TodoCreate, TodoPatch, TodoSnapshot
from todo_api.todo.store import TodoStore

__all__ = [
    "PersistenceError",
    "PersistenceResult",
    "SnapshotPersistence",
    "Todo",
    "TodoCreate",
    "TodoError",
    "TodoNotFoundError",
    "TodoPatch",
    "TodoSnapshot",
    "TodoStore",
    "TodoValidationError",
]
