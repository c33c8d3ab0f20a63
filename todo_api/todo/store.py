"""
Todo 内存存储层

TodoStore 持有有序 Todo 列表 + nextId 计数器，所有变更都经过它。
实例在应用启动时创建并挂到 app.state，由依赖注入传给各个 handler（无模块级全局）。

不变量：
- id 两两不同，且由 nextId 单调分配，进程生命周期内不复用
- nextId 始终大于任何已分配的 id
- updatedAt >= createdAt
"""

from collections.abc import Callable
from datetime import datetime

import structlog

from todo_api.todo.errors import TodoNotFoundError, TodoValidationError
from todo_api.todo.schemas import Todo, TodoPatch, TodoSnapshot, truncate_to_millis, utc_now

log = structlog.get_logger()


class TodoStore:
    """进程内 Todo 集合"""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock
        self._todos: list[Todo] = []
        self._next_id = 1

    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def count(self) -> int:
        return len(self._todos)

    def _now(self) -> datetime:
        return truncate_to_millis(self._clock())

    def _index_of(self, todo_id: int | None) -> int:
        if todo_id is not None:
            for index, todo in enumerate(self._todos):
                if todo.id == todo_id:
                    return index
        raise TodoNotFoundError(todo_id)

    # ── 读 ──

    def list(self) -> list[Todo]:
        """全量返回，保持插入顺序"""
        return list(self._todos)

    def get(self, todo_id: int | None) -> Todo:
        return self._todos[self._index_of(todo_id)]

    # ── 写 ──

    def create(self, title: str | None, description: str | None = None) -> Todo:
        """新建 Todo：title 为空时拒绝，不追加任何条目"""
        if not title:
            raise TodoValidationError("Title is required")

        now = self._now()
        todo = Todo(
            id=self._next_id,
            title=title,
            description=description or "",
            completed=False,
            created_at=now,
            updated_at=now,
        )
        self._next_id += 1
        self._todos.append(todo)
        log.info("Todo 已创建", todo_id=todo.id, title=title)
        return todo

    def update(self, todo_id: int | None, patch: TodoPatch) -> Todo:
        """
        部分更新：patch 中出现的字段逐个覆盖，未出现的保持原值。
        无论改了哪些字段，updatedAt 都会刷新。
        """
        todo = self.get(todo_id)
        fields = patch.present_fields()

        if "title" in fields:
            todo.title = fields["title"]
        if "description" in fields:
            todo.description = fields["description"]
        if "completed" in fields:
            todo.completed = fields["completed"]
        todo.updated_at = max(self._now(), todo.created_at)

        log.info("Todo 已更新", todo_id=todo.id, title=todo.title, fields=sorted(fields))
        return todo

    def toggle(self, todo_id: int | None) -> Todo:
        """翻转 completed 并刷新 updatedAt"""
        todo = self.get(todo_id)
        todo.completed = not todo.completed
        todo.updated_at = max(self._now(), todo.created_at)

        log.info("Todo 状态已切换", todo_id=todo.id, title=todo.title, completed=todo.completed)
        return todo

    def delete(self, todo_id: int | None) -> Todo:
        """删除并返回被删条目"""
        deleted = self._todos.pop(self._index_of(todo_id))
        log.info("Todo 已删除", todo_id=deleted.id, title=deleted.title)
        return deleted

    def delete_completed(self) -> int:
        """删除全部已完成条目，返回删除数量（可能为 0）"""
        before = len(self._todos)
        self._todos = [t for t in self._todos if not t.completed]
        deleted_count = before - len(self._todos)
        log.info("已清理完成的 Todo", deleted_count=deleted_count)
        return deleted_count

    # ── 快照 ──

    def snapshot(self) -> TodoSnapshot:
        """导出当前完整状态（深拷贝，后续变更不影响已导出的快照）"""
        return TodoSnapshot(
            todos=[t.model_copy(deep=True) for t in self._todos],
            next_id=self._next_id,
        )

    def restore(self, snapshot: TodoSnapshot) -> None:
        """用快照整体替换当前状态"""
        next_id = snapshot.next_id
        max_id = max((t.id for t in snapshot.todos), default=0)
        if next_id <= max_id:
            # 手工改过的快照可能让 nextId 落后，抬高以免复用 id
            log.warning("快照 nextId 不大于已有 id，已自动修正", next_id=next_id, max_id=max_id)
            next_id = max_id + 1

        self._todos = [t.model_copy(deep=True) for t in snapshot.todos]
        self._next_id = next_id
