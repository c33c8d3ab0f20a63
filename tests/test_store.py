"""
TodoStore 单元测试：id 分配、校验、部分更新、切换、删除
"""

from datetime import datetime, timedelta, timezone

import pytest

from todo_api.todo.errors import TodoNotFoundError, TodoValidationError
from todo_api.todo.schemas import Todo, TodoPatch, TodoSnapshot
from todo_api.todo.store import TodoStore


def _seed(store, n: int) -> list[Todo]:
    return [store.create(f"task {i}") for i in range(n)]


# =============================================================================
# create
# =============================================================================


class TestCreate:
    def test_ids_strictly_increasing_without_gaps(self, store):
        todos = _seed(store, 5)
        assert [t.id for t in todos] == [1, 2, 3, 4, 5]
        assert store.next_id == 6

    def test_defaults(self, store, clock):
        todo = store.create("Buy milk")
        assert todo.description == ""
        assert todo.completed is False
        assert todo.created_at == todo.updated_at

    def test_description_none_becomes_empty(self, store):
        assert store.create("a", None).description == ""

    @pytest.mark.parametrize("title", ["", None])
    def test_missing_title_rejected_without_append(self, store, title):
        store.create("existing")
        with pytest.raises(TodoValidationError) as exc_info:
            store.create(title)
        assert exc_info.value.message == "Title is required"
        assert store.count == 1
        assert store.next_id == 2

    def test_duplicate_titles_allowed(self, store):
        a = store.create("same")
        b = store.create("same")
        assert a.id != b.id
        assert store.count == 2

    def test_ids_not_reused_after_delete(self, store):
        first = store.create("first")
        store.delete(first.id)
        assert store.create("second").id == 2


# =============================================================================
# get / list
# =============================================================================


class TestRead:
    def test_list_keeps_insertion_order(self, store):
        _seed(store, 3)
        assert [t.title for t in store.list()] == ["task 0", "task 1", "task 2"]

    def test_list_returns_copy_of_sequence(self, store):
        _seed(store, 2)
        store.list().clear()
        assert store.count == 2

    def test_get_missing(self, store):
        with pytest.raises(TodoNotFoundError) as exc_info:
            store.get(999)
        assert exc_info.value.message == "Todo not found"

    def test_get_sentinel_never_matches(self, store):
        _seed(store, 1)
        with pytest.raises(TodoNotFoundError):
            store.get(None)


# =============================================================================
# update / toggle
# =============================================================================


class TestUpdate:
    def test_partial_patch_only_touches_given_fields(self, store):
        todo = store.create("Buy milk", "2 liters")
        before = todo.updated_at

        updated = store.update(todo.id, TodoPatch.model_validate({"completed": True}))

        assert updated.title == "Buy milk"
        assert updated.description == "2 liters"
        assert updated.completed is True
        assert updated.updated_at > before
        assert updated.created_at == todo.created_at

    def test_empty_patch_still_refreshes_updated_at(self, store):
        todo = store.create("x")
        before = todo.updated_at
        updated = store.update(todo.id, TodoPatch())
        assert updated.updated_at > before
        assert updated.title == "x"

    def test_explicit_null_is_treated_as_absent(self, store):
        todo = store.create("keep me")
        patch = TodoPatch.model_validate({"title": None, "description": "new"})
        updated = store.update(todo.id, patch)
        assert updated.title == "keep me"
        assert updated.description == "new"

    def test_update_missing_leaves_store_untouched(self, store):
        _seed(store, 2)
        snapshot = store.snapshot()
        with pytest.raises(TodoNotFoundError):
            store.update(42, TodoPatch(title="nope"))
        assert store.snapshot() == snapshot

    def test_toggle_twice_restores_completed(self, store):
        todo = store.create("flip")
        first = store.toggle(todo.id).updated_at
        assert todo.completed is True
        second = store.toggle(todo.id).updated_at
        assert todo.completed is False
        assert todo.created_at < first < second

    def test_updated_at_never_precedes_created_at(self):
        # 时钟回拨：第二次取时间比创建时间早
        start = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
        readings = iter([start, start - timedelta(minutes=5), start - timedelta(minutes=10)])
        store = TodoStore(clock=lambda: next(readings))
        todo = store.create("skewed")

        assert store.toggle(todo.id).updated_at == todo.created_at
        assert store.update(todo.id, TodoPatch(title="still skewed")).updated_at == todo.created_at

    def test_toggle_missing(self, store):
        with pytest.raises(TodoNotFoundError):
            store.toggle(1)


# =============================================================================
# delete
# =============================================================================


class TestDelete:
    def test_delete_removes_exactly_one(self, store):
        todos = _seed(store, 3)
        deleted = store.delete(todos[1].id)
        assert deleted.id == 2
        assert [t.id for t in store.list()] == [1, 3]

    def test_delete_twice_is_not_found(self, store):
        todo = store.create("once")
        store.delete(todo.id)
        with pytest.raises(TodoNotFoundError):
            store.delete(todo.id)

    def test_delete_completed_none_completed(self, store):
        _seed(store, 3)
        before = store.list()
        assert store.delete_completed() == 0
        assert store.list() == before

    def test_delete_completed_keeps_order(self, store):
        todos = _seed(store, 5)
        store.toggle(todos[0].id)
        store.toggle(todos[3].id)
        assert store.delete_completed() == 2
        assert [t.id for t in store.list()] == [2, 3, 5]


# =============================================================================
# snapshot / restore
# =============================================================================


class TestSnapshot:
    def test_snapshot_is_detached_from_store(self, store):
        todo = store.create("a")
        snapshot = store.snapshot()
        store.toggle(todo.id)
        assert snapshot.todos[0].completed is False

    def test_restore_replaces_state(self, store, clock):
        source = type(store)(clock=clock)
        _seed(source, 2)
        source.delete(1)

        store.create("will be replaced")
        store.restore(source.snapshot())

        assert store.list() == source.list()
        assert store.next_id == 3

    def test_restore_raises_lagging_next_id(self, store, clock):
        now = clock()
        snapshot = TodoSnapshot(
            todos=[Todo(id=7, title="x", created_at=now, updated_at=now)],
            next_id=3,
        )
        store.restore(snapshot)
        assert store.next_id == 8
        assert store.create("y").id == 8
