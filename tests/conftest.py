"""
共享 fixture：可控时钟、独立快照文件、带生命周期的 TestClient
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from todo_api.config import Settings
from todo_api.main import create_app
from todo_api.todo.persistence import SnapshotPersistence
from todo_api.todo.store import TodoStore

START = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


class TickingClock:
    """每次调用前进固定步长，保证时间戳严格递增"""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(seconds=1)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        return value


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def store(clock: TickingClock) -> TodoStore:
    return TodoStore(clock=clock)


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "todos.json"


@pytest.fixture
def persistence(store: TodoStore, data_file: Path) -> SnapshotPersistence:
    return SnapshotPersistence(store, data_file)


@pytest.fixture
def settings(data_file: Path) -> Settings:
    return Settings(_env_file=None, DATA_FILE=data_file, ENV="test")


@pytest.fixture
def client(settings: Settings, clock: TickingClock):
    with TestClient(create_app(settings, clock=clock)) as test_client:
        yield test_client
