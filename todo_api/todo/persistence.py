"""
Todo 快照持久化（JSON 文件，全量覆盖写）

容错策略：
- load() 文件不存在：冷启动，保持空 Store 并立即 save() 生成快照文件
- load() 其他读取/解析失败：记录错误日志，Store 保持原状（空），不阻止启动
- save() 失败：记录错误日志并静默返回，不重试、不抛出；内存 Store 仍是本次响应的数据源

文件读写放到线程池（asyncio.to_thread），handler 显式 await 写入完成后再响应。
"""

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import structlog
from pydantic import ValidationError

from todo_api.observability.metrics import PERSISTENCE_TOTAL
from todo_api.todo.errors import PersistenceError
from todo_api.todo.schemas import TodoSnapshot
from todo_api.todo.store import TodoStore

log = structlog.get_logger()


@dataclass
class PersistenceResult:
    """一次 load / save 的结果（失败不抛异常，由调用方决定如何记录）"""

    ok: bool
    action: Literal["loaded", "fresh", "saved", "failed"]
    error: PersistenceError | None = None

    @classmethod
    def fail(cls, error: PersistenceError) -> "PersistenceResult":
        return cls(ok=False, action="failed", error=error)


class SnapshotPersistence:
    """TodoStore <-> 快照文件"""

    def __init__(self, store: TodoStore, path: Path, indent: int = 2):
        self._store = store
        self._path = Path(path)
        self._indent = indent
        self._write_lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    # ── 读取 ──

    async def load(self) -> PersistenceResult:
        """启动时从快照恢复 Store"""
        try:
            snapshot = await asyncio.to_thread(self._read)
        except FileNotFoundError:
            log.info("快照文件不存在，以空数据启动", path=str(self._path))
            result = await self.save()
            return PersistenceResult(ok=result.ok, action="fresh", error=result.error)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            error = PersistenceError(f"读取快照失败: {e}", cause=e)
            log.error("快照加载失败，Store 保持原状", path=str(self._path), error=str(e))
            PERSISTENCE_TOTAL.labels(action="load", status="error").inc()
            return PersistenceResult.fail(error)

        self._store.restore(snapshot)
        PERSISTENCE_TOTAL.labels(action="load", status="success").inc()
        log.info("快照已加载", path=str(self._path), count=self._store.count, next_id=self._store.next_id)
        return PersistenceResult(ok=True, action="loaded")

    def _read(self) -> TodoSnapshot:
        raw = self._path.read_text(encoding="utf-8")
        return TodoSnapshot.model_validate(json.loads(raw))

    # ── 写入 ──

    async def save(self) -> PersistenceResult:
        """全量覆盖写入 { todos, nextId }；失败只记日志"""
        # 同步截取状态，写入期间的后续变更留给下一次 save
        payload = json.dumps(
            self._store.snapshot().to_json(),
            ensure_ascii=False,
            indent=self._indent,
        )
        async with self._write_lock:
            try:
                await asyncio.to_thread(self._write, payload)
            except OSError as e:
                error = PersistenceError(f"写入快照失败: {e}", cause=e)
                log.error("快照保存失败，变更仅保留在内存", path=str(self._path), error=str(e))
                PERSISTENCE_TOTAL.labels(action="save", status="error").inc()
                return PersistenceResult.fail(error)

        PERSISTENCE_TOTAL.labels(action="save", status="success").inc()
        log.info("快照已保存", path=str(self._path), count=self._store.count)
        return PersistenceResult(ok=True, action="saved")

    def _write(self, payload: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(payload, encoding="utf-8")
