"""
Todo 数据模型

JSON 字段名沿用 camelCase（createdAt / updatedAt / nextId），
时间戳统一为 UTC 毫秒精度 ISO-8601（末尾 Z），保证快照 load(save(S)) == S。
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel


def truncate_to_millis(value: datetime) -> datetime:
    """统一转为 UTC 并截断到毫秒"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def utc_now() -> datetime:
    return truncate_to_millis(datetime.now(timezone.utc))


def format_timestamp(value: datetime) -> str:
    """2024-05-01T09:30:00.123Z"""
    value = truncate_to_millis(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Todo(_CamelModel):
    """单个 Todo 条目"""

    id: int
    title: str
    description: str = ""
    completed: bool = False
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at", mode="after")
    @classmethod
    def _normalize_timestamp(cls, v: datetime) -> datetime:
        return truncate_to_millis(v)

    @field_serializer("created_at", "updated_at")
    def _serialize_timestamp(self, v: datetime) -> str:
        return format_timestamp(v)

    def to_json(self) -> dict[str, Any]:
        """序列化为响应 / 快照使用的 dict"""
        return self.model_dump(mode="json", by_alias=True)


# ── 请求模型 ──

class TodoCreate(BaseModel):
    """POST /api/todos 请求体；title 是否为空由 TodoStore 校验"""

    title: str | None = None
    description: str | None = None


class TodoPatch(BaseModel):
    """
    PUT /api/todos/{id} 请求体

    字段"是否出现"由 model_fields_set 记录，显式 null 视为未出现。
    """

    title: str | None = None
    description: str | None = None
    completed: bool | None = None

    def present_fields(self) -> dict[str, Any]:
        """返回请求中实际给出的字段"""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }


# ── 快照 ──

class TodoSnapshot(_CamelModel):
    """快照文件结构：{ todos, nextId }"""

    todos: list[Todo] = Field(default_factory=list)
    next_id: int = 1

    @field_validator("next_id", mode="before")
    @classmethod
    def _default_next_id(cls, v: Any) -> Any:
        # 0 / null 一律按 1 处理
        return v or 1

    @field_validator("todos", mode="before")
    @classmethod
    def _default_todos(cls, v: Any) -> Any:
        return v or []

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
