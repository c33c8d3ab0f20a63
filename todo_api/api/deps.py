"""
FastAPI 依赖注入：从 app.state 取出启动时创建的单例
"""

import re

from fastapi import Request

from todo_api.todo.persistence import SnapshotPersistence
from todo_api.todo.store import TodoStore

# parseInt 语义：跳过前导空白，可选符号，取开头连续 ASCII 数字
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def parse_todo_id(raw: str) -> int | None:
    """
    解析路径中的 id。"12abc" -> 12；没有前导数字时返回 None，
    None 不匹配任何 Todo，最终得到 404 而不是 400。
    """
    match = _LEADING_INT.match(raw)
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # 超过 int 字符串转换位数上限，不可能是已分配的 id
        return None


def get_store(request: Request) -> TodoStore:
    return request.app.state.todo_store


def get_persistence(request: Request) -> SnapshotPersistence:
    return request.app.state.persistence
