"""
链路追踪上下文：trace_id 生成

trace_id 通过 structlog.contextvars 在协程间传播，不单独维护 ContextVar。
"""

import uuid


def new_trace_id() -> str:
    """生成新的 trace_id"""
    return uuid.uuid4().hex
