"""
Todo 业务异常

- TodoValidationError / TodoNotFoundError：在 HTTP 边界统一转换为 400 / 404 信封
- PersistenceError：快照读写失败，只记日志，永远不透传给客户端
"""


class TodoError(Exception):
    """Todo 业务异常基类"""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TodoValidationError(TodoError):
    """必填字段缺失"""

    status_code = 400


class TodoNotFoundError(TodoError):
    """指定 id 的 Todo 不存在"""

    status_code = 404

    def __init__(self, todo_id: int | None):
        super().__init__("Todo not found")
        self.todo_id = todo_id


class PersistenceError(Exception):
    """快照文件读写失败"""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause
