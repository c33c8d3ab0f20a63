"""
Prometheus 指标定义

所有指标统一在此文件定义，中间件和业务代码按需引用。
"""

from prometheus_client import Counter, Histogram

# ── 请求级指标 ──

REQUEST_TOTAL = Counter(
    "todo_request_total",
    "HTTP 请求总数",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "todo_request_duration_ms",
    "HTTP 请求耗时（毫秒）",
    ["method", "endpoint"],
    buckets=[5, 10, 25, 50, 100, 250, 500, 1000],
)

# ── 业务指标 ──

MUTATION_TOTAL = Counter(
    "todo_mutation_total",
    "Todo 变更总数",
    ["operation"],  # create/update/toggle/delete/delete_completed
)

PERSISTENCE_TOTAL = Counter(
    "todo_persistence_total",
    "快照读写次数",
    ["action", "status"],  # action: load/save, status: success/error
)
