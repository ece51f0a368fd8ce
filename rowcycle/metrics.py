from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

REQUESTS_TOTAL = Counter(
    "rowcycle_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
QUERY_FAILURES_TOTAL = Counter("rowcycle_query_failures_total", "Record queries that failed in storage")
BOOTSTRAP_FAILURES_TOTAL = Counter("rowcycle_bootstrap_failures_total", "Schema bootstrap attempts that failed")


__all__ = [
    "CONTENT_TYPE_LATEST",
    "REQUESTS_TOTAL",
    "QUERY_FAILURES_TOTAL",
    "BOOTSTRAP_FAILURES_TOTAL",
    "generate_latest",
]
