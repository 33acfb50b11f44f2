import time
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar

from prometheus_client import Counter, Histogram

P = ParamSpec("P")
R = TypeVar("R")


ACCOUNT_OPERATIONS_TOTAL = Counter(
    "account_operations_total",
    "Total number of savings account operations",
    ["operation", "outcome"],
)

ACCOUNT_OPERATION_DURATION_SECONDS = Histogram(
    "account_operation_duration_seconds",
    "Savings account operation duration",
    ["operation"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

REPOSITORY_RETRIES_TOTAL = Counter(
    "repository_retries_total",
    "Total number of retried account repository calls",
    ["operation"],
)

HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration",
    ["method", "path", "status_code"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "path", "status_code"],
)


def track_operation_duration(operation: str) -> Callable[[Callable[..., Awaitable[Any]]], Any]:
    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()
            try:
                return await func(*args, **kwargs)
            finally:
                duration = time.perf_counter() - start
                ACCOUNT_OPERATION_DURATION_SECONDS.labels(operation=operation).observe(duration)

        return wrapper

    return decorator
