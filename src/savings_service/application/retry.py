import asyncio
import random
from collections.abc import Awaitable, Callable
from typing import Protocol, TypeVar

R = TypeVar("R")


class RetryCallback(Protocol):
    def __call__(self, *, attempt: int, delay_seconds: float, exception: BaseException) -> None: ...


def backoff_delay(attempt: int, *, base_delay: float, max_delay: float) -> float:
    """Calculate exponential backoff delay with jitter for the given 1-based attempt."""
    if attempt < 1:
        raise ValueError("attempt must be >= 1")
    if base_delay < 0 or max_delay < 0:
        raise ValueError("base_delay and max_delay must be >= 0")

    delay = min(base_delay * (2 ** (attempt - 1)), max_delay)
    jitter = random.uniform(0, delay * 0.1)
    return delay + jitter


async def retry_async(
    func: Callable[[], Awaitable[R]],
    *,
    max_attempts: int,
    is_retryable: Callable[[BaseException], bool],
    base_delay: float = 0.0,
    max_delay: float = 0.0,
    on_retry: RetryCallback | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> R:
    """Await ``func`` until it succeeds, up to ``max_attempts`` calls in total.

    Only failures accepted by ``is_retryable`` are repeated. A non-retryable
    failure, or the failure of the last attempt, is re-raised unchanged.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    attempt = 1
    while True:
        try:
            return await func()
        except Exception as exc:
            if attempt >= max_attempts or not is_retryable(exc):
                raise

            delay = backoff_delay(attempt, base_delay=base_delay, max_delay=max_delay)
            if on_retry is not None:
                on_retry(attempt=attempt, delay_seconds=delay, exception=exc)
            if delay > 0:
                await sleep(delay)
            attempt += 1
