# util/retry.py
"""
Bounded retry for store calls.

Transient failures (connection drops, timeouts) are retried with exponential
backoff and jitter; once the budget is spent the caller gets a
StoreUnavailableError chained to the last store exception. Anything else
(malformed payloads, programming errors) propagates on the first attempt.
"""
import logging
from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar
from pydantic import BaseModel, ConfigDict, Field
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)
from config.settings import settings
from util.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    RedisConnectionError,
    RedisTimeoutError,
    OSError,
)


class RetryPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=5, ge=1)
    base_delay: float = Field(default=0.1, ge=0)
    max_delay: float = Field(default=5.0, ge=0)

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        return cls(
            max_attempts=settings.STORE_RETRY_MAX_ATTEMPTS,
            base_delay=settings.STORE_RETRY_BASE_DELAY_SECONDS,
            max_delay=settings.STORE_RETRY_MAX_DELAY_SECONDS,
        )


def is_transient_error(exception: BaseException) -> bool:
    return isinstance(exception, TRANSIENT_ERRORS)


def _log_retry(retry_state: RetryCallState) -> None:
    fn_name = getattr(retry_state.fn, "__name__", "unknown")
    wait_time = retry_state.next_action.sleep if retry_state.next_action else 0
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "store.retry op=%s attempt=%d wait_s=%.2f err=%s",
        fn_name.lstrip("_"),
        retry_state.attempt_number,
        wait_time,
        type(exc).__name__ if exc else None,
    )


def build_retrying(policy: RetryPolicy) -> AsyncRetrying:
    return AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts),
        # base * 2^(n-1), capped at max_delay, plus up to base_delay of jitter
        wait=wait_exponential(multiplier=policy.base_delay, max=policy.max_delay)
        + wait_random(0, policy.base_delay),
        retry=retry_if_exception(is_transient_error),
        before_sleep=_log_retry,
    )


def store_retry(
    func: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    """
    Decorator for async methods of objects exposing a `retry_policy`.

    Usage:
      @store_retry
      async def _pop(self, key): ...
    """
    op = func.__name__.lstrip("_")

    @wraps(func)
    async def wrapper(self: Any, *args: Any, **kwargs: Any) -> T:
        retrying = build_retrying(self.retry_policy)
        try:
            return await retrying(func, self, *args, **kwargs)
        except RetryError as e:
            last = e.last_attempt
            logger.error(
                "store.retry.exhausted op=%s attempts=%d", op, last.attempt_number
            )
            raise StoreUnavailableError(op, last.attempt_number) from last.exception()

    return wrapper
