"""
Retry engine for portal operations.

Wraps a coroutine in ``backoff.on_exception`` so that every failure is
classified first, and only retriable failures (or those accepted by a custom
predicate) are retried, with capped exponential backoff plus jitter.
"""

import logging
import random
from typing import Awaitable, Callable, Generator, Optional, TypeVar

import backoff

from .error_classifier import classify_error
from .exceptions import ClassifiedError
from .models import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_JITTER_MS = 250


def compute_delay_ms(policy: RetryPolicy, attempt: int) -> int:
    """Delay before the retry following the given 0-based attempt"""
    capped = min(policy.base_delay_ms * 2 ** attempt, policy.max_delay_ms)
    jitter = random.randrange(min(MAX_JITTER_MS, policy.base_delay_ms))
    return capped + jitter


def policy_wait(policy: RetryPolicy) -> Generator[Optional[float], None, None]:
    """backoff wait generator yielding seconds derived from a RetryPolicy"""
    # backoff primes the generator with an initial send(None)
    yield None
    attempt = 0
    while True:
        yield compute_delay_ms(policy, attempt) / 1000
        attempt += 1


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    context: str,
    should_retry: Optional[Callable[[ClassifiedError], bool]] = None,
) -> T:
    """
    Run an async operation, retrying classified failures.

    Args:
        operation: Zero-argument coroutine function to invoke
        policy: Retry bounds and delays
        context: Short description used in log messages
        should_retry: Optional predicate overriding ``ClassifiedError.retriable``

    Returns:
        The operation's result

    Raises:
        ClassifiedError: when the failure is terminal or retries are exhausted
    """
    total_attempts = policy.max_retries + 1

    def _give_up(error: ClassifiedError) -> bool:
        if should_retry is not None:
            return not should_retry(error)
        return not error.retriable

    def _log_backoff(details) -> None:
        logger.warning(
            "%s failed (attempt %d/%d). Retrying in %dms.",
            context,
            details["tries"],
            total_attempts,
            round(details["wait"] * 1000),
        )

    @backoff.on_exception(
        policy_wait,
        ClassifiedError,
        max_tries=total_attempts,
        giveup=_give_up,
        on_backoff=_log_backoff,
        jitter=None,
        logger=None,
        policy=policy,
    )
    async def _attempt() -> T:
        try:
            return await operation()
        except ClassifiedError:
            raise
        except Exception as e:
            raise classify_error(e) from e

    return await _attempt()
