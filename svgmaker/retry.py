"""Retry wrapper for pipeline operations.

Exponential backoff with jitter, bounded by a floor and a ceiling.
Each failure is classified into a ``Retry`` or ``Abort`` decision;
aborted and exhausted operations re-raise the original error unchanged.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from svgmaker.errors import ErrorKind, SVGMakerError

__all__ = [
    "Abort",
    "Retry",
    "RetryDecision",
    "backoff_delay",
    "classify",
    "retrying",
    "with_retries",
]

if TYPE_CHECKING:
    from svgmaker.config import ClientConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRY_MIN_DELAY_MS = 1000
RETRY_MAX_DELAY_MS = 60000

_NEVER_RETRIED = (ErrorKind.VALIDATION, ErrorKind.AUTH)


@dataclass(frozen=True)
class Retry:
    """The failed attempt may be repeated."""

    error: BaseException


@dataclass(frozen=True)
class Abort:
    """The failure is final; stop immediately."""

    error: BaseException


RetryDecision = Retry | Abort


def classify(error: BaseException, retry_status_codes: frozenset[int]) -> RetryDecision:
    """Decide whether a failed attempt should be retried.

    Validation and auth failures are never retried. Otherwise an error is
    retried when its status code is configured as retryable or when it is
    a timeout or network failure. Anything else aborts.
    """
    if not isinstance(error, SVGMakerError):
        return Abort(error)
    if error.kind in _NEVER_RETRIED:
        return Abort(error)
    if error.status_code is not None and error.status_code in retry_status_codes:
        return Retry(error)
    if error.is_transient:
        return Retry(error)
    return Abort(error)


def backoff_delay(attempt: int, retry_backoff_factor: float) -> float:
    """Delay in seconds before retry number ``attempt + 1``.

    Grows as ``1000ms * 2**attempt * (retry_backoff_factor / 1000)``, never
    below 1s, plus up to 10% jitter, capped at 60s.
    """
    base_delay = max(
        RETRY_MIN_DELAY_MS,
        RETRY_MIN_DELAY_MS * (2**attempt) * retry_backoff_factor / 1000,
    )
    jitter = random.uniform(0, base_delay * 0.1)
    return min(base_delay + jitter, RETRY_MAX_DELAY_MS) / 1000


async def with_retries(
    func: Callable[[], Awaitable[T]],
    config: "ClientConfig",
) -> T:
    """Execute ``func`` with exponential backoff retry.

    Args:
        func: Async function to execute (no arguments).
        config: Configuration snapshot with retry settings.

    Returns:
        Result from successful function execution.

    Raises:
        SVGMakerError: The error of an aborted attempt, or the error of the
            last attempt once ``max_retries`` is exhausted.

    Note:
        A RATE_LIMIT error carrying ``retry_after`` waits that long instead
        of the computed backoff, still capped at the 60s ceiling.
    """
    last_error: BaseException | None = None

    for attempt in range(config.max_retries + 1):
        try:
            return await func()
        except Exception as e:
            decision = classify(e, config.retry_status_codes)
            if isinstance(decision, Abort):
                if isinstance(e, SVGMakerError):
                    logger.debug(
                        "Retries aborted on attempt %d: %s (%s)",
                        attempt + 1,
                        e,
                        e.kind.value,
                    )
                raise

            last_error = e
            if attempt == config.max_retries:
                break

            if (
                isinstance(e, SVGMakerError)
                and e.kind is ErrorKind.RATE_LIMIT
                and e.retry_after
            ):
                delay = min(e.retry_after, RETRY_MAX_DELAY_MS / 1000)
            else:
                delay = backoff_delay(attempt, config.retry_backoff_factor)

            logger.warning(
                "Request failed (attempt %d/%d): %s. Retrying in %.2fs",
                attempt + 1,
                config.max_retries + 1,
                e,
                delay,
            )

            await asyncio.sleep(delay)

    if last_error is not None:
        logger.error(
            "Giving up after %d attempts: %s", config.max_retries + 1, last_error
        )
        raise last_error
    raise RuntimeError("Retry loop exited without error or result")


def retrying(
    config: "ClientConfig",
) -> Callable[[Callable[[], Awaitable[T]]], Callable[[], Awaitable[T]]]:
    """Wrap an operation so that calling it retries internally."""

    def wrap(func: Callable[[], Awaitable[T]]) -> Callable[[], Awaitable[T]]:
        async def wrapped() -> T:
            return await with_retries(func, config)

        return wrapped

    return wrap
