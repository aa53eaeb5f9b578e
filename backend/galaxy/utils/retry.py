"""Generic *async* retry decorator with exponential back-off.

This helper isolates retry logic in one place so call-sites stay concise
while the policy (max attempts, back-off, metrics, logging) lives centrally.

Usage
-----

```python
from galaxy.utils.retry import async_retry


@async_retry(max_attempts=3, retriable=is_transport_error)
async def post_once(url: str, body: dict) -> httpx.Response:
    ...
```

The back-off before retry *n* (0-indexed attempt that just failed) is
``base_delay * 2**n`` seconds: 1s, 2s, 4s, ... with the default base.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Awaitable
from typing import Callable
from typing import ParamSpec
from typing import TypeVar

import httpx

from galaxy.metrics import call_retry_total

logger = logging.getLogger(__name__)

_T = TypeVar("_T")
_P = ParamSpec("_P")

SleepFn = Callable[[float], Awaitable[None]]


def _default_retriable(exc: Exception) -> bool:  # noqa: D401 – small helper
    """Retry **everything** by default (caller can override)."""

    return True


def backoff_delay(attempt: int, base_delay: float = 1.0) -> float:
    """Return the sleep before the retry that follows 0-indexed *attempt*."""
    return base_delay * (2**attempt)


def async_retry(
    *,
    max_attempts: int = 1,
    base_delay: float = 1.0,
    retriable: Callable[[Exception], bool] | None = None,
    sleep: SleepFn | None = None,
    label: str | None = None,
) -> Callable[[Callable[_P, Awaitable[_T]]], Callable[_P, Awaitable[_T]]]:
    """Decorate an *async* function so it is executed with retry semantics.

    Parameters
    ----------
    max_attempts:
        Inclusive – the *first* try counts. ``max_attempts=1`` disables retry.
    base_delay:
        Initial sleep in seconds (doubles on every retry, uncapped).
    retriable:
        Callback deciding if *exc* is worth another attempt. Defaults to
        retrying **all** exceptions.  Non-retriable errors propagate at once.
    sleep:
        Coroutine used to wait between attempts (``asyncio.sleep`` unless
        injected).
    label:
        Name used in log lines; defaults to the wrapped function's name.
    """

    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    retriable = retriable or _default_retriable

    def decorator(fn: Callable[_P, Awaitable[_T]]) -> Callable[_P, Awaitable[_T]]:
        name = label or fn.__name__

        @functools.wraps(fn)
        async def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _T:
            do_sleep = sleep or asyncio.sleep
            attempt = 0

            while True:
                try:
                    return await fn(*args, **kwargs)
                except Exception as exc:
                    if attempt >= max_attempts - 1 or not retriable(exc):
                        if attempt > 0:
                            logger.warning("%s: retries exhausted after %d attempts: %s", name, attempt + 1, exc)
                        raise

                    sleep_for = backoff_delay(attempt, base_delay)
                    logger.warning(
                        "%s: attempt %d/%d failed (%s), retrying in %.2fs",
                        name,
                        attempt + 1,
                        max_attempts,
                        exc,
                        sleep_for,
                    )
                    call_retry_total.inc()

                    await do_sleep(sleep_for)
                    attempt += 1

        return wrapper

    return decorator


def is_transport_error(exc: Exception) -> bool:  # noqa: D401 – helper
    """Return *True* for failures where the remote never answered.

    Connection errors and timeouts (httpx's own or an ``asyncio`` deadline)
    qualify.  An HTTP response of any status never reaches this predicate
    because the caller turns it into a result instead of raising.
    """

    return isinstance(exc, (httpx.TransportError, asyncio.TimeoutError))


__all__ = [
    "async_retry",
    "backoff_delay",
    "is_transport_error",
]
