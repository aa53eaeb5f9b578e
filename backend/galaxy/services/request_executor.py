"""Single logical call to one feature endpoint.

:class:`RequestExecutor` wraps the payload in a call envelope, POSTs it as
JSON, bounds every attempt by its own deadline, retries transport failures
with exponential back-off and folds every outcome into a
:class:`~galaxy.schemas.calls.CallResult`.  Nothing raised while building or
sending a call escapes :meth:`RequestExecutor.execute`.

Retry loop::

    ATTEMPTING(n) --transport failure, n < max_attempts-1--> BACKOFF(n) --2**n s--> ATTEMPTING(n+1)
    ATTEMPTING(n) --response / non-retriable error / last attempt--> DONE

A non-2xx response ends the loop immediately: the remote answered, so trying
again would only repeat the rejection.
"""

from __future__ import annotations

import asyncio
import collections.abc
import logging
import time
from typing import Any
from typing import Dict
from typing import Mapping
from typing import Optional
from typing import Tuple

import httpx

from galaxy.constants import BACKOFF_BASE_SECONDS
from galaxy.constants import CALLER_KEY
from galaxy.constants import METADATA_KEY
from galaxy.metrics import OUTCOME_ERROR
from galaxy.metrics import OUTCOME_REJECTED
from galaxy.metrics import OUTCOME_SUCCESS
from galaxy.metrics import OUTCOME_TIMEOUT
from galaxy.metrics import OUTCOME_TRANSPORT
from galaxy.metrics import call_latency_seconds
from galaxy.metrics import call_total
from galaxy.registry import Role
from galaxy.schemas.calls import CallOptions
from galaxy.schemas.calls import CallResult
from galaxy.utils.retry import SleepFn
from galaxy.utils.retry import async_retry
from galaxy.utils.retry import is_transport_error
from galaxy.utils.time import utc_now_iso

logger = logging.getLogger(__name__)

_TIMEOUT_ERRORS = (asyncio.TimeoutError, httpx.TimeoutException)


def build_envelope(
    payload: Optional[Mapping[str, Any]],
    caller_type: Role,
    caller: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Return the request body: *payload* plus ``_metadata`` or ``_caller``.

    Sibling calls identify themselves through ``_caller``; every other call
    carries ``_metadata`` with the caller's role and a UTC timestamp.  The
    caller's payload is copied, never mutated.

    Raises ``TypeError`` when *payload* is not a JSON object.
    """
    if payload is not None and not isinstance(payload, collections.abc.Mapping):
        raise TypeError(f"Payload must be a JSON object, not {type(payload).__name__}")

    envelope: Dict[str, Any] = dict(payload or {})
    if caller is not None:
        envelope[CALLER_KEY] = dict(caller)
    else:
        envelope[METADATA_KEY] = {"callerType": caller_type.value, "timestamp": utc_now_iso()}
    return envelope


def _error_fields(response: httpx.Response) -> Tuple[Optional[str], Optional[str]]:
    """Pull ``error``/``message`` out of a structured error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return None, None
    if not isinstance(body, dict):
        return None, None

    error = body.get("error")
    message = body.get("message")
    return (
        str(error) if error else None,
        str(message) if message is not None else None,
    )


class RequestExecutor:
    """Execute POST calls to feature endpoints on behalf of one instance.

    Args:
        caller_type: Role written into ``_metadata.callerType``.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
        sleep: Coroutine used for back-off waits.
        service_token: Bearer token attached when ``include_auth`` is set.
        default_options: Options used when a call passes none.
    """

    def __init__(
        self,
        caller_type: Role,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[SleepFn] = None,
        service_token: Optional[str] = None,
        default_options: Optional[CallOptions] = None,
    ):
        self.caller_type = caller_type
        self.default_options = default_options or CallOptions()
        self._transport = transport
        self._sleep = sleep or asyncio.sleep
        self._service_token = service_token

    def _headers(self, options: CallOptions) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", **options.headers}
        if options.include_auth:
            if self._service_token:
                headers.setdefault("Authorization", f"Bearer {self._service_token}")
            else:
                logger.debug("include_auth requested but no service token is configured")
        return headers

    async def execute(
        self,
        endpoint: str,
        payload: Optional[Mapping[str, Any]],
        options: Optional[CallOptions] = None,
        *,
        caller: Optional[Mapping[str, Any]] = None,
    ) -> CallResult:
        """POST *payload* to *endpoint* and return the normalised result."""
        options = options or self.default_options
        attempt = async_retry(
            max_attempts=options.max_attempts,
            base_delay=BACKOFF_BASE_SECONDS,
            retriable=is_transport_error,
            sleep=self._sleep,
            label=f"POST {endpoint}",
        )(self._attempt)

        started = time.perf_counter()
        try:
            envelope = build_envelope(payload, self.caller_type, caller)
            headers = self._headers(options)
            result, outcome = await attempt(endpoint, envelope, headers, options.timeout_seconds)
        except _TIMEOUT_ERRORS:
            logger.warning("Call to %s timed out after %dms", endpoint, options.timeout_ms)
            result = CallResult.fail("Request timeout", f"The request took longer than {options.timeout_ms}ms")
            outcome = OUTCOME_TIMEOUT
        except httpx.TransportError as exc:
            logger.warning("Call to %s failed: %s", endpoint, exc)
            result = CallResult.fail(str(exc) or type(exc).__name__, "Failed to connect to feature API")
            outcome = OUTCOME_TRANSPORT
        except Exception as exc:
            logger.exception("Unexpected error calling %s", endpoint)
            result = CallResult.fail(str(exc) or "Unknown error occurred", "Please try again later")
            outcome = OUTCOME_ERROR
        finally:
            call_latency_seconds.observe(time.perf_counter() - started)

        call_total.labels(outcome).inc()
        return result

    async def _attempt(
        self,
        endpoint: str,
        envelope: Dict[str, Any],
        headers: Dict[str, str],
        timeout: float,
    ) -> Tuple[CallResult, str]:
        logger.debug("POST %s", endpoint)
        async with httpx.AsyncClient(transport=self._transport, timeout=timeout, follow_redirects=True) as client:
            # The asyncio deadline bounds the whole attempt; httpx's timeout
            # only bounds individual connect/read/write phases.
            response = await asyncio.wait_for(client.post(endpoint, json=envelope, headers=headers), timeout)
        return self._to_result(endpoint, response)

    @staticmethod
    def _to_result(endpoint: str, response: httpx.Response) -> Tuple[CallResult, str]:
        if not response.is_success:
            error, message = _error_fields(response)
            logger.info("Feature API %s rejected the call with status %d", endpoint, response.status_code)
            result = CallResult.fail(error or f"API request failed with status {response.status_code}", message)
            return result, OUTCOME_REJECTED

        if not response.content:
            return CallResult.ok(None), OUTCOME_SUCCESS

        try:
            data = response.json()
        except ValueError:
            logger.warning("Feature API %s returned a non-JSON body", endpoint)
            return CallResult.fail("Invalid JSON response", f"Feature API at {endpoint} did not return JSON"), OUTCOME_ERROR

        return CallResult.ok(data), OUTCOME_SUCCESS


__all__ = [
    "RequestExecutor",
    "build_envelope",
]
