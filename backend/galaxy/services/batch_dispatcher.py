"""Concurrent fan-out of independent feature calls."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any
from typing import List
from typing import Mapping
from typing import Optional
from typing import Sequence

from galaxy.schemas.calls import CallOptions
from galaxy.schemas.calls import CallResult
from galaxy.services.request_executor import RequestExecutor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchRequest:
    """One member of a batch: where to POST, what, and with which options."""

    endpoint: str
    payload: Mapping[str, Any]
    options: Optional[CallOptions] = None


class BatchDispatcher:
    """Run a batch of :class:`RequestExecutor` calls concurrently.

    Results come back positionally: ``results[i]`` belongs to ``requests[i]``
    whatever order the calls finish in.  Each call owns its own deadline, so
    a slow or failing member never cancels the others.
    """

    def __init__(self, executor: RequestExecutor):
        self.executor = executor

    async def dispatch_all(self, requests: Sequence[BatchRequest]) -> List[CallResult]:
        if not requests:
            return []

        logger.debug("Dispatching batch of %d call(s)", len(requests))
        outcomes = await asyncio.gather(
            *(self.executor.execute(req.endpoint, req.payload, req.options) for req in requests),
            return_exceptions=True,
        )

        results: List[CallResult] = []
        for req, outcome in zip(requests, outcomes):
            if isinstance(outcome, BaseException):
                # The executor folds errors into results; anything landing
                # here is a bug, but it must not sink the rest of the batch.
                logger.error("Batch call to %s raised: %r", req.endpoint, outcome)
                results.append(CallResult.fail(str(outcome) or type(outcome).__name__, "Unexpected error in batch call"))
            else:
                results.append(outcome)
        return results


__all__ = [
    "BatchDispatcher",
    "BatchRequest",
]
