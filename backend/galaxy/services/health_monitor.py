"""Liveness probes for feature APIs.

A probe never raises: non-2xx answers, network errors and timeouts all
collapse to ``False``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict
from typing import Optional
from urllib.parse import urlsplit
from urllib.parse import urlunsplit

import httpx

from galaxy.constants import HEALTH_SEGMENT
from galaxy.constants import HEALTH_TIMEOUT_MS
from galaxy.metrics import health_probe_total
from galaxy.registry import Registry

logger = logging.getLogger(__name__)


def derive_health_url(endpoint: str) -> str:
    """Swap the last path segment of *endpoint* for ``health``.

    Examples::

        https://a.app/api/generate          -> https://a.app/api/health
        https://a.app/api/generate/         -> https://a.app/api/health
        https://a.app/api/generate?x=1#top  -> https://a.app/api/health
        https://a.app/generate              -> https://a.app/health
        https://a.app  or  https://a.app/   -> https://a.app/health

    A trailing slash does not count as an empty segment, and the query string
    and fragment are dropped.
    """
    parts = urlsplit(endpoint)
    head, _, _last = parts.path.rstrip("/").rpartition("/")
    return urlunsplit((parts.scheme, parts.netloc, f"{head}/{HEALTH_SEGMENT}", "", ""))


class HealthMonitor:
    """Probe one feature or every feature of a registry."""

    def __init__(
        self,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout_ms: int = HEALTH_TIMEOUT_MS,
    ):
        self._transport = transport
        self.timeout_ms = timeout_ms

    async def probe(self, api_endpoint: str) -> bool:
        """Return ``True`` iff the derived health URL answers with a 2xx."""
        timeout = self.timeout_ms / 1000
        try:
            url = derive_health_url(api_endpoint)
            async with httpx.AsyncClient(transport=self._transport, timeout=timeout, follow_redirects=True) as client:
                response = await asyncio.wait_for(client.get(url), timeout)
            healthy = response.is_success
            if not healthy:
                logger.debug("Health probe %s answered %d", url, response.status_code)
        except Exception as exc:  # every failure mode means "not healthy"
            logger.debug("Health probe for %s failed: %r", api_endpoint, exc)
            healthy = False

        health_probe_total.labels("true" if healthy else "false").inc()
        return healthy

    async def probe_all(self, registry: Registry) -> Dict[str, bool]:
        """Probe every registry entry with an endpoint, concurrently."""
        features = registry.with_endpoints()
        results = await asyncio.gather(*(self.probe(d.api_endpoint) for d in features))
        return {d.id: healthy for d, healthy in zip(features, results)}


__all__ = [
    "HealthMonitor",
    "derive_health_url",
]
