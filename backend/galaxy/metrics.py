"""Prometheus metrics for the inter-service call layer.

The module bundles all collectors in one place so importing side-effects
(metric registration) happen exactly once per process.  Services can simply
``from galaxy.metrics import …`` and increment.
"""

from __future__ import annotations

from prometheus_client import Counter
from prometheus_client import Histogram

call_total = Counter(
    "galaxy_call_total",
    "Logical feature API calls by final outcome",
    labelnames=("outcome",),
)

call_retry_total = Counter(
    "galaxy_call_retry_total",
    "Retries executed after transport-level failures",
)

call_latency_seconds = Histogram(
    "galaxy_call_latency_seconds",
    "Wall time of one logical feature API call including back-off (seconds)",
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

orchestration_total = Counter(
    "galaxy_orchestration_total",
    "Core fan-out orchestrations performed",
)

health_probe_total = Counter(
    "galaxy_health_probe_total",
    "Liveness probes by result",
    labelnames=("healthy",),
)

# Outcome label values for ``call_total``
OUTCOME_SUCCESS = "success"
OUTCOME_REJECTED = "rejected"
OUTCOME_TIMEOUT = "timeout"
OUTCOME_TRANSPORT = "transport_error"
OUTCOME_ERROR = "error"
