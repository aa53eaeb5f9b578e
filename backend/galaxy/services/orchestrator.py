"""Core-only fan-out across feature apps with an aggregated summary."""

from __future__ import annotations

import logging
from typing import Any
from typing import Iterable
from typing import List
from typing import Mapping
from typing import Optional

from galaxy.constants import CORE_CALLER_TAG
from galaxy.metrics import orchestration_total
from galaxy.registry import FeatureDescriptor
from galaxy.registry import Registry
from galaxy.registry import Role
from galaxy.schemas.calls import CallOptions
from galaxy.schemas.calls import OrchestrationResult
from galaxy.services.batch_dispatcher import BatchDispatcher
from galaxy.services.batch_dispatcher import BatchRequest

logger = logging.getLogger(__name__)

ROLE_VIOLATION_ERROR = "Orchestration is only available for core apps"


class Orchestrator:
    """Call several features at once on behalf of a core instance.

    The role is fixed at construction.  Under any role other than
    :attr:`Role.CORE` :meth:`orchestrate` refuses without touching the network.
    """

    def __init__(
        self,
        role: Role,
        registry: Registry,
        dispatcher: BatchDispatcher,
        options: Optional[CallOptions] = None,
    ):
        self.role = role
        self.registry = registry
        self.dispatcher = dispatcher
        self.options = options

    def resolve(self, feature_ids: Iterable[str]) -> List[FeatureDescriptor]:
        """Registry entries that were requested *and* expose an endpoint.

        Unknown ids and endpoint-less features are dropped silently; the
        result keeps registry order.
        """
        wanted = set(feature_ids)
        return [d for d in self.registry.with_endpoints() if d.id in wanted]

    async def orchestrate(
        self,
        feature_ids: Iterable[str],
        payload: Optional[Mapping[str, Any]],
        caller_id: str,
        *,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> OrchestrationResult:
        """Fan *payload* out to every resolvable feature in *feature_ids*.

        Args:
            feature_ids: Requested feature ids.
            payload: Body sent to each feature (copied, never mutated).
            caller_id: Id of the calling core, sent as ``coreId``.
            extra: Additional keys merged last into each body (e.g. ``userId``).
        """
        if self.role is not Role.CORE:
            logger.warning("Refusing orchestration: instance role is %s", self.role.value)
            return OrchestrationResult.refused(ROLE_VIOLATION_ERROR)

        features = self.resolve(feature_ids)
        if not features:
            logger.info("Orchestration requested but no feature with an endpoint matched")
            return OrchestrationResult.from_results({})

        body = {
            **(payload or {}),
            "calledFrom": CORE_CALLER_TAG,
            "coreId": caller_id,
            **(extra or {}),
        }
        requests = [BatchRequest(endpoint=d.api_endpoint, payload=body, options=self.options) for d in features]
        results = await self.dispatcher.dispatch_all(requests)

        outcome = OrchestrationResult.from_results({d.id: r for d, r in zip(features, results)})
        orchestration_total.inc()
        logger.info(
            "Orchestrated %d feature(s): %d ok, %d failed",
            outcome.summary.total,
            outcome.summary.successful,
            outcome.summary.failed,
        )
        return outcome


__all__ = [
    "Orchestrator",
    "ROLE_VIOLATION_ERROR",
]
