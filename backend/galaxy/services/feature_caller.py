"""Direct call to one feature by id, regardless of the caller's role."""

from __future__ import annotations

from typing import Any
from typing import Mapping
from typing import Optional

from galaxy.registry import Registry
from galaxy.schemas.calls import CallOptions
from galaxy.schemas.calls import CallResult
from galaxy.services.request_executor import RequestExecutor


class FeatureCaller:
    def __init__(self, registry: Registry, executor: RequestExecutor):
        self.registry = registry
        self.executor = executor

    async def call_feature(
        self,
        feature_id: str,
        payload: Optional[Mapping[str, Any]],
        options: Optional[CallOptions] = None,
    ) -> CallResult:
        """Resolve *feature_id* in the registry and POST *payload* to it."""
        feature = self.registry.get(feature_id)
        if feature is None:
            return CallResult.fail(
                f"Feature {feature_id} not found in galaxy config",
                "Please check your galaxy configuration",
            )

        if not feature.has_endpoint:
            return CallResult.fail(
                f"Feature {feature_id} does not have an API endpoint configured",
                "This feature may not support API calls",
            )

        return await self.executor.execute(feature.api_endpoint, payload, options)


__all__ = ["FeatureCaller"]
