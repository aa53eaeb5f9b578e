"""Feature-to-feature calls."""

from __future__ import annotations

import logging
from typing import Any
from typing import Mapping
from typing import Optional

from galaxy.registry import Registry
from galaxy.registry import Role
from galaxy.schemas.calls import CallResult
from galaxy.services.request_executor import RequestExecutor

logger = logging.getLogger(__name__)


class SiblingCaller:
    """Let a feature instance call another feature listed in its registry."""

    def __init__(self, role: Role, registry: Registry, executor: RequestExecutor):
        self.role = role
        self.registry = registry
        self.executor = executor

    async def call_sibling(
        self,
        sibling_id: str,
        payload: Optional[Mapping[str, Any]],
        self_id: str,
        self_name: str,
    ) -> CallResult:
        if self.role is not Role.FEATURE:
            return CallResult.fail(
                "Sibling calls are only available for feature apps",
                "Core apps should use orchestration instead",
            )

        sibling = self.registry.excluding(self_id).get(sibling_id)
        if sibling is None:
            logger.info("Sibling %s not found in registry of %s", sibling_id, self_id)
            return CallResult.fail(
                f"Sibling feature {sibling_id} not found",
                "This feature is not configured as a sibling",
            )

        if not sibling.has_endpoint:
            return CallResult.fail(
                f"Sibling {sibling_id} does not have an API endpoint",
                "This sibling feature may not support API calls",
            )

        caller = {"id": self_id, "name": self_name, "type": "sibling"}
        return await self.executor.execute(sibling.api_endpoint, payload, caller=caller)


__all__ = ["SiblingCaller"]
