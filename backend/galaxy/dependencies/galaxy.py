"""Dependency providers for the galaxy instance and its call services.

The :class:`~galaxy.registry.GalaxyInstance` is built once by the app factory
and stored on ``app.state``; every provider below reads it from there and
never reloads configuration.
"""

from __future__ import annotations

from typing import Optional

import httpx
from fastapi import Depends
from fastapi import Request

from galaxy.config import get_settings
from galaxy.registry import GalaxyInstance
from galaxy.schemas.calls import CallOptions
from galaxy.services.batch_dispatcher import BatchDispatcher
from galaxy.services.feature_handler import FeatureHandler
from galaxy.services.feature_handler import default_feature_handler
from galaxy.services.health_monitor import HealthMonitor
from galaxy.services.orchestrator import Orchestrator
from galaxy.services.request_executor import RequestExecutor
from galaxy.services.sibling_caller import SiblingCaller


def get_instance(request: Request) -> GalaxyInstance:
    """Dependency provider for the static instance configuration."""
    return request.app.state.galaxy


def _transport(request: Request) -> Optional[httpx.AsyncBaseTransport]:
    return getattr(request.app.state, "transport", None)


def get_executor(request: Request, instance: GalaxyInstance = Depends(get_instance)) -> RequestExecutor:
    """Dependency provider for RequestExecutor."""
    settings = get_settings()
    return RequestExecutor(
        instance.identity.role,
        transport=_transport(request),
        service_token=settings.service_token,
        default_options=CallOptions(
            timeout_ms=settings.default_timeout_ms,
            max_attempts=settings.default_max_attempts,
        ),
    )


def get_orchestrator(
    instance: GalaxyInstance = Depends(get_instance),
    executor: RequestExecutor = Depends(get_executor),
) -> Orchestrator:
    """Dependency provider for Orchestrator."""
    return Orchestrator(instance.identity.role, instance.registry, BatchDispatcher(executor))


def get_sibling_caller(
    instance: GalaxyInstance = Depends(get_instance),
    executor: RequestExecutor = Depends(get_executor),
) -> SiblingCaller:
    """Dependency provider for SiblingCaller."""
    return SiblingCaller(instance.identity.role, instance.registry, executor)


def get_health_monitor(request: Request) -> HealthMonitor:
    """Dependency provider for HealthMonitor."""
    return HealthMonitor(transport=_transport(request), timeout_ms=get_settings().health_timeout_ms)


def get_feature_handler() -> FeatureHandler:
    """Override this provider to plug in the feature's real processing."""
    return default_feature_handler
