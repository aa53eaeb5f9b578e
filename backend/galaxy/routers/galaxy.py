"""Topology and galaxy-wide health endpoints."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi import Depends

from galaxy.constants import GALAXY_PREFIX
from galaxy.dependencies.galaxy import get_health_monitor
from galaxy.dependencies.galaxy import get_instance
from galaxy.registry import GalaxyInstance
from galaxy.schemas.api import ApiConfig
from galaxy.schemas.api import GalaxyHealthResponse
from galaxy.schemas.api import GalaxyInfoResponse
from galaxy.schemas.api import ReachableFeature
from galaxy.services.health_monitor import HealthMonitor
from galaxy.services.topology import api_config
from galaxy.services.topology import feature_endpoints

router = APIRouter(prefix=GALAXY_PREFIX, tags=["galaxy"])


@router.get("", response_model=GalaxyInfoResponse)
def galaxy_info(instance: GalaxyInstance = Depends(get_instance)):
    """Describe this instance and the features it may call."""
    identity = instance.identity
    return GalaxyInfoResponse(
        id=identity.id,
        name=identity.name,
        type=identity.role.value,
        tagline=identity.tagline,
        description=identity.description,
        core_app_url=identity.core_app_url,
        api_config=ApiConfig.model_validate(api_config(instance)),
        feature_endpoints=[
            ReachableFeature(id=f.id, name=f.name, url=f.base_url, api_endpoint=f.api_endpoint)
            for f in feature_endpoints(instance)
        ],
    )


@router.get("/health", response_model=GalaxyHealthResponse)
async def galaxy_health(
    instance: GalaxyInstance = Depends(get_instance),
    monitor: HealthMonitor = Depends(get_health_monitor),
):
    """Probe every registry feature that has an endpoint."""
    health = await monitor.probe_all(instance.registry)
    return GalaxyHealthResponse(health=health, healthy=sum(health.values()), total=len(health))
