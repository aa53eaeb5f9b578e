"""Core orchestration endpoint.

``POST`` fans a payload out to the requested features and reports each
outcome; ``GET`` lists the features this core can orchestrate.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter
from fastapi import Depends
from fastapi import status

from galaxy.constants import ORCHESTRATE_PREFIX
from galaxy.dependencies.auth import get_optional_user_id
from galaxy.dependencies.galaxy import get_instance
from galaxy.dependencies.galaxy import get_orchestrator
from galaxy.registry import GalaxyInstance
from galaxy.schemas.api import AvailableFeature
from galaxy.schemas.api import AvailableFeaturesResponse
from galaxy.schemas.api import CalledFeature
from galaxy.schemas.api import ErrorResponse
from galaxy.schemas.api import OrchestrateRequest
from galaxy.schemas.api import OrchestrateResponse
from galaxy.services.orchestrator import Orchestrator
from galaxy.utils.responses import error_response
from galaxy.utils.time import epoch_millis
from galaxy.utils.time import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter(prefix=ORCHESTRATE_PREFIX, tags=["orchestrate"])

CORE_ONLY_ERROR = "This endpoint is only available for core apps"


@router.post(
    "",
    response_model=OrchestrateResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def orchestrate(
    body: OrchestrateRequest,
    instance: GalaxyInstance = Depends(get_instance),
    orchestrator: Orchestrator = Depends(get_orchestrator),
    user_id: Optional[str] = Depends(get_optional_user_id),
):
    """Call every requested feature in parallel and combine the results."""
    if user_id is None:
        return error_response(status.HTTP_401_UNAUTHORIZED, "Authentication required")

    if not instance.identity.is_core:
        return error_response(status.HTTP_400_BAD_REQUEST, CORE_ONLY_ERROR)

    if body.features is None:
        return error_response(status.HTTP_400_BAD_REQUEST, "Please provide features array with feature IDs to call")

    features = orchestrator.resolve(body.features)
    if not features:
        return error_response(status.HTTP_400_BAD_REQUEST, "No valid features with API endpoints found")

    try:
        outcome = await orchestrator.orchestrate(
            body.features,
            body.payload,
            instance.identity.id,
            extra={"userId": user_id},
        )
    except Exception as exc:
        logger.exception("Orchestration error")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to orchestrate feature calls",
            str(exc) or "Unknown error",
        )

    called = []
    for feature in features:
        result = outcome.results[feature.id]
        called.append(
            CalledFeature(
                feature_id=feature.id,
                feature_name=feature.name,
                endpoint=feature.api_endpoint,
                success=result.success,
                data=result.data,
                error=result.error,
            )
        )

    return OrchestrateResponse(
        success=outcome.success,
        orchestration_id=f"orch_{epoch_millis()}",
        timestamp=utc_now_iso(),
        called_features=called,
        summary=outcome.summary,
    )


@router.get("", response_model=AvailableFeaturesResponse, responses={400: {"model": ErrorResponse}})
def list_orchestrable_features(instance: GalaxyInstance = Depends(get_instance)):
    """List registry features that expose an API endpoint."""
    if not instance.identity.is_core:
        return error_response(status.HTTP_400_BAD_REQUEST, CORE_ONLY_ERROR)

    available = instance.registry.with_endpoints()
    return AvailableFeaturesResponse(
        core_id=instance.identity.id,
        core_name=instance.identity.name,
        available_features=[
            AvailableFeature(id=f.id, name=f.name, url=f.base_url, api_endpoint=f.api_endpoint) for f in available
        ],
        total_features=len(instance.registry),
        api_enabled_features=len(available),
    )
