"""Feature app endpoint: process a payload, or report identity on GET."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Request
from fastapi import status

from galaxy.constants import FEATURE_PREFIX
from galaxy.dependencies.auth import get_optional_user_id
from galaxy.dependencies.galaxy import get_feature_handler
from galaxy.dependencies.galaxy import get_instance
from galaxy.registry import GalaxyInstance
from galaxy.schemas.api import ErrorResponse
from galaxy.schemas.api import FeatureResponse
from galaxy.schemas.api import FeatureStatusResponse
from galaxy.services.feature_handler import FeatureHandler
from galaxy.utils.responses import error_response
from galaxy.utils.time import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter(prefix=FEATURE_PREFIX, tags=["feature"])


@router.post("", response_model=FeatureResponse, responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def process_feature_request(
    request: Request,
    instance: GalaxyInstance = Depends(get_instance),
    handler: FeatureHandler = Depends(get_feature_handler),
    user_id: Optional[str] = Depends(get_optional_user_id),
):
    if not instance.identity.is_feature:
        return error_response(status.HTTP_400_BAD_REQUEST, "This endpoint is only available for feature apps")

    try:
        body = await request.json()
        data = await handler(instance.identity, body, user_id)
    except Exception as exc:
        logger.exception("Feature API error")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to process request",
            str(exc) or "Unknown error",
        )

    return FeatureResponse(data=data)


@router.get("", response_model=FeatureStatusResponse)
def feature_status(instance: GalaxyInstance = Depends(get_instance)):
    identity = instance.identity
    return FeatureStatusResponse(
        feature=identity.id,
        name=identity.name,
        type=identity.role.value,
        api_endpoint=identity.api_endpoint,
        timestamp=utc_now_iso(),
    )
