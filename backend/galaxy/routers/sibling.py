"""Relay endpoint letting a feature app call one of its siblings."""

from __future__ import annotations

from typing import Any
from typing import Dict

from fastapi import APIRouter
from fastapi import Body
from fastapi import Depends
from fastapi import status
from fastapi.responses import JSONResponse

from galaxy.constants import SIBLING_PREFIX
from galaxy.dependencies.galaxy import get_instance
from galaxy.dependencies.galaxy import get_sibling_caller
from galaxy.registry import GalaxyInstance
from galaxy.services.sibling_caller import SiblingCaller

router = APIRouter(prefix=SIBLING_PREFIX, tags=["sibling"])


def _status_for_failure(instance: GalaxyInstance, sibling_id: str) -> int:
    if not instance.identity.is_feature:
        return status.HTTP_400_BAD_REQUEST
    sibling = instance.registry.excluding(instance.identity.id).get(sibling_id)
    if sibling is None:
        return status.HTTP_404_NOT_FOUND
    if not sibling.has_endpoint:
        return status.HTTP_400_BAD_REQUEST
    # Resolved fine, so the sibling itself failed or was unreachable
    return status.HTTP_502_BAD_GATEWAY


@router.post("/{sibling_id}")
async def call_sibling(
    sibling_id: str,
    payload: Dict[str, Any] = Body(...),
    instance: GalaxyInstance = Depends(get_instance),
    caller: SiblingCaller = Depends(get_sibling_caller),
):
    """Forward the JSON body to *sibling_id* and return its CallResult."""
    result = await caller.call_sibling(sibling_id, payload, instance.identity.id, instance.identity.name)
    status_code = status.HTTP_200_OK if result.success else _status_for_failure(instance, sibling_id)
    return JSONResponse(status_code=status_code, content=result.to_wire())
