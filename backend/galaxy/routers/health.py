"""Own liveness endpoint, the target of derived ``.../api/health`` probes."""

from fastapi import APIRouter
from fastapi import Depends
from fastapi import status

from galaxy.constants import HEALTH_PREFIX
from galaxy.dependencies.galaxy import get_instance
from galaxy.registry import GalaxyInstance
from galaxy.schemas.api import LivenessResponse
from galaxy.utils.time import utc_now_iso

router = APIRouter(prefix=HEALTH_PREFIX, tags=["health"])


@router.get("", response_model=LivenessResponse, status_code=status.HTTP_200_OK)
def liveness(instance: GalaxyInstance = Depends(get_instance)):
    return LivenessResponse(id=instance.identity.id, type=instance.identity.role.value, timestamp=utc_now_iso())
