"""Processing hook behind the feature endpoint.

A feature app replaces :func:`default_feature_handler` with its own logic by
overriding :func:`galaxy.dependencies.galaxy.get_feature_handler`.  The
handler receives the raw request body and returns the ``data`` object of the
success response.
"""

from __future__ import annotations

from typing import Any
from typing import Awaitable
from typing import Callable
from typing import Dict
from typing import Optional

from galaxy.constants import FEATURE_API_VERSION
from galaxy.registry import InstanceIdentity
from galaxy.utils.time import utc_now_iso

FeatureHandler = Callable[[InstanceIdentity, Any, Optional[str]], Awaitable[Any]]


async def default_feature_handler(
    identity: InstanceIdentity,
    body: Dict[str, Any],
    user_id: Optional[str],
) -> Dict[str, Any]:
    """Echo the input back in the standard feature result shape."""
    return {
        "featureId": identity.id,
        "featureName": identity.name,
        "processed": True,
        "timestamp": utc_now_iso(),
        "input": body,
        "output": {
            "message": f"Processed by {identity.name}",
            "data": {},
        },
        "metadata": {
            "userId": user_id or "anonymous",
            "apiVersion": FEATURE_API_VERSION,
        },
    }


__all__ = ["FeatureHandler", "default_feature_handler"]
