"""Role-dependent views of the galaxy an instance can reach."""

from __future__ import annotations

from typing import Any
from typing import Dict
from typing import List

from galaxy.registry import FeatureDescriptor
from galaxy.registry import GalaxyInstance


def feature_endpoints(instance: GalaxyInstance) -> List[FeatureDescriptor]:
    """Features this instance may call.

    A core may call every feature with an endpoint; a feature may call every
    sibling with an endpoint, never itself.
    """
    registry = instance.registry
    if not instance.identity.is_core:
        registry = registry.excluding(instance.identity.id)
    return registry.with_endpoints()


def api_config(instance: GalaxyInstance) -> Dict[str, Any]:
    identity = instance.identity
    return {
        "hasAPI": bool(identity.api_endpoint),
        "endpoint": identity.api_endpoint,
        "isCore": identity.is_core,
        "canCallFeatures": identity.is_core and bool(instance.registry.with_endpoints()),
    }


__all__ = ["api_config", "feature_endpoints"]
