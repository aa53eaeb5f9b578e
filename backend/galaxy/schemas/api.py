"""Pydantic models for the HTTP endpoints so OpenAPI schemas are generated.

The galaxy wire format is camelCase; Python attributes stay snake_case and
are aliased on the way out.
"""

from typing import Any
from typing import Dict
from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic.alias_generators import to_camel

from galaxy.schemas.calls import OrchestrationSummary


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    """Body of every refused or failed request."""

    success: bool = False
    error: str
    message: Optional[str] = None


# ---------------------------------------------------------------------------
# Orchestration (core)
# ---------------------------------------------------------------------------


class OrchestrateRequest(BaseModel):
    # Optional so a missing list is answered with the galaxy error body
    # instead of a validation error.
    features: Optional[List[str]] = None
    payload: Dict[str, Any] = Field(default_factory=dict)


class CalledFeature(CamelModel):
    feature_id: str
    feature_name: str
    endpoint: str
    success: bool
    data: Any = None
    error: Optional[str] = None


class OrchestrateResponse(CamelModel):
    success: bool
    orchestration_id: str
    timestamp: str
    called_features: List[CalledFeature]
    summary: OrchestrationSummary


class AvailableFeature(CamelModel):
    id: str
    name: str
    url: str
    api_endpoint: Optional[str]
    can_orchestrate: bool = True


class AvailableFeaturesResponse(CamelModel):
    success: bool = True
    core_id: str
    core_name: str
    available_features: List[AvailableFeature]
    total_features: int
    api_enabled_features: int


# ---------------------------------------------------------------------------
# Feature
# ---------------------------------------------------------------------------


class FeatureResponse(BaseModel):
    success: bool = True
    data: Any


class FeatureStatusResponse(CamelModel):
    """Static liveness/identity document of a feature app."""

    status: str = "healthy"
    feature: str
    name: str
    type: str
    api_endpoint: Optional[str]
    timestamp: str


# ---------------------------------------------------------------------------
# Galaxy topology & health
# ---------------------------------------------------------------------------


class ReachableFeature(CamelModel):
    id: str
    name: str
    url: str
    api_endpoint: Optional[str]


class ApiConfig(CamelModel):
    has_api: bool = Field(..., alias="hasAPI")
    endpoint: Optional[str]
    is_core: bool
    can_call_features: bool


class GalaxyInfoResponse(CamelModel):
    id: str
    name: str
    type: str
    tagline: str = ""
    description: Optional[str] = None
    core_app_url: Optional[str] = None
    api_config: ApiConfig
    feature_endpoints: List[ReachableFeature]


class GalaxyHealthResponse(BaseModel):
    success: bool = True
    health: Dict[str, bool]
    healthy: int
    total: int


class LivenessResponse(BaseModel):
    status: str = "healthy"
    id: str
    type: str
    timestamp: str
