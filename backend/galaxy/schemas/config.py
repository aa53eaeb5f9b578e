"""Schema of a galaxy configuration file.

The file mirrors the scaffolding template's config.  Presentation-only keys
(colour palette, promoted links, legacy colours) are accepted and ignored.
"""

from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from galaxy.registry import FeatureDescriptor
from galaxy.registry import Role


class RelatedFeatureEntry(BaseModel):
    """One entry of ``related``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1)
    name: str
    url: str = ""
    api_endpoint: Optional[str] = Field(None, alias="apiEndpoint")

    def to_descriptor(self) -> FeatureDescriptor:
        return FeatureDescriptor(
            id=self.id,
            name=self.name,
            base_url=self.url,
            api_endpoint=self.api_endpoint or None,
        )


class GalaxyConfigFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1)
    type: Role
    name: str
    tagline: str = ""
    description: Optional[str] = None
    core_app_url: Optional[str] = Field(None, alias="coreAppUrl")
    api_endpoint: Optional[str] = Field(None, alias="apiEndpoint")
    related: List[RelatedFeatureEntry] = Field(default_factory=list)
