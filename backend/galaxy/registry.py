"""Feature registry and instance identity.

The registry is a read-only, ordered directory of the features this instance
knows about.  It is built once at process start by
:func:`galaxy.config.loader.load_instance` and handed by reference to every
service that needs it, so concurrent calls can share it without locking.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable
from typing import Iterator
from typing import List
from typing import Optional


class Role(str, Enum):
    """Role of a running instance inside its galaxy."""

    CORE = "core"
    FEATURE = "feature"


@dataclass(frozen=True)
class FeatureDescriptor:
    """One known feature: identity, public URL and optional API endpoint."""

    id: str
    name: str
    base_url: str
    api_endpoint: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Feature descriptor id must be a non-empty string")

    @property
    def has_endpoint(self) -> bool:
        return bool(self.api_endpoint)


class Registry:
    """Immutable, ordered mapping of feature id to :class:`FeatureDescriptor`.

    Raises ``ValueError`` on construction when two descriptors share an id.
    """

    __slots__ = ("_descriptors", "_index")

    def __init__(self, descriptors: Iterable[FeatureDescriptor] = ()):
        items = tuple(descriptors)
        index: dict[str, FeatureDescriptor] = {}
        for descriptor in items:
            if descriptor.id in index:
                raise ValueError(f"Duplicate feature id in registry: {descriptor.id}")
            index[descriptor.id] = descriptor

        self._descriptors = items
        self._index = MappingProxyType(index)

    def __iter__(self) -> Iterator[FeatureDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, feature_id: object) -> bool:
        return feature_id in self._index

    def __repr__(self) -> str:
        return f"Registry({[d.id for d in self._descriptors]!r})"

    def get(self, feature_id: str) -> Optional[FeatureDescriptor]:
        return self._index.get(feature_id)

    def ids(self) -> List[str]:
        return [d.id for d in self._descriptors]

    def with_endpoints(self) -> List[FeatureDescriptor]:
        """Descriptors that can be called, in registry order."""
        return [d for d in self._descriptors if d.has_endpoint]

    def excluding(self, feature_id: str) -> Registry:
        """Return a new registry without *feature_id* (used for sibling lookups)."""
        return Registry(d for d in self._descriptors if d.id != feature_id)


@dataclass(frozen=True)
class InstanceIdentity:
    """Who this running instance is.  Static for the process lifetime."""

    id: str
    name: str
    role: Role
    api_endpoint: Optional[str] = None
    tagline: str = ""
    description: Optional[str] = None
    core_app_url: Optional[str] = None

    @property
    def is_core(self) -> bool:
        return self.role is Role.CORE

    @property
    def is_feature(self) -> bool:
        return self.role is Role.FEATURE


@dataclass(frozen=True)
class GalaxyInstance:
    """Identity plus registry, the whole static configuration of an instance."""

    identity: InstanceIdentity
    registry: Registry
