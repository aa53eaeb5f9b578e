"""Build the static :class:`~galaxy.registry.GalaxyInstance` at start-up.

Sources, in order of precedence:

1. ``GALAXY_CONFIG_FILE`` – a JSON or YAML file shaped like the scaffolding
   config (``id``, ``type``, ``name``, ``apiEndpoint``, ``related[]`` …).
2. ``GALAXY_ID`` / ``GALAXY_TYPE`` / ``GALAXY_NAME`` / ``GALAXY_API_ENDPOINT``
   and ``GALAXY_RELATED`` (a JSON array of related features).

Any problem (unreadable file, bad role, duplicate feature id) raises
``ValueError``; a misconfigured instance must not start.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any
from typing import Optional

import yaml
from pydantic import ValidationError

from galaxy.config import Settings
from galaxy.config import get_settings
from galaxy.registry import GalaxyInstance
from galaxy.registry import InstanceIdentity
from galaxy.registry import Registry
from galaxy.schemas.config import GalaxyConfigFile

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}


def _read_config_file(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"Cannot read galaxy config file {path}: {exc}") from exc

    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            return yaml.safe_load(text)
        return json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ValueError(f"Cannot parse galaxy config file {path}: {exc}") from exc


def _config_from_env(settings: Settings) -> dict[str, Any]:
    related: Any = []
    if settings.galaxy_related:
        try:
            related = json.loads(settings.galaxy_related)
        except json.JSONDecodeError as exc:
            raise ValueError(f"GALAXY_RELATED is not valid JSON: {exc}") from exc

    return {
        "id": settings.galaxy_id or "galaxy-template",
        "type": settings.galaxy_type or "feature",
        "name": settings.galaxy_name or "Galaxy Template",
        "apiEndpoint": settings.galaxy_api_endpoint,
        "related": related,
    }


def build_instance(config: GalaxyConfigFile) -> GalaxyInstance:
    """Turn a validated config into identity + registry."""
    identity = InstanceIdentity(
        id=config.id,
        name=config.name,
        role=config.type,
        api_endpoint=config.api_endpoint,
        tagline=config.tagline,
        description=config.description,
        core_app_url=config.core_app_url,
    )
    registry = Registry(entry.to_descriptor() for entry in config.related)
    return GalaxyInstance(identity=identity, registry=registry)


def parse_config(raw: Any) -> GalaxyConfigFile:
    try:
        return GalaxyConfigFile.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid galaxy configuration: {exc}") from exc


def load_instance(settings: Optional[Settings] = None) -> GalaxyInstance:
    """Load the instance configuration once; call at process start."""
    settings = settings or get_settings()

    if settings.galaxy_config_file:
        path = Path(settings.galaxy_config_file)
        raw = _read_config_file(path)
        source = str(path)
    else:
        raw = _config_from_env(settings)
        source = "environment"

    instance = build_instance(parse_config(raw))
    logger.info(
        "Loaded galaxy %s (%s) from %s with %d related feature(s)",
        instance.identity.id,
        instance.identity.role.value,
        source,
        len(instance.registry),
    )
    return instance


__all__ = [
    "build_instance",
    "load_instance",
    "parse_config",
]
