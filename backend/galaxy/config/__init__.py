"""Centralised configuration helper.

This module eliminates scattered ``os.getenv`` calls by exposing a **single**
process-wide :class:`Settings` instance (retrieved via :func:`get_settings`).

Only *process* settings live here.  The galaxy itself (who am I, which
features do I know about) is built from these settings exactly once by
:func:`galaxy.config.loader.load_instance`.
"""

from __future__ import annotations

import functools
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# ``_REPO_ROOT`` points to the top-level repository directory.  This file is
# located at ``backend/galaxy/config/__init__.py``.
_REPO_ROOT = Path(__file__).resolve().parents[3]


def _truthy(value: str | None) -> bool:  # noqa: D401 – small helper
    """Return *True* when *value* looks like an affirmative string."""

    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


@dataclass
class Settings:  # noqa: D401 – simple data container
    """Lightweight settings container populated from environment variables."""

    # Runtime flags -----------------------------------------------------
    testing: bool
    auth_disabled: bool

    # Misc --------------------------------------------------------------
    port: int
    log_level: str
    allowed_cors_origins: str

    # Galaxy source -----------------------------------------------------
    galaxy_config_file: str | None
    galaxy_id: str | None
    galaxy_type: str | None
    galaxy_name: str | None
    galaxy_api_endpoint: str | None
    galaxy_related: str | None  # raw JSON array

    # Outbound call defaults --------------------------------------------
    default_timeout_ms: int
    default_max_attempts: int
    health_timeout_ms: int

    # Bearer token attached to calls that opt into ``include_auth``
    service_token: str | None

    @property
    def cors_origins(self) -> list[str]:
        origins = [o.strip() for o in self.allowed_cors_origins.split(",") if o.strip()]
        return origins or ["*"]


def _load_settings() -> Settings:  # noqa: D401 – helper
    """Populate :class:`Settings` from environment variables."""

    env_path = _REPO_ROOT / ".env"
    if env_path.exists():
        # Real environment wins over the file so deployments and tests can
        # pin individual values.
        load_dotenv(env_path, override=False)

    testing = _truthy(os.getenv("TESTING"))

    return Settings(
        testing=testing,
        auth_disabled=_truthy(os.getenv("AUTH_DISABLED")) or testing,
        port=_int_env("PORT", 8001),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        allowed_cors_origins=os.getenv("ALLOWED_CORS_ORIGINS", ""),
        galaxy_config_file=os.getenv("GALAXY_CONFIG_FILE"),
        galaxy_id=os.getenv("GALAXY_ID"),
        galaxy_type=os.getenv("GALAXY_TYPE"),
        galaxy_name=os.getenv("GALAXY_NAME"),
        galaxy_api_endpoint=os.getenv("GALAXY_API_ENDPOINT"),
        galaxy_related=os.getenv("GALAXY_RELATED"),
        default_timeout_ms=_int_env("GALAXY_TIMEOUT_MS", 30000),
        default_max_attempts=_int_env("GALAXY_MAX_ATTEMPTS", 1),
        health_timeout_ms=_int_env("GALAXY_HEALTH_TIMEOUT_MS", 5000),
        service_token=os.getenv("GALAXY_SERVICE_TOKEN"),
    )


def _validate_required(settings: Settings) -> None:  # noqa: D401 – helper
    """Abort startup when call defaults are out of range."""

    problems = []
    if settings.default_timeout_ms <= 0:
        problems.append("GALAXY_TIMEOUT_MS must be > 0")
    if settings.default_max_attempts < 1:
        problems.append("GALAXY_MAX_ATTEMPTS must be >= 1")
    if settings.health_timeout_ms <= 0:
        problems.append("GALAXY_HEALTH_TIMEOUT_MS must be > 0")

    if problems:
        raise RuntimeError("Invalid galaxy configuration: " + "; ".join(problems))


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:  # noqa: D401 – public accessor
    """Return :class:`Settings` instance loaded from environment."""

    settings = _load_settings()
    _validate_required(settings)
    return settings


__all__ = [
    "Settings",
    "get_settings",
]
