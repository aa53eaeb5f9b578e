"""Protocol constants and route prefixes shared across the galaxy."""

from typing import Final

# Base API prefix (all HTTP routes are served under /api/*)
API_PREFIX: Final = "/api"

# Router prefixes (relative to API_PREFIX)
ORCHESTRATE_PREFIX: Final = "/orchestrate"
FEATURE_PREFIX: Final = "/feature"
SIBLING_PREFIX: Final = "/sibling"
GALAXY_PREFIX: Final = "/galaxy"
HEALTH_PREFIX: Final = "/health"

# Tag written into every payload fanned out by a core instance
CORE_CALLER_TAG: Final = "galaxy-core"

# Keys injected into outbound request bodies
METADATA_KEY: Final = "_metadata"
CALLER_KEY: Final = "_caller"

# Final path segment of a derived liveness URL
HEALTH_SEGMENT: Final = "health"

# Outbound call defaults (overridable through Settings)
DEFAULT_TIMEOUT_MS: Final = 30000
DEFAULT_MAX_ATTEMPTS: Final = 1
HEALTH_TIMEOUT_MS: Final = 5000

# Back-off before retry n is BACKOFF_BASE_SECONDS * 2**n
BACKOFF_BASE_SECONDS: Final = 1.0

FEATURE_API_VERSION: Final = "1.0.0"


def get_full_path(relative_path: str) -> str:
    """Get the full API path for a relative path."""
    return f"{API_PREFIX}{relative_path}"
