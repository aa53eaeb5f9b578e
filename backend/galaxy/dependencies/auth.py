"""FastAPI dependency that exposes the *calling user*.

Authentication itself is delegated: an identity gateway in front of the
service validates the session and forwards the user id in ``X-User-Id``.
This module only reads it.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Request

from galaxy.config import get_settings

_settings = get_settings()

# Tests patch this constant to toggle dev ↔ prod behaviour.
AUTH_DISABLED: bool = _settings.auth_disabled  # noqa: N816 – module flag

USER_ID_HEADER = "X-User-Id"

# User id reported while AUTH_DISABLED is on and no header was forwarded
DEV_USER_ID = "dev-user"


def get_optional_user_id(request: Request) -> Optional[str]:
    """Return the forwarded user id, the dev id, or ``None``."""

    user_id = (request.headers.get(USER_ID_HEADER) or "").strip()
    if user_id:
        return user_id
    if AUTH_DISABLED:
        return DEV_USER_ID
    return None
