"""Helpers for galaxy-shaped HTTP error bodies."""

from typing import Optional

from fastapi.responses import JSONResponse

from galaxy.schemas.api import ErrorResponse


def error_response(status_code: int, error: str, message: Optional[str] = None) -> JSONResponse:
    """Return ``{success: false, error, message?}`` with *status_code*."""
    body = ErrorResponse(error=error, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))
