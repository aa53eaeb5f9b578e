"""Result and option models for inter-service calls.

Every public operation of the call layer returns one of these models instead
of raising.  The validators pin the result invariants so a malformed result
is a programming error caught at construction time.
"""

from __future__ import annotations

from typing import Any
from typing import Dict
from typing import Mapping
from typing import Optional

from pydantic import BaseModel
from pydantic import Field
from pydantic import model_validator

from galaxy.constants import DEFAULT_MAX_ATTEMPTS
from galaxy.constants import DEFAULT_TIMEOUT_MS


class CallOptions(BaseModel):
    """Per-call knobs for :class:`galaxy.services.request_executor.RequestExecutor`."""

    headers: Dict[str, str] = Field(default_factory=dict)
    timeout_ms: int = Field(DEFAULT_TIMEOUT_MS, gt=0)
    max_attempts: int = Field(DEFAULT_MAX_ATTEMPTS, ge=1)
    include_auth: bool = False

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


class CallResult(BaseModel):
    """Normalised outcome of one logical call.

    ``success`` implies ``data`` is set (possibly ``None`` for an empty body)
    and ``error`` is absent; a failure always carries ``error``.
    """

    success: bool
    data: Any = None
    error: Optional[str] = None
    message: Optional[str] = None

    @model_validator(mode="after")
    def _check_envelope(self) -> CallResult:
        if self.success and self.error is not None:
            raise ValueError("A successful CallResult cannot carry an error")
        if not self.success:
            if not self.error:
                raise ValueError("A failed CallResult must carry an error")
            if self.data is not None:
                raise ValueError("A failed CallResult cannot carry data")
        return self

    @classmethod
    def ok(cls, data: Any) -> CallResult:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, message: Optional[str] = None) -> CallResult:
        return cls(success=False, error=error, message=message)

    def to_wire(self) -> Dict[str, Any]:
        """JSON shape used on the wire: absent fields are omitted."""
        if self.success:
            return {"success": True, "data": self.data}
        body: Dict[str, Any] = {"success": False, "error": self.error}
        if self.message is not None:
            body["message"] = self.message
        return body


class OrchestrationSummary(BaseModel):
    total: int = 0
    successful: int = 0
    failed: int = 0


class OrchestrationResult(BaseModel):
    """Aggregate of a core fan-out, keyed by feature id."""

    success: bool
    results: Dict[str, CallResult] = Field(default_factory=dict)
    summary: OrchestrationSummary = Field(default_factory=OrchestrationSummary)
    # Set only when the orchestration was refused before any call was made
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_summary(self) -> OrchestrationResult:
        if self.summary.total != len(self.results):
            raise ValueError("summary.total must equal the number of results")
        if self.summary.successful + self.summary.failed != self.summary.total:
            raise ValueError("summary counts do not add up to summary.total")
        if self.success != (self.summary.successful > 0):
            raise ValueError("success must be true exactly when at least one call succeeded")
        return self

    @classmethod
    def from_results(cls, results: Mapping[str, CallResult]) -> OrchestrationResult:
        successful = sum(1 for r in results.values() if r.success)
        summary = OrchestrationSummary(
            total=len(results),
            successful=successful,
            failed=len(results) - successful,
        )
        return cls(success=successful > 0, results=dict(results), summary=summary)

    @classmethod
    def refused(cls, error: str) -> OrchestrationResult:
        return cls(success=False, error=error)
