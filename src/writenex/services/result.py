"""ServiceResult and ServiceError, the universal service contract.

INVARIANT: All service-layer methods return ServiceResult. Validation,
not-found and filesystem errors become ``ok=False`` results; they are
never raised to the caller.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# Error codes
INVALID_PATTERN = "INVALID_PATTERN"
NOT_FOUND = "NOT_FOUND"
INVALID_PATH = "INVALID_PATH"
INVALID_INPUT = "INVALID_INPUT"
READ_FAILED = "READ_FAILED"
WRITE_FAILED = "WRITE_FAILED"
DELETE_FAILED = "DELETE_FAILED"
DISCOVERY_FAILED = "DISCOVERY_FAILED"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Return type of every service operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"create_content"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing spans, cache hits).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
