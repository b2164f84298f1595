"""Outcome of a service operation.

Operations that can fail for data reasons (bad coordinates, unreadable
dataset, nothing to play) report it here instead of raising; the CLI turns
a result into stdout or stderr output and an exit code.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Machine-readable *code*, human *message*, optional context."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """What an operation produced.

    ``data`` is only meaningful when ``ok``; ``error`` is set exactly when
    it is not. ``warnings`` carry dropped records and plugin failures either
    way.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @classmethod
    def success(
        cls, op: str, data: dict[str, Any] | None = None, *, warnings: Iterable[str] = ()
    ) -> ServiceResult:
        return cls(ok=True, op=op, data=data or {}, warnings=list(warnings))

    @classmethod
    def failure(
        cls,
        op: str,
        code: str,
        message: str,
        *,
        detail: dict[str, Any] | None = None,
        warnings: Iterable[str] = (),
    ) -> ServiceResult:
        error = ServiceError(code=code, message=message, detail=detail or {})
        return cls(ok=False, op=op, error=error, warnings=list(warnings))

    def as_op(self, op: str) -> ServiceResult:
        """The same outcome reported under another operation name."""
        return self.model_copy(update={"op": op})
