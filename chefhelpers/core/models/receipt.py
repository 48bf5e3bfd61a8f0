"""
Receipt model: what came out of one command or one helper run.

Process runners never raise for a failed command. The exit status,
captured output and timing land in a Receipt and the caller decides
what the failure means.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def utc_now_iso() -> str:
    """Current UTC time as an ISO 8601 string."""
    return datetime.now(UTC).isoformat()


class Receipt(BaseModel):
    """Outcome of an external command or a helper run.

    ``source`` is what produced the receipt (``shell``, ``mock``,
    ``dispatcher``) and ``step`` is what was attempted: a command line
    or a helper name. ``started_at`` is taken before the work begins;
    callers that time their work pass it in together with
    ``duration_ms``.
    """

    source: str
    step: str
    status: Literal["ok", "failed"]
    output: str = ""
    error: str | None = None

    started_at: str = Field(default_factory=utc_now_iso)
    duration_ms: int = 0

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, source: str, step: str, output: str = "", **kwargs: Any) -> Receipt:
        return cls(source=source, step=step, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, source: str, step: str, error: str, **kwargs: Any) -> Receipt:
        return cls(source=source, step=step, status="failed", error=error, **kwargs)
