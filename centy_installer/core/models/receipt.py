"""
Stage receipts and the pipeline result — the install execution contract.

Each pipeline stage produces a ``StageReceipt``.  The orchestrator
stops at the first failed receipt; ``PipelineResult`` carries the
receipts plus either the installed path or the classified error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

from centy_installer.core.errors import InstallerError


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class StageReceipt(BaseModel):
    """Outcome of one pipeline stage."""

    stage: str
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    error: str | None = None
    error_kind: str | None = None
    detail: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, stage: str, **kwargs: Any) -> StageReceipt:
        """Create a success receipt."""
        return cls(stage=stage, status="ok", **kwargs)

    @classmethod
    def failure(cls, stage: str, error: InstallerError, **kwargs: Any) -> StageReceipt:
        """Create a failure receipt from a classified error."""
        return cls(
            stage=stage,
            status="failed",
            error=str(error),
            error_kind=type(error).__name__,
            **kwargs,
        )

    @classmethod
    def skip(cls, stage: str, reason: str = "", **kwargs: Any) -> StageReceipt:
        """Create a skip receipt."""
        return cls(stage=stage, status="skipped", detail={"reason": reason}, **kwargs)


@dataclass
class PipelineResult:
    """What one install run produced."""

    path: Path | None = None
    version: str | None = None
    target: str | None = None
    digest: str | None = None
    error: InstallerError | None = None
    receipts: list[StageReceipt] = field(default_factory=list)

    daemon_restarted: bool = False
    restart_error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.path is not None

    @property
    def failed_stage(self) -> str | None:
        """Name of the stage that failed, or None."""
        if self.error is None:
            return None
        for receipt in self.receipts:
            if receipt.failed:
                return receipt.stage
        return None

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        result: dict = {
            "ok": self.ok,
            "stages": [r.model_dump(mode="json") for r in self.receipts],
        }
        if self.error is not None:
            result["error"] = str(self.error)
            result["error_kind"] = type(self.error).__name__
            result["failed_stage"] = self.failed_stage
            return result

        result["path"] = str(self.path) if self.path else None
        result["version"] = self.version
        result["target"] = self.target
        result["sha256"] = self.digest
        result["daemon_restarted"] = self.daemon_restarted
        if self.restart_error:
            result["restart_error"] = self.restart_error
        return result
