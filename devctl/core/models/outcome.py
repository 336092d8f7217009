"""
PackageOutcome — what happened to one desired package.

The reconciler never lets a per-package error escape; it records it
here instead.  Outcomes are ephemeral: they drive the CLI report and
decide which packages get merged into the persisted config.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from devctl.core.models.package import DesiredPackage

# Skip reasons
SKIP_INVALID = "invalid"
SKIP_SATISFIED = "already satisfied"
SKIP_NOT_CONFIGURED = "manager not configured"


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class PackageOutcome(BaseModel):
    """Result of reconciling a single package."""

    package: DesiredPackage
    status: Literal["succeeded", "skipped", "failed"] = "succeeded"
    action: str = ""                # install, reinstall, none
    reason: str = ""                # skip reason
    error: str | None = None

    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status == "succeeded"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @property
    def satisfied(self) -> bool:
        """Whether the package is now known to be installed as desired."""
        return self.ok or (self.skipped and self.reason == SKIP_SATISFIED)

    @classmethod
    def success(cls, package: DesiredPackage, action: str, **kwargs: Any) -> PackageOutcome:
        return cls(package=package, status="succeeded", action=action, **kwargs)

    @classmethod
    def failure(cls, package: DesiredPackage, error: str, **kwargs: Any) -> PackageOutcome:
        return cls(package=package, status="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, package: DesiredPackage, reason: str, **kwargs: Any) -> PackageOutcome:
        return cls(package=package, status="skipped", reason=reason, action="none", **kwargs)

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", exclude={"package"})
        data.update(self.package.to_json())
        return data
