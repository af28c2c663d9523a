"""Result types for scans and migrations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class VerdictStatus(str, Enum):
    """Outcome of checking one dependency."""

    DEPRECATED = "deprecated"
    HEALTHY = "healthy"
    FAILED = "failed"


class Action(str, Enum):
    """What the migrator did with a deprecated dependency."""

    REPLACED = "replaced"
    WOULD_REPLACE = "would-replace"
    SKIPPED = "skipped"


class InstallStatus(str, Enum):
    NOT_RUN = "not-run"
    INSTALLED = "installed"
    FAILED = "failed"


@dataclass
class DeprecationVerdict:
    """Scan result for a single dependency."""

    dependency: str
    status: VerdictStatus
    message: str | None = None
    alternative: str | None = None
    error: str | None = None

    @property
    def deprecated(self) -> bool:
        return self.status is VerdictStatus.DEPRECATED

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "dependency": self.dependency,
            "status": self.status.value,
            "deprecated": self.deprecated,
        }
        if self.status is VerdictStatus.DEPRECATED:
            data["message"] = self.message
            data["alternative"] = self.alternative
        elif self.status is VerdictStatus.FAILED:
            data["error"] = self.error
        return data


@dataclass
class ScanReport:
    """Result of scanning a dependency set."""

    verdicts: list[DeprecationVerdict] = field(default_factory=list)

    def _count(self, status: VerdictStatus) -> int:
        return sum(1 for v in self.verdicts if v.status is status)

    @property
    def total(self) -> int:
        return len(self.verdicts)

    @property
    def deprecated_count(self) -> int:
        return self._count(VerdictStatus.DEPRECATED)

    @property
    def healthy_count(self) -> int:
        return self._count(VerdictStatus.HEALTHY)

    @property
    def failed_count(self) -> int:
        return self._count(VerdictStatus.FAILED)

    @property
    def deprecated(self) -> list[DeprecationVerdict]:
        return [v for v in self.verdicts if v.status is VerdictStatus.DEPRECATED]

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": {
                "total": self.total,
                "deprecated": self.deprecated_count,
                "healthy": self.healthy_count,
                "failed": self.failed_count,
            },
            "results": [v.to_dict() for v in self.verdicts],
        }


@dataclass
class MigrationOptions:
    """Flags controlling a migration run."""

    interactive: bool = False
    dry_run: bool = False
    refresh: bool = False


@dataclass
class MigrationAction:
    """Decision recorded for one deprecated dependency."""

    dependency: str
    section: str
    action: Action
    alternative: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "dependency": self.dependency,
            "section": self.section,
            "action": self.action.value,
            "alternative": self.alternative,
        }


@dataclass
class MigrationFailure:
    """A dependency whose deprecation status could not be determined."""

    dependency: str
    section: str
    error: str

    def to_dict(self) -> dict[str, Any]:
        return {"dependency": self.dependency, "section": self.section, "error": self.error}


@dataclass
class InstallOutcome:
    """Result of the post-migration reinstall."""

    status: InstallStatus = InstallStatus.NOT_RUN
    manager: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status.value, "manager": self.manager, "error": self.error}


@dataclass
class MigrationReport:
    """Result of a migration run."""

    dry_run: bool = False
    actions: list[MigrationAction] = field(default_factory=list)
    failures: list[MigrationFailure] = field(default_factory=list)
    modified: bool = False
    manifest_written: bool = False
    install: InstallOutcome = field(default_factory=InstallOutcome)

    def count(self, action: Action) -> int:
        return sum(1 for a in self.actions if a.action is action)

    @property
    def replaced_count(self) -> int:
        return self.count(Action.REPLACED)

    @property
    def would_replace_count(self) -> int:
        return self.count(Action.WOULD_REPLACE)

    @property
    def skipped_count(self) -> int:
        return self.count(Action.SKIPPED)

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    def to_dict(self) -> dict[str, Any]:
        return {
            "dry_run": self.dry_run,
            "modified": self.modified,
            "manifest_written": self.manifest_written,
            "summary": {
                "replaced": self.replaced_count,
                "would_replace": self.would_replace_count,
                "skipped": self.skipped_count,
                "failed": self.failed_count,
            },
            "results": [a.to_dict() for a in self.actions],
            "failures": [f.to_dict() for f in self.failures],
            "install": self.install.to_dict(),
        }
