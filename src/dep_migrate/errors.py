"""Exception hierarchy for dep-migrate."""

from __future__ import annotations


class DepMigrateError(Exception):
    """Base exception for dep-migrate errors."""

    pass


class ManifestMissingError(DepMigrateError):
    """Raised when no package.json exists in the project directory."""

    pass


class ManifestFormatError(DepMigrateError):
    """Raised when package.json cannot be parsed as a JSON object."""

    pass


class FetchError(DepMigrateError):
    """Raised when registry metadata for a package cannot be fetched or parsed."""

    def __init__(self, package: str, reason: str):
        super().__init__(f"Failed to fetch info for {package}: {reason}")
        self.package = package
        self.reason = reason


class InstallError(DepMigrateError):
    """Raised when the package-manager reinstall fails."""

    def __init__(self, manager: str, reason: str, returncode: int | None = None):
        super().__init__(f"Failed to install with {manager}: {reason}")
        self.manager = manager
        self.reason = reason
        self.returncode = returncode
