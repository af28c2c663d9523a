"""Dependency deprecation scanning."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from dep_migrate.alternatives import AlternativeFinder
from dep_migrate.errors import FetchError
from dep_migrate.models import DeprecationVerdict, ScanReport, VerdictStatus
from dep_migrate.progress import ProgressReporter
from dep_migrate.registry import RegistryClient

logger = logging.getLogger(__name__)


class DependencyScanner:
    """Classifies dependencies as deprecated, healthy, or failed.

    Lookups run one dependency at a time. A failed registry lookup marks that
    dependency as failed and the scan moves on.
    """

    def __init__(
        self,
        registry: RegistryClient,
        finder: AlternativeFinder,
        reporter: ProgressReporter | None = None,
    ):
        self.registry = registry
        self.finder = finder
        self.reporter = reporter or ProgressReporter()

    async def check(self, dependency: str, force_refresh: bool = False) -> DeprecationVerdict:
        """Check a single dependency."""
        try:
            info = await self.registry.fetch_info(dependency, force_refresh)
        except FetchError as e:
            logger.debug(str(e))
            return DeprecationVerdict(dependency, VerdictStatus.FAILED, error=e.reason)

        message = info.deprecated_message
        if message is None:
            return DeprecationVerdict(dependency, VerdictStatus.HEALTHY)

        alternative = await self.finder.fetch_alternative(dependency, force_refresh)
        return DeprecationVerdict(
            dependency, VerdictStatus.DEPRECATED, message=message, alternative=alternative
        )

    async def scan(self, dependencies: Iterable[str], force_refresh: bool = False) -> ScanReport:
        """Scan a dependency set.

        Args:
            dependencies: Dependency names; duplicates are collapsed.
            force_refresh: Bypass the lookup cache.

        Returns:
            ScanReport with one verdict per unique dependency.
        """
        report = ScanReport()
        for dependency in dict.fromkeys(dependencies):
            self.reporter.check_started(dependency)
            verdict = await self.check(dependency, force_refresh)
            report.verdicts.append(verdict)

            if verdict.status is VerdictStatus.DEPRECATED:
                self.reporter.dependency_deprecated(verdict)
            elif verdict.status is VerdictStatus.HEALTHY:
                self.reporter.dependency_healthy(dependency)
            else:
                self.reporter.dependency_failed(dependency, verdict.error or "unknown error")

        logger.info(
            f"Scanned {report.total} dependencies: {report.deprecated_count} deprecated, "
            f"{report.healthy_count} healthy, {report.failed_count} failed"
        )
        return report


async def scan(
    dependencies: Iterable[str],
    registry: RegistryClient,
    finder: AlternativeFinder,
    force_refresh: bool = False,
    reporter: ProgressReporter | None = None,
) -> ScanReport:
    """Convenience function to scan dependencies."""
    scanner = DependencyScanner(registry, finder, reporter=reporter)
    return await scanner.scan(dependencies, force_refresh)
