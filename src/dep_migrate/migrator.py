"""Migration of deprecated dependencies to suggested replacements.

A migration run:

1. Reads package.json once.
2. Walks ``dependencies`` then ``devDependencies`` in stored order, checking
   each name against the registry one at a time.
3. For each deprecated dependency, looks up a replacement, optionally asks the
   operator, and replaces the entry in an in-memory copy of the manifest
   (``"<replacement>": "latest"`` in the same section).
4. If anything changed and this is not a dry run, writes the whole manifest
   once and reinstalls with the detected package manager.

A dependency listed in both sections is processed once per section.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from dep_migrate.alternatives import AlternativeFinder
from dep_migrate.errors import FetchError, InstallError
from dep_migrate.manifest import SECTIONS, ManifestStore
from dep_migrate.models import (
    Action,
    InstallOutcome,
    InstallStatus,
    MigrationAction,
    MigrationFailure,
    MigrationOptions,
    MigrationReport,
)
from dep_migrate.package_manager import detect_package_manager, run_install
from dep_migrate.progress import ProgressReporter
from dep_migrate.registry import RegistryClient

logger = logging.getLogger(__name__)

REPLACEMENT_VERSION = "latest"

# (dependency, alternative) -> operator accepted
ConfirmCallback = Callable[[str, str | None], Awaitable[bool]]
Installer = Callable[[str, Path], None]


class Migrator:
    """Decides and applies replacements for deprecated dependencies."""

    def __init__(
        self,
        registry: RegistryClient,
        finder: AlternativeFinder,
        confirm: ConfirmCallback | None = None,
        reporter: ProgressReporter | None = None,
    ):
        """Initialize the migrator.

        Args:
            registry: Registry client used for deprecation checks.
            finder: Alternative finder used for replacement suggestions.
            confirm: Awaited once per deprecated dependency in interactive
                mode; returns True to accept the replacement.
            reporter: Progress narration hooks.
        """
        self.registry = registry
        self.finder = finder
        self.confirm = confirm
        self.reporter = reporter or ProgressReporter()

    async def plan(
        self, manifest: dict[str, Any], options: MigrationOptions
    ) -> tuple[dict[str, Any], MigrationReport]:
        """Compute and apply replacements to a copy of manifest.

        The input manifest is never mutated. With ``dry_run`` the returned
        manifest equals the input.

        Returns:
            (mutated manifest, report)
        """
        if options.interactive and self.confirm is None:
            raise ValueError("interactive migration requires a confirm callback")

        result = copy.deepcopy(manifest)
        report = MigrationReport(dry_run=options.dry_run)

        for section in SECTIONS:
            deps = result.get(section)
            if not isinstance(deps, dict):
                continue

            # Snapshot: replacements mutate the section while we walk it
            for dependency in list(deps):
                await self._process(deps, section, dependency, options, report)

        return result, report

    async def _process(
        self,
        deps: dict[str, Any],
        section: str,
        dependency: str,
        options: MigrationOptions,
        report: MigrationReport,
    ) -> None:
        self.reporter.check_started(dependency)
        try:
            info = await self.registry.fetch_info(dependency, options.refresh)
        except FetchError as e:
            logger.debug(f"Migration check failed for {dependency}: {e.reason}")
            report.failures.append(MigrationFailure(dependency, section, e.reason))
            self.reporter.dependency_failed(dependency, e.reason)
            return

        if not info.is_deprecated:
            self.reporter.dependency_healthy(dependency)
            return

        alternative = await self.finder.fetch_alternative(dependency, options.refresh)

        do_replace = True
        if options.interactive and self.confirm is not None:
            self.reporter.check_finished(dependency)
            do_replace = await self.confirm(dependency, alternative)

        if do_replace and alternative:
            if options.dry_run:
                action = MigrationAction(dependency, section, Action.WOULD_REPLACE, alternative)
            else:
                action = MigrationAction(dependency, section, Action.REPLACED, alternative)
                del deps[dependency]
                deps[alternative] = REPLACEMENT_VERSION
                report.modified = True
                logger.info(f"Replaced {dependency} with {alternative} in {section}")
        else:
            action = MigrationAction(dependency, section, Action.SKIPPED)

        report.actions.append(action)
        self.reporter.action_recorded(action)


def reinstall(project_dir: Path, installer: Installer = run_install) -> InstallOutcome:
    """Detect the package manager and reinstall, never raising."""
    manager = detect_package_manager(project_dir)
    try:
        installer(manager, project_dir)
    except InstallError as e:
        # The manifest is already written; leave it and report the failure
        logger.error(f"{e}. package.json was updated but dependencies are not installed.")
        return InstallOutcome(InstallStatus.FAILED, manager=manager, error=e.reason)
    return InstallOutcome(InstallStatus.INSTALLED, manager=manager)


async def migrate(
    store: ManifestStore,
    options: MigrationOptions,
    registry: RegistryClient,
    finder: AlternativeFinder,
    confirm: ConfirmCallback | None = None,
    reporter: ProgressReporter | None = None,
    installer: Installer = run_install,
) -> tuple[dict[str, Any], MigrationReport]:
    """Run a full migration: read, plan, write, reinstall.

    Raises:
        ManifestMissingError: If package.json is missing.
        ManifestFormatError: If package.json is not a JSON object.
    """
    manifest = store.read()
    migrator = Migrator(registry, finder, confirm=confirm, reporter=reporter)
    result, report = await migrator.plan(manifest, options)

    if report.modified and not options.dry_run:
        store.write(result)
        report.manifest_written = True
        report.install = reinstall(store.project_dir, installer)

    return result, report
