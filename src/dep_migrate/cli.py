"""CLI entry point.

Commands: ``scan``, ``migrate``, ``cache``, ``config`` and ``menu`` (the default when no
command is given). Registry and search lookups go through the persistent
lookup cache; see cache.py.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dep_migrate.config import Config, load_config

if TYPE_CHECKING:
    from dep_migrate.migrator import ConfirmCallback
    from dep_migrate.models import MigrationOptions, MigrationReport, ScanReport
    from dep_migrate.progress import ProgressReporter

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str, verbose: bool = False) -> None:
    """Configure stdlib logging on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def print_error(message: str) -> None:
    from rich.console import Console

    Console(stderr=True).print(f"[red]✗ {message}[/]")


def print_json(data: dict[str, Any]) -> None:
    print(json.dumps(data, indent=2, default=str))


def print_scan_summary(report: ScanReport) -> None:
    """Print scan totals in human-readable format.

    Args:
        report: ScanReport from the scanner.
    """
    from rich.console import Console

    console = Console()
    console.print("[bright_green]✓ Scan complete.[/]\n")
    console.print("[bold]Summary:[/]")
    console.print(f"[dim]- Total dependencies: {report.total}[/]")
    console.print(f"[bright_cyan]- Deprecated found: {report.deprecated_count}[/]")
    console.print(f"[bright_green]- Healthy: {report.healthy_count}[/]")
    if report.failed_count:
        console.print(f"[red]- Check failed: {report.failed_count}[/]")


def print_migration_summary(report: MigrationReport) -> None:
    """Print migration outcome in human-readable format.

    Args:
        report: MigrationReport from the migrator.
    """
    from rich.console import Console

    from dep_migrate.models import InstallStatus

    console = Console()

    if report.install.status is InstallStatus.INSTALLED:
        console.print("[bright_green]✓ Migration complete.[/]")
    elif report.install.status is InstallStatus.FAILED:
        console.print(
            f"[red]✗ Failed to install with {report.install.manager}: {report.install.error}[/]\n"
            "[yellow]package.json was updated; run the install manually.[/]"
        )
    elif not report.modified:
        if report.dry_run:
            console.print("[blue]Dry-run: No changes would be made.[/]")
        else:
            console.print("[blue]No deprecated dependencies migrated.[/]")

    console.print("\n[bold]Summary:[/]")
    console.print(f"[bright_green]- Replaced: {report.replaced_count}[/]")
    if report.dry_run:
        console.print(f"[bright_cyan]- Would replace: {report.would_replace_count}[/]")
    console.print(f"[dim]- Skipped: {report.skipped_count}[/]")
    if report.failed_count:
        console.print(f"[red]- Check failed: {report.failed_count}[/]")


async def _run_scan(
    names: list[str], config: Config, refresh: bool, reporter: ProgressReporter
) -> ScanReport:
    from dep_migrate.alternatives import AlternativeFinder
    from dep_migrate.cache import open_cache
    from dep_migrate.registry import RegistryClient, create_http_client
    from dep_migrate.scanner import scan

    cache = open_cache(config.cache_file)
    async with create_http_client(config.timeout) as http:
        registry = RegistryClient(cache, http, config.registry_url)
        finder = AlternativeFinder(cache, http, config.search_url)
        return await scan(names, registry, finder, force_refresh=refresh, reporter=reporter)


def cmd_scan(
    config: Config, project_dir: Path, json_output: bool = False, refresh: bool = False
) -> int:
    """Scan package.json for deprecated dependencies.

    Returns:
        Exit code (0 for success, 1 if the manifest is missing or invalid).
    """
    from rich.console import Console

    from dep_migrate.errors import DepMigrateError
    from dep_migrate.manifest import ManifestStore, dependency_names
    from dep_migrate.progress import ConsoleReporter, ProgressReporter

    try:
        manifest = ManifestStore(project_dir).read()
    except DepMigrateError as e:
        print_error(str(e))
        return 1

    reporter: ProgressReporter
    if json_output:
        reporter = ProgressReporter()
    else:
        console = Console()
        console.print("[cyan]Scanning dependencies for deprecations...[/]\n")
        reporter = ConsoleReporter(console, verb="Checking")

    report = asyncio.run(_run_scan(dependency_names(manifest), config, refresh, reporter))

    if json_output:
        print_json(report.to_dict())
    else:
        print_scan_summary(report)
    return 0


async def _run_migrate(
    project_dir: Path,
    config: Config,
    options: MigrationOptions,
    reporter: ProgressReporter,
    confirm: ConfirmCallback | None,
) -> MigrationReport:
    from dep_migrate.alternatives import AlternativeFinder
    from dep_migrate.cache import open_cache
    from dep_migrate.manifest import ManifestStore
    from dep_migrate.migrator import migrate
    from dep_migrate.registry import RegistryClient, create_http_client

    cache = open_cache(config.cache_file)
    async with create_http_client(config.timeout) as http:
        registry = RegistryClient(cache, http, config.registry_url)
        finder = AlternativeFinder(cache, http, config.search_url)
        _, report = await migrate(
            ManifestStore(project_dir),
            options,
            registry,
            finder,
            confirm=confirm,
            reporter=reporter,
        )
    return report


def cmd_migrate(
    config: Config,
    project_dir: Path,
    interactive: bool = False,
    dry_run: bool = False,
    json_output: bool = False,
    refresh: bool = False,
) -> int:
    """Replace deprecated dependencies and reinstall.

    Returns:
        Exit code (0 for success, 1 if the manifest is missing or invalid or
        the reinstall failed).
    """
    from rich.console import Console

    from dep_migrate.errors import DepMigrateError
    from dep_migrate.manifest import ManifestStore
    from dep_migrate.models import InstallStatus, MigrationOptions
    from dep_migrate.progress import ConsoleReporter, ProgressReporter

    # Fail before any network access when there is nothing to migrate
    store = ManifestStore(project_dir)
    if not store.exists():
        print_error(f"package.json not found in {project_dir}")
        return 1

    options = MigrationOptions(interactive=interactive, dry_run=dry_run, refresh=refresh)

    reporter: ProgressReporter
    if json_output:
        reporter = ProgressReporter()
        # Prompts go to stderr so stdout stays a single JSON document
        confirm = ConsoleReporter(Console(stderr=True)).confirm_replacement
    else:
        console_reporter = ConsoleReporter(Console(), verb="Migrating")
        reporter = console_reporter
        confirm = console_reporter.confirm_replacement

    try:
        report = asyncio.run(
            _run_migrate(project_dir, config, options, reporter, confirm if interactive else None)
        )
    except DepMigrateError as e:
        print_error(str(e))
        return 1

    if json_output:
        print_json(report.to_dict())
    else:
        print_migration_summary(report)

    return 1 if report.install.status is InstallStatus.FAILED else 0


def cmd_cache(config: Config, clear: bool = False, json_output: bool = False) -> int:
    """Show or clear the lookup cache."""
    from dep_migrate.cache import open_cache

    cache = open_cache(config.cache_file)
    if clear:
        try:
            cache.clear()
        except OSError as e:
            print_error(f"Could not clear cache at {config.cache_file}: {e}")
            return 1

    summary = {"path": str(config.cache_file), "cleared": clear, **cache.summary()}
    if json_output:
        print_json(summary)
        return 0

    from rich.console import Console

    console = Console()
    if clear:
        console.print(f"[green]✓[/] Cleared cache at {config.cache_file}")
    else:
        console.print(f"[bold]Cache:[/] {config.cache_file}")
        console.print(f"  Registry entries: {summary['npmInfo']}")
        console.print(f"  Replacement entries: {summary['alt']}")
    return 0


def cmd_config(
    config: Config, settings: list[str] | None = None, json_output: bool = False
) -> int:
    """Show the effective configuration, or save ``KEY=VALUE`` settings to it."""
    if settings:
        pairs: dict[str, str] = {}
        for item in settings:
            key, sep, value = item.partition("=")
            if not sep or not key:
                print_error(f"Invalid setting {item!r}: expected KEY=VALUE")
                return 1
            pairs[key.strip()] = value.strip()
        try:
            config.apply(pairs)
        except ValueError as e:
            print_error(f"Invalid setting: {e}")
            return 1
        except OSError as e:
            print_error(f"Could not save config to {config.path}: {e}")
            return 1

    data = {"path": str(config.path), **config.to_dict()}
    if json_output:
        print_json(data)
        return 0

    from rich.console import Console

    console = Console()
    if settings:
        console.print(f"[green]✓[/] Saved {config.path}")
    console.print(f"[bold]Config:[/] {config.path}")
    for key, value in config.to_dict().items():
        console.print(f"  {key} = {value}")
    return 0


def cmd_menu(config: Config, project_dir: Path) -> int:
    """Show the interactive menu and run the chosen action."""
    from dep_migrate.menu import run_menu

    selection = run_menu()
    if selection is None:
        return 0

    if selection.action == "scan":
        return cmd_scan(
            config,
            project_dir,
            json_output=selection.json_output,
            refresh=selection.refresh,
        )
    return cmd_migrate(
        config,
        project_dir,
        interactive=selection.interactive,
        dry_run=selection.dry_run,
        json_output=selection.json_output,
        refresh=selection.refresh,
    )


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--json", dest="json_output", action="store_true", help="JSON output")
    parser.add_argument(
        "--refresh-cache",
        dest="refresh",
        action="store_true",
        help="Force re-fetch package info",
    )


def main() -> int:
    """Main entry point for dep-migrate CLI.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parser = argparse.ArgumentParser(
        prog="dep-migrate",
        description="Migration assistant for deprecated npm packages",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__import__('dep_migrate').__version__}"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    parser.add_argument(
        "--config",
        type=Path,
        metavar="FILE",
        help="Config file (default: ~/.config/dep-migrate/config.toml)",
    )
    parser.add_argument(
        "--cwd",
        type=Path,
        default=None,
        metavar="DIR",
        help="Project directory containing package.json (default: current directory)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    scan_parser = subparsers.add_parser("scan", help="Scan for deprecated packages")
    _add_common_flags(scan_parser)

    migrate_parser = subparsers.add_parser("migrate", help="Migrate deprecated packages")
    migrate_parser.add_argument(
        "--interactive", action="store_true", help="Ask before replacing each package"
    )
    migrate_parser.add_argument(
        "--dry-run", action="store_true", help="Show changes without applying them"
    )
    _add_common_flags(migrate_parser)

    cache_parser = subparsers.add_parser("cache", help="Show or clear the lookup cache")
    cache_parser.add_argument("--clear", action="store_true", help="Remove all cached lookups")
    cache_parser.add_argument("--json", dest="json_output", action="store_true", help="JSON output")

    config_parser = subparsers.add_parser("config", help="Show or change settings")
    config_parser.add_argument(
        "--set",
        dest="settings",
        action="append",
        metavar="KEY=VALUE",
        help="Save a setting (repeatable), e.g. --set request_timeout=10",
    )
    config_parser.add_argument(
        "--json", dest="json_output", action="store_true", help="JSON output"
    )

    subparsers.add_parser("menu", help="Interactive menu (default)")

    args = parser.parse_args()

    config = load_config(args.config)
    setup_logging(config.log_level, verbose=args.verbose)
    project_dir = (args.cwd or Path.cwd()).resolve()

    if args.command == "scan":
        return cmd_scan(config, project_dir, json_output=args.json_output, refresh=args.refresh)

    if args.command == "migrate":
        return cmd_migrate(
            config,
            project_dir,
            interactive=args.interactive,
            dry_run=args.dry_run,
            json_output=args.json_output,
            refresh=args.refresh,
        )

    if args.command == "cache":
        return cmd_cache(config, clear=args.clear, json_output=args.json_output)

    if args.command == "config":
        return cmd_config(config, settings=args.settings, json_output=args.json_output)

    return cmd_menu(config, project_dir)


if __name__ == "__main__":
    sys.exit(main())
