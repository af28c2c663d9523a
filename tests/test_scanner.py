"""Tests for dependency scanning."""

import logging
from unittest.mock import MagicMock

import pytest

from conftest import REGISTRY_URL, SEARCH_URL, FakeNpm, ReadOnlyStore
from dep_migrate.alternatives import AlternativeFinder
from dep_migrate.cache import LookupCache
from dep_migrate.models import VerdictStatus
from dep_migrate.progress import ProgressReporter
from dep_migrate.registry import RegistryClient
from dep_migrate.scanner import DependencyScanner, scan


@pytest.fixture
def populated(fake_npm: FakeNpm) -> FakeNpm:
    fake_npm.add("left-pad", deprecated="use String#padStart", alternative="string-pad")
    fake_npm.add("request", deprecated="request has been deprecated")
    fake_npm.add("react")
    fake_npm.add("flaky")
    fake_npm.registry_errors.add("flaky")
    return fake_npm


class TestScan:
    """Tests for DependencyScanner.scan."""

    @pytest.mark.asyncio
    async def test_classifies_dependencies(
        self, populated: FakeNpm, registry: RegistryClient, finder: AlternativeFinder
    ):
        report = await scan(["left-pad", "request", "react", "flaky"], registry, finder)

        by_name = {v.dependency: v for v in report.verdicts}
        assert by_name["left-pad"].status is VerdictStatus.DEPRECATED
        assert by_name["left-pad"].message == "use String#padStart"
        assert by_name["left-pad"].alternative == "string-pad"
        assert by_name["request"].status is VerdictStatus.DEPRECATED
        assert by_name["request"].alternative is None
        assert by_name["react"].status is VerdictStatus.HEALTHY
        assert by_name["flaky"].status is VerdictStatus.FAILED
        assert by_name["flaky"].error

    @pytest.mark.asyncio
    async def test_totals_add_up(
        self, populated: FakeNpm, registry: RegistryClient, finder: AlternativeFinder
    ):
        report = await scan(["left-pad", "request", "react", "flaky", "missing"], registry, finder)
        assert report.total == 5
        assert report.deprecated_count == 2
        assert report.healthy_count == 1
        assert report.failed_count == 2
        assert report.deprecated_count + report.healthy_count + report.failed_count == report.total

    @pytest.mark.asyncio
    async def test_failure_does_not_abort(
        self, populated: FakeNpm, registry: RegistryClient, finder: AlternativeFinder
    ):
        report = await scan(["flaky", "react"], registry, finder)
        assert [v.dependency for v in report.verdicts] == ["flaky", "react"]
        assert populated.registry_calls == ["flaky", "react"]

    @pytest.mark.asyncio
    async def test_failure_reported_once(
        self, populated: FakeNpm, registry: RegistryClient, finder: AlternativeFinder, caplog
    ):
        """The reporter narrates a failed lookup; the log only carries it at debug level."""
        reporter = MagicMock(spec=ProgressReporter)
        with caplog.at_level(logging.DEBUG, logger="dep_migrate"):
            await scan(["flaky"], registry, finder, reporter=reporter)

        reporter.dependency_failed.assert_called_once()
        records = [r for r in caplog.records if r.name == "dep_migrate.scanner"]
        assert records
        assert all(r.levelno < logging.WARNING for r in records)

    @pytest.mark.asyncio
    async def test_duplicates_collapsed(
        self, populated: FakeNpm, registry: RegistryClient, finder: AlternativeFinder
    ):
        report = await scan(["left-pad", "react", "left-pad"], registry, finder)
        assert report.total == 2
        assert populated.registry_calls == ["left-pad", "react"]

    @pytest.mark.asyncio
    async def test_alternatives_only_for_deprecated(
        self, populated: FakeNpm, registry: RegistryClient, finder: AlternativeFinder
    ):
        await scan(["react", "left-pad"], registry, finder)
        assert populated.search_calls == ["left-pad"]

    @pytest.mark.asyncio
    async def test_force_refresh(
        self, populated: FakeNpm, registry: RegistryClient, finder: AlternativeFinder
    ):
        await scan(["left-pad"], registry, finder)
        await scan(["left-pad"], registry, finder)
        assert populated.registry_calls == ["left-pad"]

        await scan(["left-pad"], registry, finder, force_refresh=True)
        assert populated.registry_calls == ["left-pad", "left-pad"]
        assert populated.search_calls == ["left-pad", "left-pad"]

    @pytest.mark.asyncio
    async def test_empty_dependency_set(self, registry: RegistryClient, finder: AlternativeFinder):
        report = await scan([], registry, finder)
        assert report.total == 0
        assert report.to_dict()["results"] == []


class TestReporterHooks:
    @pytest.mark.asyncio
    async def test_hooks_called_per_outcome(
        self, populated: FakeNpm, registry: RegistryClient, finder: AlternativeFinder
    ):
        reporter = MagicMock(spec=ProgressReporter)
        scanner = DependencyScanner(registry, finder, reporter=reporter)
        await scanner.scan(["left-pad", "react", "flaky"])

        assert reporter.check_started.call_count == 3
        reporter.dependency_healthy.assert_called_once_with("react")
        reporter.dependency_deprecated.assert_called_once()
        assert reporter.dependency_deprecated.call_args.args[0].dependency == "left-pad"
        reporter.dependency_failed.assert_called_once()
        assert reporter.dependency_failed.call_args.args[0] == "flaky"


class TestScanReportJson:
    @pytest.mark.asyncio
    async def test_failed_dependencies_are_reported(
        self, populated: FakeNpm, registry: RegistryClient, finder: AlternativeFinder
    ):
        report = await scan(["left-pad", "react", "flaky"], registry, finder)
        data = report.to_dict()

        assert data["summary"] == {"total": 3, "deprecated": 1, "healthy": 1, "failed": 1}
        assert data["results"][0] == {
            "dependency": "left-pad",
            "status": "deprecated",
            "deprecated": True,
            "message": "use String#padStart",
            "alternative": "string-pad",
        }
        assert data["results"][1] == {"dependency": "react", "status": "healthy", "deprecated": False}
        assert data["results"][2]["status"] == "failed"
        assert data["results"][2]["deprecated"] is False


class TestUnwritableCache:
    """Scans complete even when the cache file cannot be written."""

    @pytest.mark.asyncio
    async def test_scan_completes(self, populated: FakeNpm):
        cache = LookupCache(ReadOnlyStore())
        registry = RegistryClient(cache, populated.client(), REGISTRY_URL)
        finder = AlternativeFinder(cache, populated.client(), SEARCH_URL)

        report = await scan(["react", "left-pad"], registry, finder)

        assert [v.status for v in report.verdicts] == [
            VerdictStatus.HEALTHY,
            VerdictStatus.DEPRECATED,
        ]
        assert report.verdicts[1].alternative == "string-pad"
