"""Pytest configuration for dep-migrate tests."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from dep_migrate.alternatives import AlternativeFinder
from dep_migrate.cache import LookupCache, MemoryStore
from dep_migrate.registry import RegistryClient

REGISTRY_URL = "https://registry.test"
SEARCH_URL = "https://search.test/v2/search"


def registry_doc(
    name: str, latest: str = "1.0.0", deprecated: str | None = None
) -> dict[str, Any]:
    """Minimal registry document for a package."""
    version: dict[str, Any] = {"name": name, "version": latest}
    if deprecated is not None:
        version["deprecated"] = deprecated
    return {
        "name": name,
        "dist-tags": {"latest": latest},
        "versions": {"0.9.0": {"name": name, "version": "0.9.0"}, latest: version},
    }


class FakeNpm:
    """In-process stand-in for the npm registry and npms.io search API.

    Served through httpx.MockTransport; records every request it sees.
    """

    def __init__(self) -> None:
        self.packages: dict[str, dict[str, Any]] = {}
        self.alternatives: dict[str, str | None] = {}
        self.registry_errors: set[str] = set()
        self.search_errors: set[str] = set()
        self.registry_calls: list[str] = []
        self.search_calls: list[str] = []

    def add(
        self, name: str, deprecated: str | None = None, alternative: str | None = None
    ) -> None:
        self.packages[name] = registry_doc(name, deprecated=deprecated)
        if alternative is not None:
            self.alternatives[name] = alternative

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "registry.test":
            name = request.url.path[1:]
            self.registry_calls.append(name)
            if name in self.registry_errors:
                raise httpx.ConnectError("connection refused", request=request)
            if name not in self.packages:
                return httpx.Response(404, json={"error": "Not found"})
            return httpx.Response(200, json=self.packages[name])

        query = request.url.params.get("q", "")
        name = query.removesuffix(" replacement")
        self.search_calls.append(name)
        if name in self.search_errors:
            raise httpx.ConnectError("connection refused", request=request)
        alternative = self.alternatives.get(name)
        results = [{"package": {"name": alternative}}] if alternative else []
        return httpx.Response(200, json={"total": len(results), "results": results})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport)


class ReadOnlyStore(MemoryStore):
    """Cache store whose writes fail, like a cache file in a read-only directory."""

    def write(self, data: dict[str, Any]) -> None:
        raise PermissionError(13, "Permission denied")


@pytest.fixture
def fake_npm() -> FakeNpm:
    return FakeNpm()


@pytest.fixture
def cache_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def cache(cache_store: MemoryStore) -> LookupCache:
    return LookupCache(cache_store)


@pytest.fixture
def registry(fake_npm: FakeNpm, cache: LookupCache) -> RegistryClient:
    return RegistryClient(cache, fake_npm.client(), REGISTRY_URL)


@pytest.fixture
def finder(fake_npm: FakeNpm, cache: LookupCache) -> AlternativeFinder:
    return AlternativeFinder(cache, fake_npm.client(), SEARCH_URL)
