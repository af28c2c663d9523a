"""Replacement suggestions for deprecated packages.

Queries the npms.io search API with ``"<package> replacement"`` and takes the
first hit. This is a best-effort heuristic: the suggestion is not ranked or
checked for compatibility.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from dep_migrate.cache import LookupCache, alt_key
from dep_migrate.config import DEFAULT_SEARCH_URL

logger = logging.getLogger(__name__)


def first_result_name(payload: Any) -> str | None:
    """Extract ``results[0].package.name`` from a search response, if present."""
    if not isinstance(payload, dict):
        return None
    results = payload.get("results")
    if not isinstance(results, list) or not results:
        return None
    first = results[0]
    if not isinstance(first, dict):
        return None
    package = first.get("package")
    if not isinstance(package, dict):
        return None
    name = package.get("name")
    return name if isinstance(name, str) and name else None


class AlternativeFinder:
    """Look up a suggested replacement package name."""

    def __init__(
        self,
        cache: LookupCache,
        client: httpx.AsyncClient,
        search_url: str = DEFAULT_SEARCH_URL,
    ):
        self.cache = cache
        self.search_url = search_url
        self._client = client

    async def fetch_alternative(self, package: str, force_refresh: bool = False) -> str | None:
        """Return a suggested replacement for package, or None.

        Never raises. A search that returns no results is cached as None; a
        failed search is not cached so the next run tries again.
        """
        key = alt_key(package)
        if not force_refresh and key in self.cache:
            logger.debug(f"Alternative cache hit for {package}")
            cached = self.cache.get(key)
            return cached if isinstance(cached, str) else None

        try:
            resp = await self._client.get(self.search_url, params={"q": f"{package} replacement"})
            resp.raise_for_status()
            payload = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Replacement search failed for {package}: {e}")
            return None

        suggestion = first_result_name(payload)
        self.cache.set(key, suggestion)
        return suggestion
