"""npm registry client.

Fetches package metadata from the registry's ``GET /<package>`` endpoint and
reads the deprecation status of the latest published version. Results are
cached under ``npmInfo:<package>``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from dep_migrate import __version__
from dep_migrate.cache import LookupCache, info_key
from dep_migrate.config import DEFAULT_REGISTRY_URL
from dep_migrate.errors import FetchError

logger = logging.getLogger(__name__)

USER_AGENT = f"dep-migrate/{__version__}"


def create_http_client(timeout: float | None = None) -> httpx.AsyncClient:
    """Create the shared async HTTP client used by the registry and search lookups."""
    return httpx.AsyncClient(
        timeout=timeout,
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        follow_redirects=True,
    )


@dataclass
class RegistryInfo:
    """Registry metadata for a package.

    The registry document is treated as untyped JSON: every field read through
    the accessors may be missing or malformed, in which case they return None.
    """

    package: str
    data: dict[str, Any]

    @property
    def latest_version(self) -> str | None:
        """The ``latest`` dist-tag, if present."""
        tags = self.data.get("dist-tags")
        if not isinstance(tags, dict):
            return None
        latest = tags.get("latest")
        return latest if isinstance(latest, str) and latest else None

    @property
    def deprecated_message(self) -> str | None:
        """Deprecation message of the latest version, or None if not deprecated."""
        latest = self.latest_version
        if latest is None:
            return None
        versions = self.data.get("versions")
        if not isinstance(versions, dict):
            return None
        manifest = versions.get(latest)
        if not isinstance(manifest, dict):
            return None
        message = manifest.get("deprecated")
        if isinstance(message, str):
            return message or None
        # Some old documents carry `deprecated: true` with no text
        return str(message) if message else None

    @property
    def is_deprecated(self) -> bool:
        return self.deprecated_message is not None

    def compact(self) -> dict[str, Any]:
        """Reduce the document to the fields dep-migrate reads.

        Full registry documents list every published version and can be
        megabytes in size, so only the latest version's entry is kept for the
        cache.
        """
        latest = self.latest_version
        compacted: dict[str, Any] = {"name": self.data.get("name", self.package)}
        if latest is None:
            return compacted
        compacted["dist-tags"] = {"latest": latest}
        versions = self.data.get("versions")
        manifest = versions.get(latest) if isinstance(versions, dict) else None
        if isinstance(manifest, dict):
            entry = {"version": latest}
            if "deprecated" in manifest:
                entry["deprecated"] = manifest["deprecated"]
            compacted["versions"] = {latest: entry}
        return compacted


class RegistryClient:
    """Client for the npm registry metadata endpoint.

    Example:
        async with create_http_client() as http:
            registry = RegistryClient(cache, http)
            info = await registry.fetch_info("left-pad")
            if info.is_deprecated:
                print(info.deprecated_message)
    """

    def __init__(
        self,
        cache: LookupCache,
        client: httpx.AsyncClient,
        registry_url: str = DEFAULT_REGISTRY_URL,
    ):
        """Initialize registry client.

        Args:
            cache: Lookup cache shared with the alternative finder.
            client: Async HTTP client. The caller owns and closes it.
            registry_url: Base URL of the registry.
        """
        self.cache = cache
        self.registry_url = registry_url.rstrip("/")
        self._client = client

    def package_url(self, package: str) -> str:
        """Metadata URL for a package; scoped names keep the ``@`` and encode ``/``."""
        return f"{self.registry_url}/{quote(package, safe='@')}"

    async def fetch_info(self, package: str, force_refresh: bool = False) -> RegistryInfo:
        """GET /<package> - registry metadata, cache-first.

        Args:
            package: Package name.
            force_refresh: Skip the cache and always query the registry.

        Returns:
            RegistryInfo for the package.

        Raises:
            FetchError: On transport errors, non-success responses, or a body
                that is not a JSON object.
        """
        key = info_key(package)
        if not force_refresh and key in self.cache:
            cached = self.cache.get(key)
            if isinstance(cached, dict):
                logger.debug(f"Registry cache hit for {package}")
                return RegistryInfo(package=package, data=cached)

        url = self.package_url(package)
        logger.debug(f"Fetching registry info for {package} from {url}")
        try:
            resp = await self._client.get(url)
        except httpx.HTTPError as e:
            raise FetchError(package, str(e) or type(e).__name__) from e

        if not resp.is_success:
            raise FetchError(package, f"registry returned HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise FetchError(package, f"invalid JSON response: {e}") from e

        if not isinstance(data, dict):
            raise FetchError(package, "registry response is not a JSON object")

        compacted = RegistryInfo(package=package, data=data).compact()
        self.cache.set(key, compacted)
        return RegistryInfo(package=package, data=compacted)
