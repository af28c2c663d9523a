"""Tests for replacement suggestions."""

import httpx
import pytest

from conftest import SEARCH_URL, FakeNpm, ReadOnlyStore
from dep_migrate.alternatives import AlternativeFinder, first_result_name
from dep_migrate.cache import LookupCache, alt_key


class TestFirstResultName:
    def test_first_result_wins(self):
        payload = {"results": [{"package": {"name": "a"}}, {"package": {"name": "b"}}]}
        assert first_result_name(payload) == "a"

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            [],
            {},
            {"results": []},
            {"results": None},
            {"results": ["a"]},
            {"results": [{"package": None}]},
            {"results": [{"package": {"name": ""}}]},
            {"results": [{"package": {"name": 42}}]},
        ],
    )
    def test_malformed_payloads(self, payload):
        assert first_result_name(payload) is None


class TestAlternativeFinder:
    """Tests for AlternativeFinder.fetch_alternative."""

    @pytest.mark.asyncio
    async def test_suggestion(self, fake_npm: FakeNpm, finder: AlternativeFinder):
        fake_npm.alternatives["left-pad"] = "string-pad"
        assert await finder.fetch_alternative("left-pad") == "string-pad"
        assert fake_npm.search_calls == ["left-pad"]

    @pytest.mark.asyncio
    async def test_query_term(self, cache: LookupCache):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"results": []})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        await AlternativeFinder(cache, client, SEARCH_URL).fetch_alternative("left-pad")
        assert seen[0].url.params["q"] == "left-pad replacement"
        assert "q=left-pad+replacement" in str(seen[0].url)

    @pytest.mark.asyncio
    async def test_no_results_cached_as_none(
        self, fake_npm: FakeNpm, finder: AlternativeFinder, cache: LookupCache
    ):
        assert await finder.fetch_alternative("obscure") is None
        assert alt_key("obscure") in cache

        assert await finder.fetch_alternative("obscure") is None
        assert fake_npm.search_calls == ["obscure"]

    @pytest.mark.asyncio
    async def test_second_call_served_from_cache(
        self, fake_npm: FakeNpm, finder: AlternativeFinder
    ):
        fake_npm.alternatives["left-pad"] = "string-pad"
        first = await finder.fetch_alternative("left-pad")
        second = await finder.fetch_alternative("left-pad")
        assert first == second == "string-pad"
        assert fake_npm.search_calls == ["left-pad"]

    @pytest.mark.asyncio
    async def test_force_refresh_overwrites(
        self, fake_npm: FakeNpm, finder: AlternativeFinder, cache: LookupCache
    ):
        fake_npm.alternatives["left-pad"] = "string-pad"
        await finder.fetch_alternative("left-pad")
        fake_npm.alternatives["left-pad"] = "pad-start"

        assert await finder.fetch_alternative("left-pad", force_refresh=True) == "pad-start"
        assert cache.get(alt_key("left-pad")) == "pad-start"
        assert fake_npm.search_calls == ["left-pad", "left-pad"]

    @pytest.mark.asyncio
    async def test_transport_error_returns_none_uncached(
        self, fake_npm: FakeNpm, finder: AlternativeFinder, cache: LookupCache
    ):
        fake_npm.search_errors.add("left-pad")
        assert await finder.fetch_alternative("left-pad") is None
        assert alt_key("left-pad") not in cache

    @pytest.mark.asyncio
    async def test_server_error_returns_none(self, cache: LookupCache):
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        finder = AlternativeFinder(cache, httpx.AsyncClient(transport=transport), SEARCH_URL)
        assert await finder.fetch_alternative("left-pad") is None
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_invalid_json_returns_none(self, cache: LookupCache):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="nope"))
        finder = AlternativeFinder(cache, httpx.AsyncClient(transport=transport), SEARCH_URL)
        assert await finder.fetch_alternative("left-pad") is None


class TestUnwritableCache:
    @pytest.mark.asyncio
    async def test_suggestion_returned_when_cache_write_fails(self, fake_npm: FakeNpm):
        fake_npm.add("left-pad", deprecated="x", alternative="string-pad")
        finder = AlternativeFinder(LookupCache(ReadOnlyStore()), fake_npm.client(), SEARCH_URL)

        assert await finder.fetch_alternative("left-pad") == "string-pad"
