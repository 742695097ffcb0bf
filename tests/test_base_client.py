"""Tests for the shared JSON client: caching, retry policy and error mapping."""

import asyncio
import os
import time
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from game_catalog.core.base_client import BaseWebClient
from game_catalog.core.errors import SourceUnavailable

URL = "https://api.test/v1/agents"


def make_client(session, tmp_path, use_cache=True, **options):
    options.setdefault("max_retries", 3)
    options.setdefault("initial_delay", 0.01)
    return BaseWebClient(
        session=session,
        cache_dir=str(tmp_path / "cache"),
        cache_ttl=60,
        name="test:client",
        use_cache=use_cache,
        **options
    )


@pytest.fixture
def no_sleep():
    with patch("game_catalog.core.base_client.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


class TestFetch:
    @pytest.mark.asyncio
    async def test_success_is_cached(self, tmp_path, fake_session):
        session = fake_session({URL: {"data": [1, 2]}})
        client = make_client(session, tmp_path)

        first = await client._fetch(URL)
        second = await client._fetch(URL)

        assert first == second == {"data": [1, 2]}
        assert session.urls() == [URL]
        assert os.path.exists(client._get_cache_path(URL))

    @pytest.mark.asyncio
    async def test_expired_cache_is_refetched(self, tmp_path, fake_session):
        session = fake_session({URL: {"data": []}})
        client = make_client(session, tmp_path)
        await client._fetch(URL)

        stale = time.time() - 3600
        os.utime(client._get_cache_path(URL), (stale, stale))
        await client._fetch(URL)

        assert session.urls() == [URL, URL]

    @pytest.mark.asyncio
    async def test_corrupt_cache_file_is_replaced(self, tmp_path, fake_session):
        session = fake_session({URL: {"ok": True}})
        client = make_client(session, tmp_path)
        with open(client._get_cache_path(URL), "w", encoding="utf-8") as f:
            f.write("{not json")

        assert await client._fetch(URL) == {"ok": True}
        assert session.urls() == [URL]

    @pytest.mark.asyncio
    async def test_cache_disabled(self, tmp_path, fake_session):
        session = fake_session({URL: {"ok": True}})
        client = make_client(session, tmp_path, use_cache=False)

        await client._fetch(URL)
        await client._fetch(URL)

        assert len(session.calls) == 2
        assert not (tmp_path / "cache").exists()

    @pytest.mark.asyncio
    async def test_headers_are_merged(self, tmp_path, fake_session):
        session = fake_session({URL: {}})
        client = make_client(session, tmp_path, use_cache=False)

        await client._fetch(URL, headers={"x-api-key": "secret"})

        sent = session.calls[0]["headers"]
        assert sent["x-api-key"] == "secret"
        assert "User-Agent" in sent


class TestRetryPolicy:
    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self, tmp_path, no_sleep, fake_session, fake_response):
        session = fake_session({})
        client = make_client(session, tmp_path, use_cache=False)

        with pytest.raises(SourceUnavailable) as excinfo:
            await client._fetch(URL)

        assert excinfo.value.source == "test:client"
        assert "404" in str(excinfo.value)
        assert len(session.calls) == 1
        no_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retryable_status_then_success(self, tmp_path, no_sleep, fake_session, fake_response):
        session = fake_session({URL: [fake_response(URL, status=503), fake_response(URL, payload={"ok": True})]})
        client = make_client(session, tmp_path, use_cache=False)

        assert await client._fetch(URL) == {"ok": True}
        assert len(session.calls) == 2
        assert no_sleep.await_count == 1

    @pytest.mark.asyncio
    async def test_retryable_status_exhausts_attempts(self, tmp_path, no_sleep, fake_session, fake_response):
        session = fake_session({URL: fake_response(URL, status=429)})
        client = make_client(session, tmp_path, use_cache=False, max_retries=3)

        with pytest.raises(SourceUnavailable):
            await client._fetch(URL)

        assert len(session.calls) == 3
        assert no_sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_backoff_grows_exponentially(self, tmp_path, no_sleep, fake_session, fake_response):
        session = fake_session({URL: fake_response(URL, status=502)})
        client = make_client(session, tmp_path, use_cache=False, max_retries=3, initial_delay=1.0)

        with patch("game_catalog.core.base_client.random.uniform", return_value=0.0):
            with pytest.raises(SourceUnavailable):
                await client._fetch(URL)

        assert [c.args[0] for c in no_sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_connection_error_after_retries(self, tmp_path, no_sleep, fake_session, fake_response):
        session = fake_session({URL: aiohttp.ClientConnectionError("refused")})
        client = make_client(session, tmp_path, use_cache=False, max_retries=2)

        with pytest.raises(SourceUnavailable) as excinfo:
            await client._fetch(URL)

        assert isinstance(excinfo.value.cause, aiohttp.ClientConnectionError)
        assert len(session.calls) == 2

    @pytest.mark.asyncio
    async def test_timeout_is_retried(self, tmp_path, no_sleep, fake_session, fake_response):
        session = fake_session({URL: [asyncio.TimeoutError(), fake_response(URL, payload=[1])]})
        client = make_client(session, tmp_path, use_cache=False)

        assert await client._fetch(URL) == [1]

    @pytest.mark.asyncio
    async def test_malformed_json_fails_immediately(self, tmp_path, no_sleep, fake_session, fake_response):
        body_error = ValueError("Expecting value: line 1 column 1 (char 0)")
        session = fake_session({URL: fake_response(URL, body_error=body_error)})
        client = make_client(session, tmp_path)

        with pytest.raises(SourceUnavailable) as excinfo:
            await client._fetch(URL)

        assert "malformed JSON" in str(excinfo.value)
        assert len(session.calls) == 1
        assert not os.path.exists(client._get_cache_path(URL))
