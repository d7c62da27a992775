"""
Tests for LottieFilesClient.

Test coverage:
- Missing credential fails before any network I/O
- Request shape (endpoint, params, bearer header)
- Retry on non-success status and transport errors
- 404 surfaces as ProviderNotFound
- Session ownership
"""

import asyncio

import aiohttp
import pytest

from asset_pipeline.common.exceptions import (
    ConfigurationError,
    ProviderNotFound,
    ProviderRequestFailed,
)
from asset_pipeline.provider import LottieFilesClient

BASE = "https://api.test/v2"


def make_client(session, api_key="key-1"):
    return LottieFilesClient(api_key=api_key, base_url=BASE + "/", session=session)


class TestClientCredential:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("api_key", [None, "", "   "])
    async def test_missing_key_fails_before_io(self, make_session, make_response, api_key):
        session = make_session([make_response(200, {"data": []})])
        client = make_client(session, api_key=api_key)

        with pytest.raises(ConfigurationError):
            await client.search("fire")
        with pytest.raises(ConfigurationError):
            await client.fetch_detail("abc")

        assert session.calls == []


class TestClientRequests:
    @pytest.mark.asyncio
    async def test_search_request_shape(self, make_session, make_response):
        session = make_session([make_response(200, {"data": [{"id": 1}]})])
        client = make_client(session)

        body = await client.search("fire ball", page=2, page_size=10)

        assert body == {"data": [{"id": 1}]}
        url, kwargs = session.calls[0]
        assert url == f"{BASE}/animations"
        assert kwargs["params"] == {"query": "fire ball", "page": "2", "per_page": "10"}
        assert kwargs["headers"] == {"Authorization": "Bearer key-1"}

    @pytest.mark.asyncio
    async def test_detail_id_is_path_encoded(self, make_session, make_response):
        session = make_session([make_response(200, {"id": "a/b"})])
        client = make_client(session)

        await client.fetch_detail("a/b")

        assert session.calls[0][0] == f"{BASE}/animations/a%2Fb"

    @pytest.mark.asyncio
    async def test_empty_body_is_empty_dict(self, make_session, make_response):
        session = make_session([make_response(200, b"")])
        assert await make_client(session).fetch_detail("abc") == {}


class TestClientRetry:
    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self, make_session, make_response, no_sleep):
        session = make_session(
            [make_response(500, "oops"), make_response(200, {"data": []})]
        )

        assert await make_client(session).search("fire") == {"data": []}
        assert len(session.calls) == 2
        no_sleep.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_exhausted_status_failure(self, make_session, make_response, no_sleep):
        session = make_session([make_response(503, "unavailable")])

        with pytest.raises(ProviderRequestFailed) as exc_info:
            await make_client(session).search("fire")

        assert exc_info.value.status == 503
        assert exc_info.value.body == "unavailable"
        assert len(session.calls) == 3

    @pytest.mark.asyncio
    async def test_not_found(self, make_session, make_response, no_sleep):
        session = make_session([make_response(404, "no such animation")])

        with pytest.raises(ProviderNotFound) as exc_info:
            await make_client(session).fetch_detail("missing")

        assert exc_info.value.http_status == 404
        assert len(session.calls) == 3

    @pytest.mark.asyncio
    async def test_transport_error_wrapped(self, make_session, no_sleep):
        session = make_session([aiohttp.ClientConnectionError("reset")])

        with pytest.raises(ProviderRequestFailed) as exc_info:
            await make_client(session).search("fire")

        assert isinstance(exc_info.value.cause, aiohttp.ClientConnectionError)
        assert len(session.calls) == 3

    @pytest.mark.asyncio
    async def test_timeout_wrapped(self, make_session, no_sleep):
        session = make_session([asyncio.TimeoutError()])

        with pytest.raises(ProviderRequestFailed):
            await make_client(session).fetch_detail("abc")

    @pytest.mark.asyncio
    async def test_non_json_body(self, make_session, make_response, no_sleep):
        session = make_session([make_response(200, "<html>")])

        with pytest.raises(ProviderRequestFailed, match="non-JSON"):
            await make_client(session).search("fire")


class TestClientSession:
    @pytest.mark.asyncio
    async def test_shared_session_not_closed(self, make_session, make_response):
        session = make_session([make_response(200, {})])

        async with make_client(session) as client:
            await client.search("fire")

        assert session.closed is False

    @pytest.mark.asyncio
    async def test_owned_session_closed(self):
        client = LottieFilesClient(api_key="k", base_url=BASE)

        async with client:
            session = client._session
            assert session is not None

        assert session.closed
        assert client._session is None
