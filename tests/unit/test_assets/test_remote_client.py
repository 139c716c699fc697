"""Tests for the remote mapping fetcher."""

import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from asset_preview.assets.remote_client import ACTIVITY_HEADER, USER_AGENT, RemoteMappingFetcher
from asset_preview.core.exceptions.errors import (
    RemoteFetchError,
    RemoteHttpError,
    RemoteMalformedBodyError,
    RemoteNoResponseError,
    RemoteTimeoutError,
)


def build_app() -> web.Application:
    """Create a mapping endpoint with one route per behaviour."""
    app = web.Application()
    app["requests"] = []

    async def mappings(request: web.Request) -> web.Response:
        app["requests"].append(dict(request.headers))
        return web.json_response({"__ASSET_1_2": "https://cdn.example.com/a.png", "n": 3})

    async def server_error(request: web.Request) -> web.Response:
        return web.Response(status=503, text="maintenance")

    async def not_modified(request: web.Request) -> web.Response:
        return web.Response(status=204)

    async def array(request: web.Request) -> web.Response:
        return web.json_response(["a", "b"])

    async def garbage(request: web.Request) -> web.Response:
        return web.Response(text="<html>oops</html>", content_type="text/html")

    async def slow(request: web.Request) -> web.Response:
        await asyncio.sleep(1)
        return web.json_response({})

    app.router.add_get("/mappings", mappings)
    app.router.add_get("/error", server_error)
    app.router.add_get("/empty", not_modified)
    app.router.add_get("/array", array)
    app.router.add_get("/garbage", garbage)
    app.router.add_get("/slow", slow)
    return app


class TestHeaders:
    """Tests for request headers."""

    def test_headers_without_activity(self) -> None:
        """Test that the activity header is omitted when empty."""
        headers = RemoteMappingFetcher().build_headers("")

        assert headers["Accept"] == "application/json"
        assert headers["User-Agent"] == USER_AGENT
        assert ACTIVITY_HEADER not in headers

    def test_headers_with_activity(self) -> None:
        """Test that a non-empty signal is sent."""
        headers = RemoteMappingFetcher().build_headers("v7")

        assert headers[ACTIVITY_HEADER] == "v7"


class TestFetch:
    """Tests against a local aiohttp server."""

    @pytest.mark.asyncio
    async def test_fetch_success(self) -> None:
        """Test a 200 JSON object response."""
        app = build_app()
        async with TestServer(app) as server, RemoteMappingFetcher() as fetcher:
            mapping = await fetcher.fetch(str(server.make_url("/mappings")), 2000, "v1")

        assert mapping == {"__ASSET_1_2": "https://cdn.example.com/a.png", "n": "3"}
        sent = app["requests"][0]
        assert sent["Accept"] == "application/json"
        assert sent["User-Agent"] == USER_AGENT
        assert sent[ACTIVITY_HEADER] == "v1"

    @pytest.mark.asyncio
    async def test_fetch_without_activity_header(self) -> None:
        """Test that no activity header reaches the server when unset."""
        app = build_app()
        async with TestServer(app) as server, RemoteMappingFetcher() as fetcher:
            await fetcher.fetch(str(server.make_url("/mappings")), 2000)

        assert ACTIVITY_HEADER not in app["requests"][0]

    @pytest.mark.asyncio
    async def test_http_error(self) -> None:
        """Test that a non-200 status is reported with the code."""
        async with TestServer(build_app()) as server, RemoteMappingFetcher() as fetcher:
            with pytest.raises(RemoteHttpError) as exc_info:
                await fetcher.fetch(str(server.make_url("/error")), 2000)

        assert exc_info.value.status == 503
        assert exc_info.value.details["status"] == 503

    @pytest.mark.asyncio
    async def test_other_success_status_is_error(self) -> None:
        """Test that only 200 counts as success."""
        async with TestServer(build_app()) as server, RemoteMappingFetcher() as fetcher:
            with pytest.raises(RemoteHttpError) as exc_info:
                await fetcher.fetch(str(server.make_url("/empty")), 2000)

        assert exc_info.value.status == 204

    @pytest.mark.asyncio
    async def test_array_body_is_malformed(self) -> None:
        """Test that a JSON array body is rejected."""
        async with TestServer(build_app()) as server, RemoteMappingFetcher() as fetcher:
            with pytest.raises(RemoteMalformedBodyError):
                await fetcher.fetch(str(server.make_url("/array")), 2000)

    @pytest.mark.asyncio
    async def test_non_json_body_is_malformed(self) -> None:
        """Test that an HTML body is rejected."""
        async with TestServer(build_app()) as server, RemoteMappingFetcher() as fetcher:
            with pytest.raises(RemoteMalformedBodyError):
                await fetcher.fetch(str(server.make_url("/garbage")), 2000)

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        """Test that a slow endpoint hits the timeout."""
        async with TestServer(build_app()) as server, RemoteMappingFetcher() as fetcher:
            with pytest.raises(RemoteTimeoutError):
                await fetcher.fetch(str(server.make_url("/slow")), 50)

    @pytest.mark.asyncio
    async def test_no_response(self) -> None:
        """Test that a refused connection is reported as no response."""
        server = TestServer(build_app())
        await server.start_server()
        url = str(server.make_url("/mappings"))
        await server.close()

        async with RemoteMappingFetcher() as fetcher:
            with pytest.raises(RemoteNoResponseError) as exc_info:
                await fetcher.fetch(url, 2000)

        assert isinstance(exc_info.value, RemoteFetchError)

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self) -> None:
        """Test closing twice."""
        fetcher = RemoteMappingFetcher()
        await fetcher.close()
        await fetcher.close()
