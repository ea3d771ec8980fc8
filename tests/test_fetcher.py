import asyncio

import httpx
import pytest

from summarizer.errors import FetchError
from summarizer.fetcher import BROWSER_HEADERS, FETCH_ERROR_MESSAGE, WebsiteFetcher


@pytest.mark.asyncio
async def test_fetch_sends_browser_headers_and_returns_body():
    seen: dict[str, str] = {}

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.headers)
        return httpx.Response(200, text="<html><title>Hi</title></html>")

    fetcher = WebsiteFetcher(transport=httpx.MockTransport(handler))

    body = await fetcher.fetch("https://example.com/")

    assert body == "<html><title>Hi</title></html>"
    assert seen["user-agent"] == BROWSER_HEADERS["User-Agent"]
    assert seen["accept-language"] == "en-US,en;q=0.5"
    assert seen["dnt"] == "1"


@pytest.mark.asyncio
async def test_fetch_follows_redirects():
    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "https://example.com/new"})
        return httpx.Response(200, text="moved here")

    fetcher = WebsiteFetcher(transport=httpx.MockTransport(handler))

    assert await fetcher.fetch("https://example.com/old") == "moved here"


@pytest.mark.asyncio
async def test_fetch_raises_on_error_status():
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="missing")

    fetcher = WebsiteFetcher(transport=httpx.MockTransport(handler))

    with pytest.raises(FetchError) as excinfo:
        await fetcher.fetch("https://example.com/missing")

    assert excinfo.value.message == FETCH_ERROR_MESSAGE
    assert excinfo.value.status_code == 400


@pytest.mark.asyncio
async def test_fetch_raises_on_timeout():
    calls: list[int] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        raise httpx.ReadTimeout("too slow", request=request)

    fetcher = WebsiteFetcher(transport=httpx.MockTransport(handler))

    with pytest.raises(FetchError):
        await fetcher.fetch("https://example.com/slow")

    assert calls == [1]


@pytest.mark.asyncio
async def test_fetch_bounds_total_request_time():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1)
        return httpx.Response(200, text="too late")

    fetcher = WebsiteFetcher(transport=httpx.MockTransport(handler), timeout=0.05)

    with pytest.raises(FetchError) as excinfo:
        await fetcher.fetch("https://example.com/drip")

    assert excinfo.value.message == FETCH_ERROR_MESSAGE
