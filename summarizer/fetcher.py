import asyncio
import logging
from typing import Optional

import httpx

from summarizer.errors import FetchError

logger = logging.getLogger(__name__)

FETCH_TIMEOUT_SECONDS = 10.0
FETCH_ERROR_MESSAGE = "Failed to fetch website content. Please check the URL and try again."

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
    "DNT": "1",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}


class WebsiteFetcher:
    def __init__(
        self,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = FETCH_TIMEOUT_SECONDS,
    ) -> None:
        self._transport = transport
        self._timeout = timeout

    async def fetch(self, url: str) -> str:
        """GET ``url`` once and return the decoded body."""
        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            headers=BROWSER_HEADERS,
            follow_redirects=True,
        ) as client:
            try:
                # httpx timeouts are per phase; this bounds the whole request.
                response = await asyncio.wait_for(client.get(url), self._timeout)
                response.raise_for_status()
            except asyncio.TimeoutError as exc:
                logger.warning("Fetching %s took longer than %ss", url, self._timeout)
                raise FetchError(FETCH_ERROR_MESSAGE) from exc
            except httpx.HTTPStatusError as exc:
                logger.warning(
                    "Fetching %s returned HTTP %s", url, exc.response.status_code
                )
                raise FetchError(FETCH_ERROR_MESSAGE) from exc
            except httpx.HTTPError as exc:
                logger.warning("Fetching %s failed: %s", url, exc.__class__.__name__)
                raise FetchError(FETCH_ERROR_MESSAGE) from exc
            return response.text
