"""httpx-backed image fetcher.

Sends browser-like headers (optionally a referer and cookie) so image hosts
that gate hotlinking still answer.
"""

import httpx
from loguru import logger

from ..errors import FetchError
from .base import FetchResult, ImageFetcher


class HttpImageFetcher(ImageFetcher):
    """Fetch source images over HTTP with a shared async client."""

    def __init__(
        self,
        headers: dict[str, str] | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the fetcher.

        Args:
            headers: Request headers sent with every fetch
            timeout: HTTP request timeout in seconds
            client: Optional preconfigured client (headers/timeout are ignored)
        """
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers=headers or {},
        )
        logger.debug("HttpImageFetcher initialized: timeout={}s", timeout)

    async def fetch(self, url: str) -> FetchResult:
        """Download a URL and return its body.

        Raises:
            FetchError: On transport errors, invalid URLs or non-2xx responses

        """
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("Fetch failed with HTTP {}: {}", status, url[:80])
            raise FetchError(
                f"Failed to fetch image: {e.response.reason_phrase} ({status})"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Fetch error for {}: {}", url[:80], e)
            raise FetchError(f"Failed to fetch image: {e}") from e

        content = response.content
        logger.debug("Fetched {} bytes from {}", len(content), url[:80])
        return FetchResult(
            content=content,
            expected_length=_parse_length(response.headers.get("content-length")),
            content_type=response.headers.get("content-type"),
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()


def _parse_length(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
