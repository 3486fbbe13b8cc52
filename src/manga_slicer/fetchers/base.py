"""Abstract base class for source image fetchers.

Enables swapping the transport (plain httpx, a browser-backed fetcher,
a local fixture loader) without touching the cache.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field


class FetchResult(BaseModel):
    """Raw bytes retrieved for a source URL."""

    content: bytes = Field(description="Full response body")
    expected_length: int | None = Field(
        default=None,
        description="Length announced by the source (Content-Length), if any",
    )
    content_type: str | None = Field(default=None, description="Announced MIME type")


class ImageFetcher(ABC):
    """Abstract interface for retrieving raw image bytes."""

    @abstractmethod
    async def fetch(self, url: str) -> FetchResult:
        """Retrieve the raw bytes for a URL.

        Args:
            url: Source image URL

        Returns:
            FetchResult with the response body

        Raises:
            FetchError: If the request fails or returns a non-success status

        """
        pass

    async def aclose(self) -> None:
        """Release any transport resources held by the fetcher."""
        return None
