"""Image fetchers package.

Provides a factory function to create the configured source fetcher.
"""

from .base import FetchResult, ImageFetcher
from .http_fetcher import HttpImageFetcher


def create_fetcher(
    fetcher_type: str = "http",
    headers: dict[str, str] | None = None,
    timeout: float = 30.0,
) -> ImageFetcher:
    """Create an image fetcher instance.

    Args:
        fetcher_type: Type of fetcher ("http")
        headers: Request headers sent to source hosts
        timeout: Request timeout in seconds

    Returns:
        Configured ImageFetcher instance

    Raises:
        ValueError: If fetcher_type is not recognized

    Example:
        >>> fetcher = create_fetcher(headers={"Referer": "https://example.com/"})
        >>> result = await fetcher.fetch("https://example.com/page-01.jpg")

    """
    if fetcher_type == "http":
        return HttpImageFetcher(headers=headers, timeout=timeout)
    else:
        raise ValueError(f"Unknown fetcher type: {fetcher_type}")


__all__ = [
    "FetchResult",
    "ImageFetcher",
    "HttpImageFetcher",
    "create_fetcher",
]
