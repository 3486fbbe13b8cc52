"""
Request orchestration.

Turns a (source URL, optional slice index) request into either a manifest
or the encoded bytes of one slice.
"""

from urllib.parse import quote

from loguru import logger

from .config import Settings
from .errors import InvalidRequest
from .fetchers import ImageFetcher
from .images import (
    ImageCodec,
    ImageStore,
    Manifest,
    SliceExtractor,
    SliceInfo,
    partition,
    slice_bounds,
)


class RequestCoordinator:
    """Glue between the HTTP layer and the image store, geometry and extractor."""

    def __init__(
        self,
        store: ImageStore,
        extractor: SliceExtractor,
        slice_height: int = 1500,
        base_url: str = "http://localhost:3001",
    ):
        if slice_height <= 0:
            raise ValueError(f"Slice height must be positive, got {slice_height}")
        self.store = store
        self.extractor = extractor
        self.slice_height = slice_height
        self.base_url = base_url.rstrip("/")

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        fetcher: ImageFetcher,
        slice_height: int | None = None,
    ) -> "RequestCoordinator":
        """
        Build a coordinator, its store and its extractor from settings.

        Args:
            settings: Cache, codec and public URL settings
            fetcher: Source fetcher the store downloads through
            slice_height: Override for settings.slice_height

        Returns:
            Configured RequestCoordinator
        """
        store = ImageStore(
            fetcher=fetcher,
            ttl=settings.cache_ttl,
            strict_content_length=settings.strict_content_length,
        )
        extractor = SliceExtractor(
            codec=ImageCodec(max_pixels=settings.max_image_pixels),
            quality=settings.jpeg_quality,
        )
        return cls(
            store=store,
            extractor=extractor,
            slice_height=slice_height or settings.slice_height,
            base_url=settings.public_base_url,
        )

    def slice_url(self, url: str, index: int) -> str:
        """Absolute URL serving one slice of a source image."""
        return f"{self.base_url}/slice?url={quote(url, safe='')}&index={index}"

    async def manifest(self, url: str | None) -> Manifest:
        """
        Describe how the image at url splits into slices.

        Raises:
            InvalidRequest: If url is missing
            FetchError: If the image cannot be retrieved
            ExtractionError: If the image cannot be decoded
        """
        url = _require_url(url)
        data = await self.store.fetch(url)
        width, height = await self.extractor.dimensions(data)

        slices = [
            SliceInfo(**band.model_dump(), url=self.slice_url(url, band.index))
            for band in partition(height, self.slice_height, width)
        ]
        logger.info("Manifest for {}: {}x{}, {} slices", url[:80], width, height, len(slices))
        return Manifest(
            original_width=width,
            original_height=height,
            slice_height=self.slice_height,
            num_slices=len(slices),
            slices=slices,
        )

    async def slice(self, url: str | None, index: int | str) -> bytes:
        """
        Return one slice of the image at url, encoded as JPEG.

        Raises:
            InvalidRequest: If url is missing or index is not an integer
            OutOfRange: If the slice starts at or below the image's bottom edge
            FetchError: If the image cannot be retrieved
            ExtractionError: If the slice cannot be extracted
        """
        url = _require_url(url)
        index = parse_index(index)
        data = await self.store.fetch(url)
        width, height = await self.extractor.dimensions(data)

        band = slice_bounds(index, height, self.slice_height, width)
        logger.info("Extracting slice {} (y: {}, height: {})", band.index, band.y, band.height)
        return await self.extractor.extract(data, band.width, band.y, band.height)


def parse_index(value: int | str) -> int:
    """Parse a slice index from a query value."""
    if isinstance(value, int):
        return value
    try:
        return int(value.strip())
    except (AttributeError, ValueError):
        raise InvalidRequest("Invalid index parameter") from None


def _require_url(url: str | None) -> str:
    if url is None or not url.strip():
        raise InvalidRequest("Missing url parameter")
    return url
