"""Shared test doubles and sample image builders."""

import asyncio
from io import BytesIO

from PIL import Image

from manga_slicer.fetchers.base import FetchResult, ImageFetcher

SOURCE_URL = "https://cdn.example.com/chapter-1/page-01.jpg"

# Band colors of the sample tall image, one per 1500px slice
BAND_COLORS = [(255, 0, 0), (0, 255, 0), (0, 0, 255)]


class FakeFetcher(ImageFetcher):
    """In-memory fetcher that records every call."""

    def __init__(
        self,
        payload: bytes | dict[str, bytes] = b"",
        delay: float = 0.0,
        expected_length: int | None = None,
        error: Exception | None = None,
    ):
        self.payload = payload
        self.delay = delay
        self.expected_length = expected_length
        self.error = error
        self.calls: list[str] = []
        self.closed = False

    async def fetch(self, url: str) -> FetchResult:
        self.calls.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        data = self.payload[url] if isinstance(self.payload, dict) else self.payload
        return FetchResult(content=data, expected_length=self.expected_length)

    async def aclose(self) -> None:
        self.closed = True


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_image_bytes(
    width: int,
    height: int,
    color=(255, 0, 0),
    mode: str = "RGB",
    fmt: str = "PNG",
) -> bytes:
    """Encode a solid image of the given size."""
    img = Image.new(mode, (width, height), color=color)
    buffer = BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


def make_banded_image_bytes(width: int = 200, height: int = 3200, band: int = 1500) -> bytes:
    """Encode an image whose consecutive bands use the colors in BAND_COLORS."""
    img = Image.new("RGB", (width, height))
    for i, y in enumerate(range(0, height, band)):
        color = BAND_COLORS[i % len(BAND_COLORS)]
        img.paste(color, (0, y, width, min(y + band, height)))
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
