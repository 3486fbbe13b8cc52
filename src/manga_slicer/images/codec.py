"""
Image decoding and slice extraction.

Wraps Pillow behind the two operations the slicer needs: reading an
image's dimensions and cropping a band to JPEG.
"""

import asyncio
from io import BytesIO

from loguru import logger
from PIL import Image as PILImage

from ..errors import ExtractionError


# Same ceiling as libvips/sharp (0x3FFF * 0x3FFF)
DEFAULT_MAX_PIXELS = 268_402_689


class ImageCodec:
    """Pillow-backed decoder and JPEG encoder."""

    def __init__(self, max_pixels: int | None = DEFAULT_MAX_PIXELS):
        """
        Initialize the codec.

        Args:
            max_pixels: Largest width * height accepted, or None for no limit.
                Replaces Pillow's process-wide decompression bomb check, which
                would otherwise reject long strips at about 179M pixels.
        """
        self.max_pixels = max_pixels
        PILImage.MAX_IMAGE_PIXELS = None

    def _check_size(self, img: PILImage.Image) -> None:
        width, height = img.size
        if self.max_pixels is not None and width * height > self.max_pixels:
            raise ExtractionError(
                f"Image too large: {width}x{height} exceeds {self.max_pixels} pixels"
            )

    def dimensions(self, image_data: bytes) -> tuple[int, int]:
        """
        Read (width, height) without decoding the pixel data.

        Raises:
            ExtractionError: If the bytes are not a recognizable image or
                exceed max_pixels
        """
        try:
            with PILImage.open(BytesIO(image_data)) as img:
                self._check_size(img)
                return img.size
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(f"Could not decode image: {e}") from e

    def crop_to_jpeg(
        self,
        image_data: bytes,
        box: tuple[int, int, int, int],
        quality: int = 90,
    ) -> bytes:
        """
        Crop a region and encode it as JPEG.

        Args:
            image_data: Raw source image bytes
            box: (left, upper, right, lower) crop box
            quality: JPEG quality (1-100)

        Returns:
            Encoded JPEG bytes

        Raises:
            ExtractionError: If decoding, cropping or encoding fails
        """
        try:
            with PILImage.open(BytesIO(image_data)) as img:
                self._check_size(img)
                region = img.crop(box)
                # JPEG has no alpha or palette; flatten everything else to RGB
                if region.mode not in ("RGB", "L"):
                    region = region.convert("RGB")
                output = BytesIO()
                region.save(output, format="JPEG", quality=quality)
                return output.getvalue()
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(f"Could not extract slice: {e}") from e


class SliceExtractor:
    """Cuts bands out of source images and re-encodes them."""

    def __init__(self, codec: ImageCodec | None = None, quality: int = 90):
        """
        Initialize the extractor.

        Args:
            codec: Codec used for decoding and encoding
            quality: JPEG quality (1-100)
        """
        self.codec = codec or ImageCodec()
        self.quality = quality

    async def dimensions(self, image_data: bytes) -> tuple[int, int]:
        """Decode (width, height) in a worker thread."""
        return await asyncio.to_thread(self.codec.dimensions, image_data)

    async def extract(self, image_data: bytes, width: int, y: int, height: int) -> bytes:
        """
        Extract the band (0, y, width, height) as JPEG.

        Raises:
            ExtractionError: If the band falls outside the image or the codec fails
        """
        image_width, image_height = await self.dimensions(image_data)
        if (
            y < 0
            or height <= 0
            or width <= 0
            or width > image_width
            or y + height > image_height
        ):
            raise ExtractionError(
                f"Region (0, {y}, {width}x{height}) lies outside "
                f"{image_width}x{image_height} image"
            )

        logger.debug("Extracting band y={} height={} width={}", y, height, width)
        return await asyncio.to_thread(
            self.codec.crop_to_jpeg,
            image_data,
            (0, y, width, y + height),
            self.quality,
        )
