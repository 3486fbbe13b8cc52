"""
Data models for image caching and slicing.

Provides Pydantic models for cache entries, slice descriptors and manifests.
"""

from pydantic import BaseModel, ConfigDict, Field


class CacheEntry(BaseModel):
    """Raw bytes of a fetched source image."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(description="Source URL the bytes were fetched from")
    data: bytes = Field(description="Raw (undecoded) image bytes")
    stored_at: float = Field(description="Clock reading when the entry was stored")

    def age(self, now: float) -> float:
        """Seconds elapsed since the entry was stored."""
        return now - self.stored_at


class SliceDescriptor(BaseModel):
    """A horizontal, full-width band of an image."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0, description="Zero-based slice position")
    y: int = Field(ge=0, description="Vertical offset of the band's top edge")
    height: int = Field(gt=0, description="Band height in pixels")
    width: int = Field(gt=0, description="Band width in pixels")

    @property
    def box(self) -> tuple[int, int, int, int]:
        """Crop box as (left, upper, right, lower)."""
        return (0, self.y, self.width, self.y + self.height)


class SliceInfo(SliceDescriptor):
    """A slice descriptor with the absolute URL serving it."""

    url: str = Field(description="Absolute URL of the encoded slice")


class Manifest(BaseModel):
    """How an image splits into slices and where to fetch each one."""

    original_width: int = Field(serialization_alias="originalWidth")
    original_height: int = Field(serialization_alias="originalHeight")
    slice_height: int = Field(serialization_alias="sliceHeight")
    num_slices: int = Field(serialization_alias="numSlices")
    slices: list[SliceInfo] = Field(default_factory=list)

    def to_response(self) -> dict:
        """Serialize with the camelCase field names clients expect."""
        return self.model_dump(by_alias=True)
