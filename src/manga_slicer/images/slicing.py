"""
Slice geometry.

Pure functions mapping image dimensions to horizontal bands. Every band is
full width; all bands are slice_height tall except possibly the last.
"""

import math

from ..errors import OutOfRange
from .base import SliceDescriptor


def count_slices(height: int, slice_height: int) -> int:
    """Number of bands needed to cover an image of the given height."""
    _check_dimensions(height, slice_height)
    return math.ceil(height / slice_height)


def partition(height: int, slice_height: int, width: int) -> list[SliceDescriptor]:
    """
    Split [0, height) into contiguous, non-overlapping bands.

    Args:
        height: Image height in pixels
        slice_height: Band height in pixels
        width: Image width, copied onto every descriptor

    Returns:
        Ordered descriptors; the last band is shorter than slice_height
        unless height is an exact multiple of it.

    Raises:
        ValueError: If height, slice_height or width is not positive
    """
    num_slices = count_slices(height, slice_height)
    return [_band(i, height, slice_height, width) for i in range(num_slices)]


def slice_bounds(index: int, height: int, slice_height: int, width: int) -> SliceDescriptor:
    """
    Descriptor for a single band.

    Raises:
        OutOfRange: If the band would start at or past the bottom of the image
        ValueError: If a dimension is not positive
    """
    _check_dimensions(height, slice_height)
    if index < 0 or index * slice_height >= height:
        raise OutOfRange("Slice index out of bounds")
    return _band(index, height, slice_height, width)


def _band(index: int, height: int, slice_height: int, width: int) -> SliceDescriptor:
    y = index * slice_height
    return SliceDescriptor(
        index=index,
        y=y,
        height=min(slice_height, height - y),
        width=width,
    )


def _check_dimensions(height: int, slice_height: int) -> None:
    if height <= 0:
        raise ValueError(f"Image height must be positive, got {height}")
    if slice_height <= 0:
        raise ValueError(f"Slice height must be positive, got {slice_height}")
