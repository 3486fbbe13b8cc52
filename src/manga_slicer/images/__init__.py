"""
Image caching and slicing package.

Provides the source image store, slice geometry, extraction and cache
maintenance.
"""

from .base import CacheEntry, Manifest, SliceDescriptor, SliceInfo
from .codec import ImageCodec, SliceExtractor
from .janitor import CacheJanitor
from .slicing import count_slices, partition, slice_bounds
from .store import ImageStore

__all__ = [
    "CacheEntry",
    "Manifest",
    "SliceDescriptor",
    "SliceInfo",
    "ImageCodec",
    "SliceExtractor",
    "CacheJanitor",
    "ImageStore",
    "count_slices",
    "partition",
    "slice_bounds",
]
