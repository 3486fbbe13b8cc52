"""
Manga Slicer.

Fetches tall images (long-strip comic pages) once, caches them in memory,
and serves them back as fixed-height JPEG slices.

Usage:
    # Start server
    manga-slicer serve

    # Inspect the slice layout of an image
    manga-slicer manifest https://example.com/page.jpg

    # Show configuration
    manga-slicer info
"""

__version__ = "0.1.0"

from .server import create_app

__all__ = [
    "create_app",
]
