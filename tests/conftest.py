"""Pytest fixtures and configuration for manga-slicer tests.

Provides sample images, a controllable fetcher and clock, and test settings
shared by the store, coordinator, server and CLI tests.
"""

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
from loguru import logger

from manga_slicer.config import Settings

from .helpers import FakeFetcher, ManualClock, make_banded_image_bytes, make_image_bytes

# --- Temporary Directory Fixtures ---


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp)


# --- Sample Data Fixtures ---


@pytest.fixture
def tall_image_bytes() -> bytes:
    """A 200x3200 PNG with red, green and blue bands."""
    return make_banded_image_bytes()


@pytest.fixture
def exact_image_bytes() -> bytes:
    """A 120x1500 PNG, exactly one slice tall."""
    return make_image_bytes(120, 1500, color=(10, 20, 30))


# --- Collaborator Fixtures ---


@pytest.fixture
def clock() -> ManualClock:
    """A manually advanced clock."""
    return ManualClock()


@pytest.fixture
def fake_fetcher(tall_image_bytes) -> FakeFetcher:
    """Fetcher returning the tall sample image for any URL."""
    return FakeFetcher(tall_image_bytes)


@pytest.fixture
def log_messages() -> Generator[list[str], None, None]:
    """Capture loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


# --- Settings Override Fixtures ---


@pytest.fixture
def test_settings(temp_dir: Path) -> Settings:
    """Settings with a fixed public base URL and no static directory."""
    return Settings(
        base_url="http://slicer.test/",
        static_dir=str(temp_dir / "public"),
        cache_sweep_interval=3600,
    )
