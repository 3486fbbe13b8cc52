"""Configuration management using pydantic-settings.

Loads from environment variables and .env file.
"""

import socket
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Linux; Android 10; K) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/144.0.0.0 Mobile Safari/537.36"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Attributes:
        slice_height: Height of each slice in pixels.
        cache_ttl: Seconds a fetched image stays fresh in the cache.
        cache_sweep_interval: Seconds between background sweeps of expired entries.
        base_url: Public base URL used to build slice URLs in manifests.
        render_external_url: Base URL injected by the hosting platform, used
            when base_url is not set.
        jpeg_quality: JPEG quality for encoded slices (1-100).
        max_image_pixels: Largest source image (width * height) the codec
            accepts; unset for no limit.
        fetch_timeout: HTTP timeout for source image fetching in seconds.
        fetch_user_agent: User-Agent header sent with source fetches.
        fetch_referer: Optional Referer header sent with source fetches.
        fetch_cookie: Optional Cookie header sent with source fetches.
        strict_content_length: Fail fetches whose body length differs from
            the announced Content-Length instead of only logging a warning.
        static_dir: Directory of static files served at the site root.
        cors_origins: Origins allowed by the CORS middleware.
        host: Server bind address.
        port: Server bind port.
        debug: Enable debug mode.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_json: Output logs in JSON format for production.

    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Slicing
    slice_height: int = 1500
    jpeg_quality: int = 90
    max_image_pixels: int | None = 268_402_689  # 0x3FFF * 0x3FFF

    # Cache
    cache_ttl: float = 300.0  # 5 minutes
    cache_sweep_interval: float = 60.0

    # Public URLs
    base_url: str | None = None
    render_external_url: str | None = None

    # Source fetching
    fetch_timeout: float = 30.0
    fetch_user_agent: str = DEFAULT_USER_AGENT
    fetch_referer: str | None = None
    fetch_cookie: str | None = None
    strict_content_length: bool = False  # Mismatches are only logged by default

    # Static files / CORS
    static_dir: str = "./public"
    cors_origins: list[str] = ["*"]

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def static_path(self) -> Path:
        """Return the static files directory as a Path object.

        Returns:
            Path: Resolved path to the static files directory.

        """
        return Path(self.static_dir)

    @property
    def public_base_url(self) -> str:
        """Return the base URL used for slice links, without a trailing slash.

        Prefers an explicit base_url, then the hosting platform's external URL,
        then the machine's LAN address on the configured port.

        Returns:
            str: Absolute base URL.

        """
        if self.base_url:
            return self.base_url.rstrip("/")
        if self.render_external_url:
            return self.render_external_url.rstrip("/")
        return f"http://{get_local_ip()}:{self.port}"

    @property
    def fetch_headers(self) -> dict[str, str]:
        """Return the request headers sent to source image hosts."""
        headers = {
            "User-Agent": self.fetch_user_agent,
            "Accept": "image/avif,image/webp,image/apng,image/*,*/*;q=0.8",
            "Accept-Encoding": "identity",
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
        }
        if self.fetch_referer:
            headers["Referer"] = self.fetch_referer
        if self.fetch_cookie:
            headers["Cookie"] = self.fetch_cookie
        return headers


def get_local_ip() -> str:
    """Return the first non-loopback IPv4 address, or "localhost".

    No packets are sent: connecting a UDP socket only selects the outbound
    interface.
    """
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("10.255.255.255", 1))
            address = sock.getsockname()[0]
    except OSError:
        return "localhost"
    if address.startswith("127."):
        return "localhost"
    return address


# Global settings instance
settings = Settings()
