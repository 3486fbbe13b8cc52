"""
CLI for the manga slicer service.

Commands:
- serve: Start the HTTP server
- info: Show configuration
- manifest: Fetch an image and print its slice layout
"""

import asyncio

import typer
import uvicorn
from loguru import logger
from rich.console import Console
from rich.table import Table

from .config import settings
from .logging import setup_logging

app = typer.Typer(
    name="manga-slicer",
    help="HTTP service that serves tall images as fixed-height slices",
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Manga Slicer - serve tall images as fixed-height slices."""
    log_level = "DEBUG" if verbose else settings.log_level
    setup_logging(level=log_level, json_output=settings.log_json)
    logger.debug("CLI initialized with log level: {}", log_level)


@app.command()
def serve(
    host: str = typer.Option(settings.host, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(settings.port, "--port", "-p", help="Port to bind to"),
):
    """Start the slicing HTTP server."""
    from .server import create_app

    run_settings = settings.model_copy(update={"host": host, "port": port})

    logger.info("Starting slicer on {}:{}", host, port)
    console.print("[bold blue]Manga Slicer Backend[/]")
    console.print(f"Local:   http://localhost:{port}")
    if not (run_settings.base_url or run_settings.render_external_url):
        console.print(f"Network: {run_settings.public_base_url}")
    else:
        console.print(f"Public:  {run_settings.public_base_url}")
    console.print()

    uvicorn.run(
        create_app(run_settings),
        host=host,
        port=port,
        log_level=run_settings.log_level.lower(),
        log_config=None,
    )


@app.command()
def info():
    """Show configuration."""
    logger.debug("Displaying configuration")
    console.print("[bold blue]Manga Slicer Configuration[/]")

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Slice Height", f"{settings.slice_height}px")
    table.add_row("JPEG Quality", str(settings.jpeg_quality))
    table.add_row("Cache TTL", f"{settings.cache_ttl:g}s")
    table.add_row("Sweep Interval", f"{settings.cache_sweep_interval:g}s")
    table.add_row("Fetch Timeout", f"{settings.fetch_timeout:g}s")
    table.add_row("Fetch Referer", settings.fetch_referer or "[dim]none[/]")
    table.add_row("Fetch Cookie", "***" if settings.fetch_cookie else "[dim]none[/]")
    table.add_row("Strict Content-Length", str(settings.strict_content_length))
    table.add_row(
        "Max Image Pixels",
        f"{settings.max_image_pixels:,}" if settings.max_image_pixels else "[dim]unlimited[/]",
    )
    table.add_row("Static Directory", settings.static_dir)
    table.add_row("Server Host", settings.host)
    table.add_row("Server Port", str(settings.port))
    table.add_row("Public Base URL", settings.public_base_url)

    console.print(table)


@app.command()
def manifest(
    url: str = typer.Argument(..., help="Source image URL"),
    slice_height: int = typer.Option(
        settings.slice_height, "--slice-height", "-s", help="Slice height in pixels"
    ),
):
    """Fetch an image and print how it splits into slices."""
    logger.info("Building manifest for {}", url[:80])

    async def run_manifest():
        from .coordinator import RequestCoordinator
        from .fetchers import create_fetcher

        fetcher = create_fetcher(
            headers=settings.fetch_headers,
            timeout=settings.fetch_timeout,
        )
        coordinator = RequestCoordinator.from_settings(
            settings, fetcher, slice_height=slice_height
        )
        try:
            return await coordinator.manifest(url)
        finally:
            await coordinator.store.aclose()
            await fetcher.aclose()

    from .errors import SlicerError

    try:
        result = asyncio.run(run_manifest())
    except SlicerError as e:
        logger.error("Manifest failed: {}", e.message)
        console.print(f"[red]Error: {e.message}[/]")
        raise typer.Exit(1)

    console.print(
        f"\n[bold]{result.original_width}x{result.original_height}[/] "
        f"-> {result.num_slices} slices of {result.slice_height}px\n"
    )
    table = Table(title="Slices")
    table.add_column("Index", style="cyan")
    table.add_column("Y", style="green")
    table.add_column("Height", style="green")
    table.add_column("URL")
    for s in result.slices:
        table.add_row(str(s.index), str(s.y), str(s.height), s.url)
    console.print(table)


if __name__ == "__main__":
    app()
