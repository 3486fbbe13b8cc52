"""
FastAPI application serving image slices.

Endpoints:
- GET /slice?url=<source>           slice manifest (JSON)
- GET /slice?url=<source>&index=<n> one slice (JPEG)
- GET /health                       liveness and cache size
- static files from the configured directory at /
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from loguru import logger

from .config import Settings, settings as default_settings
from .coordinator import RequestCoordinator
from .errors import InternalError, SlicerError
from .fetchers import ImageFetcher, create_fetcher
from .images import CacheJanitor, ImageStore

SLICE_CACHE_CONTROL = "public, max-age=31536000"

router = APIRouter()


@router.get("/slice")
async def get_slice(
    request: Request,
    url: str | None = Query(None, description="Source image URL"),
    index: str | None = Query(None, description="Zero-based slice index"),
):
    """
    Return the slice manifest for an image, or a single slice.

    Without index the response is the JSON manifest. With index it is the
    JPEG-encoded band, cacheable for a year.

    Example:
        GET /slice?url=https://example.com/page.jpg&index=2
    """
    coordinator: RequestCoordinator = request.app.state.coordinator
    try:
        if index is None:
            manifest = await coordinator.manifest(url)
            return JSONResponse(content=manifest.to_response())
        data = await coordinator.slice(url, index)
    except SlicerError:
        raise
    except Exception as e:
        logger.exception("Unexpected error serving {}", url)
        raise InternalError(str(e) or e.__class__.__name__) from e

    return Response(
        content=data,
        media_type="image/jpeg",
        headers={"Cache-Control": SLICE_CACHE_CONTROL},
    )


@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint."""
    store: ImageStore = request.app.state.store
    return JSONResponse(content={"status": "healthy", "cachedImages": len(store)})


async def slicer_error_handler(request: Request, exc: SlicerError) -> JSONResponse:
    """Answer a typed error with its status code and a JSON message."""
    if exc.status_code >= 500:
        logger.error("{} {}: {}", request.method, request.url.path, exc.message)
    else:
        logger.info("{} {} rejected: {}", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def create_app(
    settings: Settings | None = None,
    fetcher: ImageFetcher | None = None,
) -> FastAPI:
    """
    Build the application and its shared image store.

    Args:
        settings: Settings to use (defaults to the environment-loaded settings)
        fetcher: Source fetcher override (defaults to the HTTP fetcher)

    Returns:
        Configured FastAPI application
    """
    settings = settings or default_settings
    fetcher = fetcher or create_fetcher(
        headers=settings.fetch_headers,
        timeout=settings.fetch_timeout,
    )

    coordinator = RequestCoordinator.from_settings(settings, fetcher)
    store = coordinator.store
    janitor = CacheJanitor(store, interval=settings.cache_sweep_interval)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        janitor.start()
        logger.info(
            "Slicer ready: slice_height={}, ttl={}s, base_url={}",
            settings.slice_height,
            settings.cache_ttl,
            coordinator.base_url,
        )
        yield
        await janitor.stop()
        await store.aclose()
        await fetcher.aclose()

    app = FastAPI(
        title="manga-slicer",
        description="Serve tall images as fixed-height slices",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.janitor = janitor
    app.state.coordinator = coordinator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(SlicerError, slicer_error_handler)
    app.include_router(router)

    if settings.static_path.is_dir():
        logger.debug("Serving static files from {}", settings.static_path)
        app.mount("/", StaticFiles(directory=settings.static_path, html=True), name="static")

    return app
