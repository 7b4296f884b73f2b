from __future__ import annotations

import time
from functools import lru_cache

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from trackgen.api import router as api_router
from trackgen.config import settings
from trackgen.container import get_preset_repo, get_track_service
from trackgen.logging_utils import get_logger


logger = get_logger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="trackgen", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    @app.middleware("http")
    async def log_http_requests(request: Request, call_next):
        """Centralized logging for all HTTP requests."""
        start = time.monotonic()
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration = time.monotonic() - start
            client_host = request.client.host if request.client else "unknown"
            status_code = response.status_code if response is not None else 500
            logger.info(
                "HTTP %s %s from %s -> %d in %.3fs",
                request.method,
                request.url.path,
                client_host,
                status_code,
                duration,
            )

    app.include_router(api_router)

    @app.on_event("startup")
    async def on_startup() -> None:
        # Force-init singletons so that failures surface at startup.
        presets = get_preset_repo()
        service = get_track_service()
        logger.info(
            "Services initialized (presets=%d, track_service=%s, rate=%dHz, channels=%d)",
            len(presets.list_presets()),
            type(service).__name__,
            settings.sample_rate_hz,
            settings.num_channels,
        )

    return app


@lru_cache(maxsize=1)
def get_app() -> FastAPI:
    return create_app()


app = get_app()
