"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from remotedev import __version__
from remotedev.app.api.dependencies import init_dependencies, reset_dependencies
from remotedev.app.api.v1 import reconcile_router
from remotedev.app.config import get_settings
from remotedev.app.logging import setup_logging
from remotedev.app.metrics import get_metrics_response
from remotedev.app.middleware import LoggingMiddleware
from remotedev.core.errors import RemoteDevError
from remotedev.core.logging_schema import LogEvent
from remotedev.infra import InMemoryStore, SettingsFeatureChecker, load_seed

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()

    store = InMemoryStore()
    if settings.store.seed_path:
        await load_seed(store, settings.store.seed_path)
    init_dependencies(store, SettingsFeatureChecker(settings.features))

    logger.info(
        "Starting application",
        extra={"event": LogEvent.APP_STARTED, "version": __version__},
    )

    yield

    logger.info("Shutting down application", extra={"event": LogEvent.APP_STOPPED})
    reset_dependencies()


app = FastAPI(title="Remote Development Reconciler", version=__version__, lifespan=lifespan)
app.add_middleware(LoggingMiddleware)


@app.exception_handler(RemoteDevError)
async def remotedev_error_handler(request: Request, exc: RemoteDevError) -> JSONResponse:
    """Handle RemoteDevError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


app.include_router(reconcile_router, prefix="/api/v1")


@app.get("/health")
async def health():
    return {"status": "ok", "version": __version__}


@app.get("/metrics", include_in_schema=False)
async def metrics():
    """Prometheus metrics endpoint."""
    if not get_settings().metrics.enabled:
        return JSONResponse(status_code=404, content={"detail": "Not Found"})
    return get_metrics_response()


def run() -> None:
    """Run the server with uvicorn (console script entry point)."""
    settings = get_settings()
    uvicorn.run(
        "remotedev.app.main:app",
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
    )
