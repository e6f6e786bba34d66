"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from app.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle hook."""
    settings = get_settings()
    logger.info("[startup] max_lookahead=%d rating_step=%d", settings.max_lookahead, settings.rating_step)
    yield
    logger.info("[shutdown]")


app = FastAPI(
    title="artist-shuffle",
    version="0.1.0",
    lifespan=lifespan,
)

# Routers
from app.routes_shuffle import router as shuffle_router  # noqa: E402

app.include_router(shuffle_router)


@app.get("/health")
async def health():
    """Simple health-check endpoint."""
    return JSONResponse({"status": "ok", "version": app.version})
