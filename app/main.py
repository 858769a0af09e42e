"""FastAPI application factory — entry point for the content recommender."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.adapters.cache.redis import RedisCacheAdapter
from app.api.dependencies import get_cache_backend
from app.api.envelope import failure
from app.api.routes.content import router as content_router
from app.api.routes.interactions import router as interactions_router
from app.api.routes.recommendations import router as recommendations_router
from app.config import settings
from app.database import create_tables, engine
from app.domain.errors import NotFoundError, StoreUnavailableError

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown events."""
    logger.info("%s starting up...", settings.app_name)
    logger.info("Cache backend: %s", settings.cache_backend.value)
    if settings.create_tables_on_startup:
        await create_tables()
        logger.info("Database tables ensured")
    yield
    logger.info("%s shutting down...", settings.app_name)
    if get_cache_backend.cache_info().currsize:
        backend = get_cache_backend()
        if isinstance(backend, RedisCacheAdapter):
            await backend.close()
    await engine.dispose()


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return failure(status.HTTP_404_NOT_FOUND, str(exc))


async def store_unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Storage backend unavailable")


async def validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return failure(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Request validation failed",
        jsonable_encoder(exc.errors()),
    )


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title=settings.app_name,
        description="Personalized content recommendations driven by user interactions",
        version="1.0.0",
        lifespan=lifespan,
    )

    # ── Middleware ──────────────────────────────────
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Errors ─────────────────────────────────────
    application.add_exception_handler(NotFoundError, not_found_handler)
    application.add_exception_handler(StoreUnavailableError, store_unavailable_handler)
    application.add_exception_handler(RequestValidationError, validation_handler)

    # ── Routes ─────────────────────────────────────
    application.include_router(recommendations_router)
    application.include_router(interactions_router)
    application.include_router(content_router)

    # ── Health Check ───────────────────────────────
    @application.get("/health", tags=["System"])
    async def health() -> dict[str, str]:
        return {"status": "healthy", "service": "content-recommender"}

    return application


app = create_app()
