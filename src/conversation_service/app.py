from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from conversation_service.api.middleware.correlation_id import CorrelationIdMiddleware
from conversation_service.api.middleware.timing import RequestTimingMiddleware
from conversation_service.api.v1.routers import (
    conversations,
    health,
    messages,
    migrations,
)
from conversation_service.application.exceptions import (
    AppError,
    ForbiddenError,
    InvalidRangeError,
    MigrationsDisabledError,
    NotFoundError,
    UnsupportedScopeError,
    ValidationError,
)
from conversation_service.config import settings
from conversation_service.infrastructure.db.session import engine

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[AppError], int] = {
    NotFoundError: 404,
    ForbiddenError: 403,
    ValidationError: 422,
    InvalidRangeError: 400,
    UnsupportedScopeError: 501,
    MigrationsDisabledError: 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    logger.info("Conversation service starting")
    yield
    await engine.dispose()
    logger.info("Database engine disposed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Conversation Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(conversations.router)
    app.include_router(messages.router)
    app.include_router(migrations.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error(_req: Request, exc: AppError) -> JSONResponse:
        status_code = next(
            (code for err, code in _STATUS_BY_ERROR.items() if isinstance(exc, err)),
            500,
        )
        if status_code >= 500:
            logger.warning("%s: %s", type(exc).__name__, exc.detail)
        return JSONResponse(status_code=status_code, content={"detail": exc.detail})
