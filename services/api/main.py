import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from core.exceptions import AnnotationServiceError
from core.logging_config import setup_logging
from core.settings import get_settings
from services.api.exception_handlers import (
    annotation_exception_handler,
    request_validation_handler,
    unhandled_exception_handler,
)
from services.api.routes import router


def create_app() -> FastAPI:
    # Setup structured logging
    json_logging = os.getenv("JSON_LOGGING", "false").lower() in {"true", "1", "yes"}
    log_level = os.getenv("LOG_LEVEL", "INFO")
    log_file = os.getenv("LOG_FILE")
    setup_logging(
        level=log_level,
        json_format=json_logging,
        log_file=Path(log_file) if log_file else None,
    )

    settings = get_settings()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "API initialised with storage backend={backend} bucket={bucket}",
            backend=settings.storage.backend,
            bucket=settings.storage.bucket,
        )
        yield

    app = FastAPI(
        lifespan=lifespan,
        title="Annotation Workflow API",
        version="0.1.0",
        description="Case assignment, annotator progress and annotated JSON uploads",
    )

    cors_origins = settings.api.cors_origins
    logger.info(f"CORS allowed origins: {sorted(cors_origins)}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials="*" not in cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/healthz", tags=["meta"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    # Register exception handlers
    app.add_exception_handler(AnnotationServiceError, annotation_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(router)

    return app


app = create_app()


__all__ = ["app", "create_app"]


if __name__ == "__main__":
    uvicorn.run(
        "services.api.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
    )
