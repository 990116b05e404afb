import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import error_response, validation_exception_handler
from app.api.routes import api_router
from app.core.config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pooled client per process, handed to the lookup client per request
    async with httpx.AsyncClient(
        timeout=settings.airport_api_timeout_sec,
        headers={"User-Agent": settings.airport_api_user_agent},
    ) as client:
        app.state.http_client = client
        yield


def create_app() -> FastAPI:
    logging.basicConfig(level=settings.log_level.upper())
    app = FastAPI(
        title="Airport Distance Service API",
        version="1.0.0",
        description="REST API for calculating the distance between airports",
        lifespan=lifespan,
    )
    # Credentials cannot be combined with a wildcard origin
    cors_origins = settings.cors_origins
    allow_creds = cors_origins != "*"
    if cors_origins == "*":
        cors_origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=allow_creds,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def catch_unhandled_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return error_response(500, "INTERNAL_SERVER_ERROR", "Internal server error")

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.include_router(api_router)
    return app


app = create_app()
