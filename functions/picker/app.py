"""
FastAPI application entry point for the picker backend.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from picker.config import get_settings
from picker.errors import PickerError
from picker.routes import router
from picker.schemas import HealthResponse

logger = logging.getLogger(__name__)

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


def _error_response(error: PickerError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code, content=error.as_dict(), headers=CORS_HEADERS
    )


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title="Restaurant Picker Backend", version="0.1.0")

    @app.middleware("http")
    async def allow_any_origin(request: Request, call_next):
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=500,
                content={"error": "Internal server error"},
                headers=CORS_HEADERS,
            )
        response.headers.setdefault("Access-Control-Allow-Origin", "*")
        return response

    @app.exception_handler(PickerError)
    async def handle_picker_error(request: Request, exc: PickerError):
        if exc.status_code >= 500:
            logger.error(
                "%s %s failed: %s (%s)",
                request.method, request.url.path, exc.message, exc.details,
            )
        return _error_response(exc)

    @app.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse(status="ok")

    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
