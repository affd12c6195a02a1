"""
FastAPI application entry point.
Challenge: Mount routes, middleware (Prometheus), map domain errors to HTTP codes.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from admin_panel.admin.bootstrap import register_catalog
from admin_panel.api.v1.router import api_router
from admin_panel.config import get_settings
from admin_panel.core.exceptions import (
    FormValidationError,
    InvalidQueryError,
    ModelNotFoundError,
    NotOrderableError,
    UnknownModelError,
)
from admin_panel.core.logging import configure_logging

logger = logging.getLogger(__name__)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ModelNotFoundError)
    async def model_not_found(request: Request, exc: ModelNotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(UnknownModelError)
    async def unknown_model(request: Request, exc: UnknownModelError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(FormValidationError)
    async def form_invalid(request: Request, exc: FormValidationError):
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": exc.errors()})

    @app.exception_handler(InvalidQueryError)
    async def invalid_query(request: Request, exc: InvalidQueryError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

    @app.exception_handler(NotOrderableError)
    async def not_orderable(request: Request, exc: NotOrderableError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    register_catalog()

    app = FastAPI(
        title=settings.app_name,
        description="Generic admin data layer: listings, forms and CRUD over SQLAlchemy models.",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Prometheus metrics at /metrics
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    _register_error_handlers(app)
    app.include_router(api_router, prefix="/api")
    logger.info("admin panel ready")
    return app


app = create_app()
