"""Project Task API - Main Application Module.

This module initializes the FastAPI application with configuration,
middleware, routing, error rendering and lifecycle management.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import ConfigValidator, get_config_summary, settings
from app.core.logging import configure_logging
from app.database import AsyncSessionLocal, engine
from app.exceptions.base import BaseAppException
from models import Base

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifecycle events."""
    configure_logging(settings)
    if settings.is_production:
        ConfigValidator.validate_required_settings()
    logger.info("Starting %s (%s)", settings.app_name, settings.environment.value)
    logger.debug("Configuration: %s", get_config_summary())

    # Production schemas are managed with ``alembic upgrade head``
    if settings.is_development:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created/verified")

    yield

    await engine.dispose()
    logger.info("Database connections closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Projects, members and tasks with role based access",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )

    setup_middleware(app)
    setup_exception_handlers(app)
    setup_routers(app)

    return app


def setup_middleware(app: FastAPI):
    """Configure application middleware."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


def setup_exception_handlers(app: FastAPI):
    """Configure global exception handlers."""

    @app.exception_handler(BaseAppException)
    async def app_exception_handler(request: Request, exc: BaseAppException):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_body()))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = str(exc.detail) if exc.detail else "An error occurred"
        return JSONResponse(
            status_code=exc.status_code,
            content={"status": False, "message": message, "error_code": "HTTP_ERROR"},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = []
        for error in exc.errors():
            error_dict = {
                "loc": list(error.get("loc", [])),
                "msg": str(error.get("msg", "Validation error")),
                "type": error.get("type", "value_error"),
            }
            if "input" in error:
                error_dict["input"] = str(error["input"])
            errors.append(error_dict)

        return JSONResponse(
            status_code=422,
            content={"status": False, "message": "Validation error", "details": errors},
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.exception(
            "Database error on %s %s (request %s)",
            request.method,
            request.url.path,
            getattr(request.state, "request_id", None),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "status": False,
                "message": "Internal server error",
                "error_code": "DATABASE_ERROR",
            },
        )


def setup_routers(app: FastAPI):
    """Configure application routers."""
    from app.domains.project.controller import router as project_router
    from app.domains.task.controller import router as task_router
    from app.domains.user.controller import router as user_router

    @app.get("/health")
    async def health_check():
        """Report service and database health."""
        db_status = "healthy"
        try:
            async with AsyncSessionLocal() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.warning("Health check could not reach the database")
            db_status = "unhealthy"

        payload = {
            "status": "healthy" if db_status == "healthy" else "degraded",
            "version": settings.version,
            "environment": settings.environment.value,
            "timestamp": datetime.utcnow().isoformat(),
            "services": {"database": db_status},
        }
        return JSONResponse(status_code=200 if db_status == "healthy" else 503, content=payload)

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.version,
            "docs_url": "/docs" if not settings.is_production else None,
        }

    app.include_router(user_router)
    app.include_router(project_router)
    app.include_router(task_router)


app = create_app()


def main():
    """Entry point for running the application directly."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()
