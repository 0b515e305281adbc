"""
Ad Creative Optimizer - FastAPI Application Entry Point
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from adcreative.core.config import settings
from adcreative.core.deps import close_clients
from adcreative.core.logging_config import setup_logging
from adcreative.api.v1 import api_router
from adcreative.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT})")
    
    # Initialize scheduler if enabled
    if settings.SCHEDULER_ENABLED:
        from adcreative.tasks.scheduler import start_scheduler
        start_scheduler()
    
    yield
    
    # Shutdown
    if settings.SCHEDULER_ENABLED:
        from adcreative.tasks.scheduler import stop_scheduler
        stop_scheduler()
    
    close_clients()
    logger.info(f"Shutting down {settings.APP_NAME}")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Wrap HTTP errors in the standard response envelope"""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """422 with the field errors under detail"""
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error="Invalid request",
            detail=jsonable_encoder(exc.errors()),
        ).model_dump(exclude_none=True),
    )


def create_app() -> FastAPI:
    """Create FastAPI application"""
    setup_logging()
    
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Explore/exploit optimization of generated ad creatives",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )
    
    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    
    # Include API routers
    app.include_router(api_router)
    
    return app


# Create app instance
app = create_app()
