from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging
import os
import traceback
from app.core.config import settings
from app.core.database import init_db
from app.core.exceptions import (
    AiPathException,
    ValidationError,
    NotFoundError,
    AuthenticationError,
)

# Import models to register them with SQLModel
from app import models  # noqa: F401

# Import API router
from app.api.v1 import api_router

logger = logging.getLogger(__name__)

# Check if we're in development mode
IS_DEVELOPMENT = os.getenv("ENVIRONMENT", "production").lower() in ("development", "dev", "local")

app = FastAPI(title="AiPath API", version="1.0.0")

# Add exception handler for validation errors to log details
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log validation errors with full details for debugging."""
    body = await request.body()
    logger.error(f"Validation error on {request.method} {request.url.path}")
    logger.error(f"Request body: {body.decode('utf-8') if body else 'empty'}")
    logger.error(f"Validation errors: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.errors(), "body": body.decode('utf-8') if body else None},
    )

# Add exception handler for custom application exceptions
@app.exception_handler(AiPathException)
async def aipath_exception_handler(request: Request, exc: AiPathException):
    """Handle precondition failures raised by the services."""
    if isinstance(exc, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, AuthenticationError):
        status_code = status.HTTP_401_UNAUTHORIZED
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    # Precondition failures are expected outcomes, not system errors
    logger.info(f"Application exception on {request.method} {request.url.path}: {type(exc).__name__}: {str(exc)}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "type": type(exc).__name__},
    )

# Add global exception handler for unhandled errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions (e.g. failed progress writes) and report them as 500."""
    # Log full traceback
    logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)

    # In development, show full error details
    if IS_DEVELOPMENT:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": str(exc),
                "type": type(exc).__name__,
                "traceback": traceback.format_exc()
            },
        )
    else:
        # In production, return generic message
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An internal server error occurred. Please try again later.",
                "type": "InternalServerError"
            },
        )

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Initialize database on startup."""
    init_db()


@app.get("/")
async def root():
    return {
        "message": "AiPath API",
        "status": "running",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc"
        }
    }


@app.get("/health")
async def health():
    return {"status": "healthy"}


# Include API router
app.include_router(api_router, prefix=settings.api_v1_prefix)
