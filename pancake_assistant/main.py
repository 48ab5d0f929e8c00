"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pancake_assistant.api import history, preferences, recipes, recommendations, statistics
from pancake_assistant.config import get_settings
from pancake_assistant.database import init_db
from pancake_assistant.exceptions import (
    ConstraintViolation,
    DomainError,
    InvalidInput,
    NotFound,
    SessionStateError,
    StoreUnavailable,
)
from pancake_assistant.services.locks import KeyedLocks

settings = get_settings()
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    NotFound: status.HTTP_404_NOT_FOUND,
    ConstraintViolation: status.HTTP_409_CONFLICT,
    SessionStateError: status.HTTP_409_CONFLICT,
    InvalidInput: 422,
    StoreUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()
    app.state.key_locks = KeyedLocks()
    logger.info(f"Pancake assistant started ({settings.environment})")
    yield


app = FastAPI(
    title="Pancake Assistant API",
    description="Pancake cooking assistant that learns cook times from your ratings",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Translate domain errors into JSON responses."""
    status_code = next(
        (code for error, code in ERROR_STATUS.items() if isinstance(exc, error)),
        status.HTTP_400_BAD_REQUEST,
    )
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(status_code=status_code, content={"detail": exc.detail})


# Register routers
app.include_router(recipes.router)
app.include_router(recommendations.router)
app.include_router(history.router)
app.include_router(statistics.router)
app.include_router(preferences.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
