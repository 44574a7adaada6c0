from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, OperationalError
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.database import Base, engine
from app.config import settings
from app import models  # noqa: F401 - register all models with Base.metadata
from app.limits import limiter, RateLimitExceeded, SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import logging

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


from app.routers import (
    properties,
    favorites,
    market_insights,
    user,
    webhooks,
)

app = FastAPI(title="HomeScout API")

# CORS (permissive for development; tighten in production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate limiting middleware and handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


def error_response(status_code: int, error: str, details=None, headers=None) -> JSONResponse:
    """Every failure leaves the API as ``{"error": ..., "details": ...}``."""
    content = {"error": error}
    if details is not None:
        content["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(
        exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(
        status.HTTP_400_BAD_REQUEST, "Invalid request", details=exc.errors()
    )


# Database error handler
@app.exception_handler(OperationalError)
async def database_operational_error_handler(request: Request, exc: OperationalError):
    """Handle database connection/operation errors"""
    logger.error(f"Database operational error: {exc}", exc_info=True)
    error_msg = str(exc).lower()

    if "could not connect" in error_msg or "connection" in error_msg:
        return error_response(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Database connection error. Please try again.",
        )
    elif "timeout" in error_msg:
        return error_response(
            status.HTTP_504_GATEWAY_TIMEOUT,
            "Database query timeout. Please try again.",
        )

    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error occurred", details=str(exc)
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Handle general SQLAlchemy errors"""
    logger.error(f"Database error: {exc}", exc_info=True)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error occurred", details=str(exc)
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", details=str(exc)
    )


# Note: In production, manage the schema outside the app
# Only create tables if using SQLite (for local dev), not for PostgreSQL
if settings.DATABASE_URL.startswith("sqlite"):
    Base.metadata.create_all(bind=engine)


@app.get("/healthy", status_code=status.HTTP_200_OK)
def health_check():
    return {"status": "Healthy"}


app.include_router(properties.router)
app.include_router(favorites.router)
app.include_router(market_insights.router)
app.include_router(user.router)
app.include_router(webhooks.router)
