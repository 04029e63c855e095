"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.orm import Session
from sqlalchemy import text

from attendance.api.v1.router import api_router
from attendance.api.deps import get_db, get_store
from attendance.core import config
from attendance.core.config import settings
from attendance.core.exceptions import AttendanceError, PersistenceError, TooManyAttemptsError
from attendance.core.rate_limit import limiter
from attendance.core.logging_config import setup_logging, get_logger
from attendance.db import create_tables, get_db_context
from attendance.middleware import LoggingMiddleware
from attendance.services.persistence import load_store, save_store
from attendance.services.store import AttendanceStore

setup_logging(level=settings.LOG_LEVEL, json_logs=settings.ENVIRONMENT == "production")
logger = get_logger(__name__)

if settings.ENVIRONMENT == "production":
    settings.validate_production_config()


def build_store() -> AttendanceStore:
    return AttendanceStore(
        base_url=config.settings.PUBLIC_BASE_URL,
        otp_validity_seconds=config.settings.OTP_VALIDITY_SECONDS,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the state blob before serving and save it once more on shutdown."""
    storage_key = config.settings.STORAGE_KEY
    with get_db_context() as db:
        create_tables(db)
        app.state.store = load_store(db, build_store(), storage_key)

    logger.info(
        "application_started",
        app_title=settings.APP_TITLE,
        app_version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )
    yield

    with get_db_context() as db:
        save_store(db, app.state.store, storage_key)
    logger.info("application_stopped")


app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(AttendanceError)
async def attendance_error_handler(request: Request, exc: AttendanceError) -> JSONResponse:
    """Translate domain errors into HTTP responses."""
    body = {"detail": exc.message, "code": exc.code}

    if isinstance(exc, TooManyAttemptsError):
        body["redirect_to"] = exc.redirect_to
        body["redirect_after_seconds"] = exc.redirect_after_seconds

    if isinstance(exc, PersistenceError):
        logger.error("persistence_error", error=exc.message, error_code=exc.code)
    else:
        logger.info("request_rejected", error_code=exc.code, status_code=exc.status_code)

    return JSONResponse(status_code=exc.status_code, content=body)


# Must be added before other middleware for proper request tracking
app.add_middleware(LoggingMiddleware)


@app.middleware("http")
async def add_api_version_header(request: Request, call_next):
    """Add X-API-Version header to all responses for version tracking."""
    response = await call_next(request)
    response.headers["X-API-Version"] = settings.APP_VERSION
    return response

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,  # Required for cookies
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)

app.include_router(api_router)


@app.get("/health")
async def health_check(
    db: Session = Depends(get_db),
    store: AttendanceStore = Depends(get_store),
):
    """
    Health check endpoint.

    Returns:
        - status: "healthy" or "unhealthy"
        - store: number of sessions, active sessions and claims held in memory
        - database: connection status

    Returns 503 if database is unreachable.
    """
    sessions = store.registry.all()
    health_status = {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "store": {
            "sessions": len(sessions),
            "active_sessions": sum(1 for s in sessions if s.is_active),
            "claims": len(store.ledger),
        },
        "database": {"status": "connected"},
    }

    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["database"]["status"] = f"error: {str(e)}"
        logger.error("health_check_failed", error=str(e))
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
