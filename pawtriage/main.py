"""
PawTriage - FastAPI Application Entry Point

Triage and escalation engine for citizen-reported dog incidents.

DESIGN PRINCIPLES:
- Rule-based scoring, no learned models
- Agent output is a recommendation; humans approve or override it
- Escalation only moves forward (normal → escalated → auto_contacted)
- Notification is best-effort; unconfigured channels never fail a run
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pawtriage.config.firebase import initialize_firestore
from pawtriage.core.exceptions import (
    IncidentNotFoundError,
    RecommendationNotFoundError,
    RecordStoreError,
    TriageStageError,
)
from pawtriage.core.settings import settings
from pawtriage.routes import health, notifications, recommendations, suggestions, triage

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# Initialize FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Triage and escalation engine for citizen-reported dog incidents",
    debug=settings.DEBUG,
)


@app.exception_handler(IncidentNotFoundError)
@app.exception_handler(RecommendationNotFoundError)
async def not_found_handler(request: Request, exc: Exception):
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


@app.exception_handler(TriageStageError)
async def triage_stage_handler(request: Request, exc: TriageStageError):
    logger.error(f"🔥 {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc), "stage": exc.stage},
    )


@app.exception_handler(RecordStoreError)
async def record_store_handler(request: Request, exc: RecordStoreError):
    logger.error(f"🔥 {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": f"Record store failure: {str(exc)}"},
    )


# Global exception handler to catch ALL exceptions
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions and log them with full traceback."""
    logger.error(
        f"🔥 GLOBAL EXCEPTION HANDLER CAUGHT EXCEPTION on {request.method} {request.url.path}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": f"Internal server error: {str(exc)}"},
    )


# Pydantic validation error handler
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Catch Pydantic validation errors and log them."""
    logger.warning(f"🔥 VALIDATION ERROR on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.errors()},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Application lifecycle events
@app.on_event("startup")
async def startup_event():
    """
    Initialize services on application startup.
    Currently: Firestore connection (skipped in mock DB mode)
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    if settings.USE_MOCK_DB:
        logger.info("USE_MOCK_DB is set, using the in-memory record store")
        return

    try:
        initialize_firestore()
    except Exception as e:
        logger.warning(f"Firestore initialization failed: {e}")
        logger.warning("The app will start but database operations may fail.")


@app.on_event("shutdown")
async def shutdown_event():
    """
    Cleanup on application shutdown.
    """
    logger.info(f"Shutting down {settings.APP_NAME}")


# Include routers
app.include_router(health.router)
app.include_router(triage.router)
app.include_router(recommendations.router)
app.include_router(suggestions.router)
app.include_router(notifications.router)


# Root endpoint
@app.get("/")
async def root():
    """
    Root endpoint - API information.
    """
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/health",
        "escalations": "/triage/escalations/run",
        "suggestions": "/suggestions",
    }
