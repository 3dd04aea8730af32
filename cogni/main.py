"""
Cognitive Literacy Platform

FastAPI application entry point.
"""

import asyncio
from contextlib import asynccontextmanager, suppress
from typing import AsyncGenerator

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cogni.ai.advisor import AdvisoryService
from cogni.api.middleware.request_id import RequestIdMiddleware
from cogni.api.v1 import router as api_v1_router
from cogni.config import get_settings
from cogni.database import async_session_maker, close_db, init_db
from cogni.domain.errors import (
    CogniError,
    DuplicateEmailError,
    GradeConflictError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
)
from cogni.kernel.store.document_store import SqlDocumentStore
from cogni.logging_config import configure_logging, get_logger
from cogni.schemas.common import HealthResponse
from cogni.services.platform import LearningPlatform
from cogni.services.sweeper import run_session_sweeper

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Builds the platform over the SQL document store unless one was
    installed on app.state beforehand, and runs the session sweeper
    until shutdown.
    """
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )

    logger.info("Starting %s v%s", settings.project_name, settings.version)
    if getattr(app.state, "platform", None) is None:
        await init_db()
        logger.info("Database initialized")
        app.state.platform = await LearningPlatform(
            SqlDocumentStore(async_session_maker),
            advisor=AdvisoryService(),
            seed_demo=settings.seed_demo_content,
        ).load()

    sweeper = asyncio.create_task(
        run_session_sweeper(app.state.platform, settings.session_sweep_interval_seconds)
    )
    logger.info("Session sweeper started")

    yield

    logger.info("Shutting down...")
    sweeper.cancel()
    with suppress(asyncio.CancelledError):
        await sweeper
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.project_name,
    description="""
    Cognitive Literacy Platform - assessment and progression engine.

    ## Features

    - **Placement**: first exam assigns the starting level
    - **Content library**: level-gated text, video and scenario items
    - **Exams**: timed sessions, automatic MCQ scoring, manual grading queue
    - **Scenarios**: branching decision walks with per-choice feedback
    - **Admin**: alerts and platform analytics
    """,
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# Middleware order: LAST added = OUTERMOST
_cors_origins = [
    "http://localhost:3000",
    "http://localhost:5173",  # Vite default
    "http://127.0.0.1:3000",
]

app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_status(exc: CogniError) -> int:
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, (GradeConflictError, DuplicateEmailError)):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, InvalidInputError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, PermissionDeniedError):
        return status.HTTP_403_FORBIDDEN
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _request_id_headers(request: Request) -> dict:
    req_id = getattr(request.state, "request_id", None)
    return {"X-Request-ID": req_id} if req_id else {}


@app.exception_handler(CogniError)
async def cogni_exception_handler(request: Request, exc: CogniError):
    """Map the platform error taxonomy onto HTTP status codes."""
    status_code = _error_status(exc)
    if status_code >= 500:
        logger.exception("Unhandled platform error: %s", exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "code": type(exc).__name__},
        headers=_request_id_headers(request),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    headers = {**(exc.headers or {}), **_request_id_headers(request)}
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": "Validation error", "errors": errors},
        headers=_request_id_headers(request),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception("Unhandled exception: %s", exc)
    req_id = getattr(request.state, "request_id", None)
    if settings.debug:
        content = {"detail": str(exc), "type": type(exc).__name__, "request_id": req_id}
    else:
        content = {"detail": "Internal server error", "request_id": req_id}
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
        headers=_request_id_headers(request),
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(request: Request):
    """Check application health."""
    platform = getattr(request.app.state, "platform", None)
    advisor = platform.advisor if platform else None
    return HealthResponse(
        version=settings.version,
        advisor_configured=bool(advisor and advisor.configured),
    )


app.include_router(api_v1_router, prefix=settings.api_v1_prefix)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cogni.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
