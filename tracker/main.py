"""
Main FastAPI application entry point.
Configures the application, middleware, error mapping and routes.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import Session

from tracker.api.routes import auth, health, shipments, users
from tracker.core.config import settings
from tracker.core.exceptions import DuplicateEmail, InvalidCredentials, TokenError, TrackerError
from tracker.core.logging import get_logger, setup_logging
from tracker.core.security import password_hasher
from tracker.db.session import create_db_and_tables, engine
from tracker.models.user import UserRole
from tracker.repositories.user_repository import UserRepository
from tracker.schemas.user import UserCreate
from tracker.services.user_service import UserService

setup_logging()
logger = get_logger(__name__)


def bootstrap_admin() -> None:
    """Create the first admin account if it does not exist yet."""
    with Session(engine) as session:
        user_service = UserService(UserRepository(session), password_hasher)
        if user_service.users.exists_by_email(settings.FIRST_SUPERUSER_EMAIL):
            return

        logger.info("Creating first admin user...")
        try:
            user_service.create_user(
                UserCreate(
                    email=settings.FIRST_SUPERUSER_EMAIL,
                    password=settings.FIRST_SUPERUSER_PASSWORD,
                    first_name="Admin",
                    last_name="User",
                    role=UserRole.ADMIN,
                )
            )
        except DuplicateEmail:
            # Another worker created it first
            logger.info("First admin user already present")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.
    Runs startup and shutdown logic.
    """
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}")

    logger.info("Creating database tables...")
    create_db_and_tables()

    if not settings.DISABLE_BOOTSTRAP_USERS:
        bootstrap_admin()
    else:
        logger.info("User bootstrapping disabled (DISABLE_BOOTSTRAP_USERS=true)")

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url=f"{settings.API_V1_PREFIX}/docs",
    redoc_url=f"{settings.API_V1_PREFIX}/redoc",
    lifespan=lifespan,
)

if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["authorization", "content-type", "accept"],
    )


@app.exception_handler(TrackerError)
async def tracker_error_handler(request: Request, exc: TrackerError) -> JSONResponse:
    """Serialize domain errors as ``{"error": <code>, "detail": <message>}``."""
    headers = None
    if isinstance(exc, (TokenError, InvalidCredentials)):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "detail": exc.detail},
        headers=headers,
    )


app.include_router(health.router, prefix=settings.API_V1_PREFIX)
app.include_router(auth.router, prefix=settings.API_V1_PREFIX)
app.include_router(users.router, prefix=settings.API_V1_PREFIX)
app.include_router(shipments.router, prefix=settings.API_V1_PREFIX)
