from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import AppError, InternalError
from .logging_setup import setup_logging
from .repositories import Storage, build_storage
from .routers import auth as auth_router
from .routers import todos as todos_router
from .schemas import ServiceInfo
from .security import PasswordHasher, TokenService
from .settings import DEFAULT_JWT_SECRET, Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "auth", "description": "Email/password signup and signin issuing bearer tokens."},
    {"name": "todos", "description": "CRUD operations on the caller's own tasks."},
]

ENDPOINTS = ["/auth/signup", "/auth/signin", "/todos"]


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Render application errors as ``{"error": message}`` with their status."""
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed bodies are client errors like any other validation failure."""
        logger.debug("Request validation failed on %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Anything else is a 500 with a generic message; details stay in the log."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": InternalError.default_message})


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None, storage: Optional[Storage] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Explicit settings; read from the environment when omitted.
        storage: Explicit stores; selected from settings once when omitted.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is not set; using the development default")

    app = FastAPI(
        title="TodoSpace API",
        description="Multi-user to-do list with email/password auth and bearer tokens.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )

    app.state.settings = settings
    app.state.storage = storage or build_storage(settings)
    app.state.tokens = TokenService.from_settings(settings)
    app.state.hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    logger.info("Using %s storage", app.state.storage.backend)

    # Configure CORS based on settings (CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    # PUBLIC_INTERFACE
    @app.get("/", response_model=ServiceInfo, summary="Service info", tags=["health"])
    def service_info(request: Request) -> ServiceInfo:
        """
        Service info endpoint.

        Returns:
            A JSON object naming the API, its endpoints and the active storage backend.
        """
        return ServiceInfo(
            message="TodoSpace API is running!",
            endpoints=ENDPOINTS,
            backend=request.app.state.storage.backend,
        )

    app.include_router(auth_router.router)
    app.include_router(todos_router.router)
    return app


app = create_app()
