"""
FastAPI application factory
"""
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import Settings, get_settings
from app.core.exceptions import AuthenticationError, MissingFileError
from app.core.staging import TemporaryFileManager
from app.middleware import RequestContextMiddleware, TrustedHeaderAuthenticator
from app.routers import generate, health, profile
from app.services.ai_service import ChatCompletionClient
from app.services.interview_service import InterviewService
from app.services.user_store import InMemoryUserStore, UserStore
from app.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

Authenticator = Callable[[Request], Awaitable[dict]]


def create_app(
    settings: Optional[Settings] = None,
    llm_client: Optional[ChatCompletionClient] = None,
    user_store: Optional[UserStore] = None,
    authenticator: Optional[Authenticator] = None
) -> FastAPI:
    """
    Build the application with its process-scoped services

    Services are created once here and reached from handlers through
    ``app.state``; pass substitutes to replace any of them. Serve with
    ``uvicorn --factory app.main:create_app``.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    llm_client = llm_client or ChatCompletionClient.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "application_started",
            version=settings.VERSION,
            model=settings.MODEL,
            upload_dir=settings.UPLOAD_DIR
        )
        yield
        await llm_client.aclose()
        logger.info("application_stopped")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        description="Generates a candidate profile and interview questions from an uploaded resume",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.user_store = user_store or InMemoryUserStore()
    app.state.authenticator = authenticator or TrustedHeaderAuthenticator()
    app.state.interview_service = InterviewService(
        settings=settings,
        file_manager=TemporaryFileManager(settings.UPLOAD_DIR),
        llm_client=llm_client
    )

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request: Request, exc: AuthenticationError):
        logger.warning("authentication_failed", path=request.url.path, error=exc.message)
        return JSONResponse(status_code=401, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        # Only the multipart upload takes request input; a malformed one means no usable file
        missing_file = MissingFileError()
        logger.warning(
            "request_validation_failed",
            path=request.url.path,
            errors=[error.get("msg") for error in exc.errors()]
        )
        return generate.error_response(400, missing_file.message)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__
        )
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Internal Server Error", "error": type(exc).__name__}
        )

    app.include_router(health.router, tags=["health"])
    app.include_router(generate.router, tags=["generate"])
    app.include_router(profile.router, tags=["profile"])

    return app

