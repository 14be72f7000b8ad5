"""Entry point for the files manager service."""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from common.logging_config import reset_request_id, set_request_id, setup_logging
from files_manager import config
from files_manager.artifact_storage import ArtifactStorage
from files_manager.database import Database
from files_manager.exceptions import (
    FilesManagerError,
    NotFoundError,
    UnauthorizedError,
    UnsupportedOperationError,
    ValidationError,
)
from files_manager.kv_store import KeyValueStore, RedisKeyValueStore
from files_manager.pipeline.jobs import ThumbnailJobHandler, WelcomeJobHandler
from files_manager.pipeline.queue import JobPipeline
from files_manager.repositories.file_repository import FileRepository
from files_manager.repositories.user_repository import UserRepository
from files_manager.routes import app_router, auth_router, file_router, user_router
from files_manager.services.auth_service import AuthService
from files_manager.services.file_service import FileService
from files_manager.sessions import SessionStore

logger = setup_logging('files_manager')

GENERIC_ERROR_MESSAGE = "Oops! Something went wrong!"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Start the job pipelines on startup and release stores on shutdown.
    """
    logger.info("Files manager starting up...")
    state = app.state

    await state.thumbnail_pipeline.start()
    await state.welcome_pipeline.start()

    yield

    logger.info("Files manager shutting down...")
    await state.thumbnail_pipeline.stop()
    await state.welcome_pipeline.stop()
    await state.kv_store.close()


async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = str(uuid.uuid4())
    token = set_request_id(request_id)

    start_time = time.time()

    try:
        logger.info(f"Request started: {request.method} {request.url.path}")

        response = await call_next(request)

        duration = time.time() - start_time

        logger.info(
            f"Request completed: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s"
        )
    finally:
        reset_request_id(token)

    response.headers["X-Request-ID"] = request_id

    return response


async def handle_broad_exceptions(request: Request, call_next):
    """
    Turn any unanticipated exception into a generic 500 response.
    """
    try:
        return await call_next(request)
    except Exception as e:
        logger.error(f"Unhandled exception: {e} path={request.url.path}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": GENERIC_ERROR_MESSAGE}
        )


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def validation_error_handler(request: Request, exc: ValidationError):
    logger.warning(f"Validation error: {exc} path={request.url.path}")
    return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))


async def unsupported_operation_handler(request: Request, exc: UnsupportedOperationError):
    logger.warning(f"Unsupported operation: {exc} path={request.url.path}")
    return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))


async def unauthorized_handler(request: Request, exc: UnauthorizedError):
    logger.warning(f"Unauthorized: {exc} path={request.url.path}")
    return _error_response(status.HTTP_401_UNAUTHORIZED, str(exc))


async def not_found_handler(request: Request, exc: NotFoundError):
    logger.warning(f"Not found: {exc} path={request.url.path}")
    return _error_response(status.HTTP_404_NOT_FOUND, str(exc))


async def files_manager_error_handler(request: Request, exc: FilesManagerError):
    logger.error(
        f"Internal error: {exc} path={request.url.path}",
        exc_info=True
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request body: {exc.errors()} path={request.url.path}")
    return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return _error_response(exc.status_code, "Endpoint not found")
    return _error_response(exc.status_code, str(exc.detail))


def create_app(
    database: Optional[Database] = None,
    kv_store: Optional[KeyValueStore] = None,
    artifacts: Optional[ArtifactStorage] = None,
    session_ttl_seconds: int = config.SESSION_TTL_SECONDS,
    thumbnail_concurrency: int = config.THUMBNAIL_CONCURRENCY,
    welcome_concurrency: int = config.WELCOME_CONCURRENCY,
    job_timeout: float = config.JOB_TIMEOUT_SECONDS,
) -> FastAPI:
    """
    Build the application and wire its collaborators.

    Every store can be injected; defaults are built from configuration.
    """
    database = database or Database(config.DATABASE_PATH)
    kv_store = kv_store or RedisKeyValueStore.from_url(config.REDIS_URL)
    artifacts = artifacts or ArtifactStorage(config.FOLDER_PATH)

    database.init_schema()
    logger.info("Database initialized")

    user_repo = UserRepository(database)
    file_repo = FileRepository(database)
    sessions = SessionStore(kv_store, ttl_seconds=session_ttl_seconds)

    thumbnail_pipeline = JobPipeline(
        name="thumbnail generation",
        handler=ThumbnailJobHandler(file_repo, artifacts),
        concurrency=thumbnail_concurrency,
        job_timeout=job_timeout,
    )
    welcome_pipeline = JobPipeline(
        name="send welcome email",
        handler=WelcomeJobHandler(user_repo),
        concurrency=welcome_concurrency,
        job_timeout=job_timeout,
    )

    app = FastAPI(
        title="Files Manager",
        description="Multi-user file store with folders, visibility control and thumbnails",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.database = database
    app.state.kv_store = kv_store
    app.state.artifacts = artifacts
    app.state.user_repo = user_repo
    app.state.file_repo = file_repo
    app.state.sessions = sessions
    app.state.thumbnail_pipeline = thumbnail_pipeline
    app.state.welcome_pipeline = welcome_pipeline
    app.state.auth_service = AuthService(user_repo, sessions, welcome_pipeline=welcome_pipeline)
    app.state.file_service = FileService(file_repo, artifacts, thumbnail_pipeline=thumbnail_pipeline)

    app.middleware("http")(handle_broad_exceptions)
    app.middleware("http")(log_requests)

    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(UnsupportedOperationError, unsupported_operation_handler)
    app.add_exception_handler(UnauthorizedError, unauthorized_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(FilesManagerError, files_manager_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.include_router(app_router)
    app.include_router(user_router)
    app.include_router(auth_router)
    app.include_router(file_router)

    return app


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "files_manager.main:create_app",
        factory=True,
        host=config.HOST,
        port=config.PORT,
    )


if __name__ == "__main__":
    main()
