import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import Settings, get_settings
from app.database import create_engine, create_sessionmaker, init_models
from app.errors import CivicIssueError
from app.middleware.timing import timing_middleware
from app.routes import issues_router, stats_router, uploads_router
from app.schemas import ErrorResponse
from app.storage import BlobStore

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"Invalid request: {location} {first.get('msg', '')}".strip()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: one engine and upload directory for the whole process
        engine = create_engine(settings.database_url)
        await init_models(engine)

        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        app.state.blob_store = BlobStore(settings.upload_dir, settings.max_upload_bytes)
        logger.info(
            "Civic issues service started",
            extra={"upload_dir": settings.upload_dir},
        )

        yield

        # Shutdown: Dispose of the engine
        await engine.dispose()
        logger.info("Civic issues service stopped")

    app = FastAPI(title="Civic Issues API", lifespan=lifespan)

    app.middleware("http")(timing_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CivicIssueError)
    async def civic_issue_error_handler(request: Request, exc: CivicIssueError):
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_response().model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error=_describe_validation_error(exc)).model_dump(),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error=str(exc)).model_dump(),
        )

    app.include_router(issues_router)
    app.include_router(stats_router)
    app.include_router(uploads_router)

    return app


logging.basicConfig(
    level=get_settings().log_level,
    format="%(levelname)s | %(name)s | %(message)s",
)

app = create_app()
