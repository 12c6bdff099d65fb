import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from blogspace.api.admin import router as admin_router
from blogspace.api.auth import router as auth_router
from blogspace.api.blogs import router as blog_router
from blogspace.api.comments import router as comment_router
from blogspace.api.likes import router as like_router
from blogspace.api.users import router as user_router
from blogspace.config import Settings, get_settings
from blogspace.database import Database
from blogspace.responses import respond

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO"):
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around one Settings object and one database."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    db = Database(settings)
    db.migrate_schema()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        db.close()

    app = FastAPI(
        title="Blogspace",
        docs_url=None if settings.ENV == "prod" else "/docs",
        redoc_url=None if settings.ENV == "prod" else "/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = db

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["Accept", "Authorization", "Content-Type"],
    )

    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(blog_router)
    app.include_router(like_router)
    app.include_router(comment_router)
    app.include_router(admin_router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return respond(
            exc.status_code,
            str(exc.detail),
            error=getattr(exc, "error", None),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return respond(status.HTTP_400_BAD_REQUEST, "Invalid input", error=_validation_message(exc))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return respond(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    @app.get("/")
    def home():
        return respond(status.HTTP_200_OK, "Hello World")

    @app.get("/health")
    def health_check():
        stats = db.health()
        code = status.HTTP_200_OK if stats.get("status") == "up" else status.HTTP_503_SERVICE_UNAVAILABLE
        return respond(code, stats.get("message") or stats.get("error"), {"database": stats})

    logger.info("Application ready (env=%s)", settings.ENV)
    return app


def run():
    uvicorn.run("blogspace.main:create_app", factory=True, host="0.0.0.0", port=8000)
