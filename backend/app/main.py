"""
PageCraft backend entry point

Run with `uvicorn app.main:app` from the backend directory.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded

from app.api.v1.router import api_router
from app.config.config_loader import get_keyword_matcher
from app.core.config import settings
from app.core.database import AsyncSessionLocal, close_db, init_db
from app.core.exceptions import PageCraftError, error_response
from app.core.logging_config import logger
from app.core.middleware import RequestLoggingMiddleware, RequestSizeLimitMiddleware, SecurityHeadersMiddleware
from app.core.rate_limiter import limiter, rate_limit_exceeded_handler
from app.modules.storage import UPLOAD_URL_PREFIX

APP_VERSION = "1.0.0"
PLACEHOLDER_SECRET = "CHANGE_ME"


def check_settings() -> None:
    """Refuse to start without a database url, or with placeholder secrets in production"""
    problems = []
    if not settings.DATABASE_URL:
        problems.append("DATABASE_URL is not set")
    if settings.ENVIRONMENT == "production":
        for name in ("SECRET_KEY", "JWT_SECRET_KEY"):
            if getattr(settings, name) in ("", PLACEHOLDER_SECRET):
                problems.append(f"{name} is missing or still the placeholder")

    if problems:
        for problem in problems:
            logger.critical(f"[Startup] {problem}")
        raise RuntimeError("Invalid configuration: " + "; ".join(problems))

    if not settings.ANTHROPIC_API_KEY:
        logger.warning("[Startup] ANTHROPIC_API_KEY is empty; /ai/chat requests will fail")


async def prepare_database() -> None:
    from app.db.seed_data import seed_templates

    await init_db()
    if not settings.SEED_TEMPLATES_ON_STARTUP:
        return
    async with AsyncSessionLocal() as db:
        added = await seed_templates(db)
    if added:
        logger.info(f"[Startup] Seeded {added} templates")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} {APP_VERSION} ({settings.ENVIRONMENT})")
    check_settings()
    await prepare_database()

    # a malformed keyword table fails startup instead of the first search
    matcher = get_keyword_matcher()
    logger.info(f"[Startup] {len(matcher.mappings)} keyword mappings loaded")

    yield

    await close_db()
    logger.info(f"{settings.APP_NAME} stopped")


async def pagecraft_error_handler(request: Request, exc: PageCraftError) -> JSONResponse:
    level = logger.error if exc.status_code >= 500 else logger.warning
    level(
        f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}",
        extra={"event_type": "app_error", "error_code": exc.code, "http_status": exc.status_code},
    )
    return JSONResponse(status_code=exc.status_code, content=error_response(exc))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.log_error_with_context(exc, context=f"{request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "message": str(exc) if settings.DEBUG else "An error occurred",
        },
    )


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.APP_NAME,
        description="Page builder API: layouts, template marketplace, React export and an AI assistant",
        version=APP_VERSION,
        lifespan=lifespan,
        redirect_slashes=False,
    )

    application.state.limiter = limiter
    application.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    application.add_exception_handler(PageCraftError, pagecraft_error_handler)
    application.add_exception_handler(Exception, unhandled_error_handler)

    # last added runs first: CORS, size limit, security headers, request logging
    application.add_middleware(RequestLoggingMiddleware)
    application.add_middleware(SecurityHeadersMiddleware)
    application.add_middleware(RequestSizeLimitMiddleware, max_size=4 * settings.MAX_UPLOAD_SIZE)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Response-Time", "Content-Disposition"],
    )

    @application.get("/", tags=["Root"])
    async def root():
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": APP_VERSION,
            "docs": "/docs",
            "health": "/health",
        }

    @application.get("/health", tags=["Health"])
    async def health_check():
        return {
            "status": "healthy",
            "app_name": settings.APP_NAME,
            "version": APP_VERSION,
            "environment": settings.ENVIRONMENT,
        }

    settings.upload_path.mkdir(parents=True, exist_ok=True)
    application.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=str(settings.upload_path)), name="uploads")
    application.include_router(api_router, prefix=f"/api/{settings.API_VERSION}")
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.SERVER_HOST, port=settings.SERVER_PORT, reload=settings.DEBUG)
