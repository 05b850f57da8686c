"""
slowapi limiter shared by the routers

Clients are keyed by authenticated user id when get_current_user has run,
by remote address otherwise. The default storage is per process.
"""
import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from app.core.config import settings
from app.core.logging_config import logger

LOGIN_LIMIT = "5/minute"
REGISTER_LIMIT = "3/minute"
AI_CHAT_LIMIT = "10/minute"

RETRY_AFTER_SECONDS = 60


def get_user_identifier(request: Request) -> str:
    user_id = getattr(request.state, "user_id", None)
    return f"user:{user_id}" if user_id else f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_user_identifier,
    default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/minute"],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 in the same envelope as other domain errors, with Retry-After"""
    key = get_user_identifier(request)
    logger.log_event(
        "rate_limit_exceeded",
        f"[RateLimit] {key} hit {exc.detail} on {request.url.path}",
        level=logging.WARNING,
        rate_limit_key=key,
        http_path=request.url.path,
    )
    return JSONResponse(
        status_code=429,
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
        content={
            "success": False,
            "error": {
                "code": "RATE_LIMIT_EXCEEDED",
                "message": "Too many requests. Please slow down.",
                "details": {"limit": str(exc.detail)},
            },
        },
    )
