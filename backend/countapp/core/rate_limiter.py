"""
Rate Limiting for the Count App API
===================================
slowapi limiter keyed by client address. Only the login endpoint carries a
limit (brute force protection); everything else is unlimited.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from countapp.core.config import settings
from countapp.core.logging_config import logger


limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


def login_rate_limit():
    """Rate limit for the login endpoint"""
    return limiter.limit(settings.LOGIN_RATE_LIMIT)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Render a rate limit hit in the API's error shape"""
    logger.warning(
        f"[RateLimit] Exceeded for {get_remote_address(request)}: {exc.detail}"
    )

    return JSONResponse(
        status_code=429,
        content={"message": "Too many requests. Please wait a moment and try again."},
        headers={"Retry-After": "60"},
    )
