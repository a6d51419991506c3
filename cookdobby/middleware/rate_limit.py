"""Per-client rate limiting using slowapi."""

from fastapi import Request
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address

from cookdobby.config import settings


def get_client_key(request: Request) -> str:
    """Rate-limit key: the forwarded client address when behind a proxy, else the peer."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_client_key,
    default_limits=[f"{settings.rate_limit_per_hour}/hour"],
    storage_uri="memory://",
)


def get_rate_limit_exceeded_handler():
    """Get rate limit exceeded handler."""
    return _rate_limit_exceeded_handler


def rate_limit_dependency(request: Request) -> None:
    """
    Rate limit dependency for FastAPI.

    Raises:
        RateLimitExceeded: If rate limit is exceeded
    """
    # slowapi only checks limits from its middleware or decorators; routes
    # opt in through this dependency instead. `_check_request_limit` raises
    # RateLimitExceeded once the limit is hit.
    limiter._check_request_limit(request, endpoint_func=None)
