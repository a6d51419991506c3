"""Request/response logging middleware."""

import json
import logging
import time
from typing import Any, Callable, Dict

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from cookdobby.core.request_id import generate_request_id, set_request_id

logger = logging.getLogger(__name__)

SENSITIVE_KEYS = ("api_key", "apikey", "password", "token", "secret", "auth")
MAX_LOGGED_BODY = 500


def mask_sensitive_data(data: Any) -> Any:
    """Recursively mask sensitive fields in data."""
    if isinstance(data, dict):
        masked = {}
        for key, value in data.items():
            if any(sensitive in str(key).lower() for sensitive in SENSITIVE_KEYS):
                masked[key] = "***"
            else:
                masked[key] = mask_sensitive_data(value)
        return masked
    if isinstance(data, list):
        return [mask_sensitive_data(item) for item in data]
    if isinstance(data, str) and len(data) > MAX_LOGGED_BODY:
        return data[:MAX_LOGGED_BODY] + "..."
    return data


async def get_request_params(request: Request) -> Dict[str, Any]:
    """Extract loggable parameters from query string and JSON body."""
    params: Dict[str, Any] = {}

    if request.query_params:
        params["query"] = dict(request.query_params)

    content_type = request.headers.get("content-type", "").lower()
    if "application/json" in content_type:
        body_bytes = await request.body()
        if body_bytes:
            try:
                params["body"] = json.loads(body_bytes)
            except (json.JSONDecodeError, UnicodeDecodeError):
                params["body"] = body_bytes.decode("utf-8", errors="ignore")[:MAX_LOGGED_BODY]

    return params


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests and responses with timing."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)
        request.state.request_id = request_id

        start_time = time.perf_counter()
        method = request.method
        path = request.url.path

        # BaseHTTPMiddleware caches the body read here for the downstream app.
        request_params = await get_request_params(request)

        logger.info(
            f"API Request: {method} {path}",
            extra={
                "request_id": request_id,
                "method": method,
                "path": path,
                "params": mask_sensitive_data(request_params),
                "client_ip": request.client.host if request.client else None,
                "user_agent": request.headers.get("user-agent", "Unknown"),
            },
        )

        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"API Error: {method} {path}",
                extra={
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "process_time_ms": round((time.perf_counter() - start_time) * 1000, 2),
                },
                exc_info=True,
            )
            raise

        process_time_ms = round((time.perf_counter() - start_time) * 1000, 2)
        logger.info(
            f"API Response: {method} {path} - {response.status_code}",
            extra={
                "request_id": request_id,
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "process_time_ms": process_time_ms,
            },
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{process_time_ms}ms"
        return response
