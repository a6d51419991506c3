"""HTTP transport to the model provider with retry-with-backoff.

Only application-level transient failures are retried: HTTP 429, any 5xx,
and a per-attempt timeout. Connection errors surface immediately as
``NetworkFailure``. Non-retryable error responses are handed back to the
caller untouched so it can inspect status and body.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from cookdobby.utils.exceptions import NetworkFailure, TransportExhausted

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[Any]]

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 0.3  # seconds
DEFAULT_TIMEOUT = 30.0  # seconds


def is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or 500 <= status_code < 600


def backoff_delay(attempt: int, base_delay: float = DEFAULT_BASE_DELAY) -> float:
    """Delay after the zero-based ``attempt``: base, 2*base, 4*base, ..."""
    return base_delay * (2 ** attempt)


class RetryingTransport:
    """POST JSON to an endpoint, retrying 429/5xx/timeouts with exponential backoff."""

    def __init__(
        self,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        timeout: float = DEFAULT_TIMEOUT,
        sleep: Optional[SleepFunc] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.timeout = timeout
        self._sleep = sleep or asyncio.sleep
        self._transport = transport

    async def post_json(
        self,
        url: str,
        *,
        headers: Dict[str, str],
        payload: Dict[str, Any],
    ) -> httpx.Response:
        """
        POST ``payload`` and return the first successful or non-retryable response.

        Raises:
            TransportExhausted: every attempt was retryable; carries the last body.
            NetworkFailure: the connection itself failed.
        """
        last_body: Optional[str] = None

        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
        ) as client:
            for attempt in range(self.max_attempts):
                try:
                    response = await client.post(url, headers=headers, json=payload)
                except httpx.TimeoutException:
                    last_body = f"Request timed out after {self.timeout:g}s"
                    status: Any = "timeout"
                except httpx.HTTPError as e:
                    logger.error(
                        "Provider connection failed: %s",
                        str(e),
                        extra={"attempt": attempt + 1, "url": url},
                    )
                    raise NetworkFailure(details=str(e) or e.__class__.__name__) from e
                else:
                    if response.is_success or not is_retryable_status(response.status_code):
                        return response
                    last_body = response.text
                    status = response.status_code

                if attempt + 1 >= self.max_attempts:
                    break

                delay = backoff_delay(attempt, self.base_delay)
                logger.warning(
                    f"Provider attempt {attempt + 1}/{self.max_attempts} failed ({status}), "
                    f"retrying in {int(delay * 1000)}ms",
                    extra={"attempt": attempt + 1, "status": status, "delay_ms": int(delay * 1000)},
                )
                await self._sleep(delay)

        logger.error(
            "Provider retries exhausted",
            extra={"attempts": self.max_attempts, "last_body": (last_body or "")[:500]},
        )
        raise TransportExhausted(last_body, attempts=self.max_attempts)
