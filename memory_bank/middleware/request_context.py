"""Request context middleware: request id, timing, access log and rate limiting.

The rate limiter is a token bucket per client that refills at
``rate_limit_per_minute`` tokens per minute. ``check_rate_limit`` is a pure
function over a caller-owned dict so it can be tested on its own.
"""

import logging
import threading
import time
import uuid
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..core.config import settings
from ..core.logging_config import request_id_var
from ..exceptions import ErrorCode

logger = logging.getLogger(__name__)

# {client_key: (available_tokens, last_refill_timestamp)}
_rate_buckets: dict[str, tuple[float, float]] = {}
_rate_lock = threading.Lock()

# Idle buckets are swept every _EVICT_EVERY calls.
_rate_call_count = 0
_EVICT_EVERY = 100
_EVICT_AGE = 120.0

_EXEMPT_PATHS = frozenset({"/", "/health", "/docs", "/redoc", "/openapi.json"})


def check_rate_limit(
    buckets: dict[str, tuple[float, float]],
    key: str,
    max_per_minute: int,
    now: Optional[float] = None,
) -> tuple[bool, float]:
    """Take one token from *key*'s bucket.

    Args:
        buckets: Mutable per-key state, modified in place.
        key: Client identifier.
        max_per_minute: Bucket size and refill rate. 0 disables the limit.
        now: Current timestamp (injectable for testing). Defaults to ``time.monotonic()``.

    Returns:
        ``(allowed, retry_after)``; *retry_after* is 0.0 when allowed, otherwise
        the seconds until the next token is available.
    """
    global _rate_call_count

    if max_per_minute <= 0:
        return True, 0.0

    if now is None:
        now = time.monotonic()

    _rate_call_count += 1
    if _rate_call_count % _EVICT_EVERY == 0:
        cutoff = now - _EVICT_AGE
        for stale in [k for k, (_, ts) in buckets.items() if ts < cutoff]:
            del buckets[stale]

    refill_rate = max_per_minute / 60.0

    if key in buckets:
        tokens, last_refill = buckets[key]
        tokens = min(max_per_minute, tokens + (now - last_refill) * refill_rate)
    else:
        tokens = float(max_per_minute)

    if tokens >= 1.0:
        buckets[key] = (tokens - 1.0, now)
        return True, 0.0

    buckets[key] = (tokens, now)
    return False, (1.0 - tokens) / refill_rate


def _client_key(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Request id, timing, structured request log and rate limiting in one pass."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex[:16]
        request_id_var.set(rid)

        if settings.rate_limit_enabled and request.url.path not in _EXEMPT_PATHS:
            key = _client_key(request)
            with _rate_lock:
                allowed, retry_after = check_rate_limit(
                    _rate_buckets, key, settings.rate_limit_per_minute
                )
            if not allowed:
                logger.warning(
                    "Rate limit exceeded",
                    extra={"client": key, "path": request.url.path, "retry_after": round(retry_after, 1)},
                )
                return JSONResponse(
                    status_code=429,
                    content={
                        "error": ErrorCode.RATE_LIMITED.value,
                        "message": "Too many requests",
                        "details": {"retry_after": round(retry_after, 1)},
                    },
                    headers={
                        "Retry-After": str(int(retry_after) + 1),
                        "X-Request-ID": rid,
                    },
                )

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 1)

        response.headers["X-Request-ID"] = rid
        response.headers["X-Response-Time"] = f"{duration_ms}ms"

        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        return response
