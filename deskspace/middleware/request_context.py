"""Request context middleware: request ids, timing, access log, rate limiting.

The token bucket is the pure function ``check_rate_limit`` so it can be
tested without an application. Each middleware instance owns its bucket, so
every application built by ``create_app`` starts with a clean slate.
"""

import logging
import math
import threading
import time
import uuid
from typing import Dict, Iterable, Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from ..core.logging_config import request_id_var
from ..exceptions import ErrorCode

logger = logging.getLogger(__name__)

# {client_key: (available_tokens, last_refill_timestamp)}
Bucket = Dict[str, Tuple[float, float]]

STALE_AFTER_SECONDS = 120.0
DEFAULT_EXEMPT_PATHS = frozenset({"/", "/health", "/docs", "/redoc", "/openapi.json"})


def check_rate_limit(
    bucket: Bucket,
    key: str,
    max_per_minute: int,
    now: Optional[float] = None,
) -> Tuple[bool, float]:
    """Take one token for *key* if available.

    Returns ``(allowed, retry_after)``; *retry_after* is 0.0 when allowed,
    otherwise the seconds until the next token. ``max_per_minute <= 0``
    disables limiting.
    """
    if max_per_minute <= 0:
        return True, 0.0
    if now is None:
        now = time.monotonic()

    refill_rate = max_per_minute / 60.0
    tokens, last_refill = bucket.get(key, (float(max_per_minute), now))
    tokens = min(float(max_per_minute), tokens + (now - last_refill) * refill_rate)

    if tokens >= 1.0:
        bucket[key] = (tokens - 1.0, now)
        return True, 0.0

    bucket[key] = (tokens, now)
    return False, (1.0 - tokens) / refill_rate


def evict_stale(bucket: Bucket, now: float, max_age: float = STALE_AFTER_SECONDS) -> int:
    stale = [k for k, (_, ts) in bucket.items() if now - ts > max_age]
    for k in stale:
        del bucket[k]
    return len(stale)


def client_key(request: Request) -> str:
    """First ``X-Forwarded-For`` hop when behind a proxy, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Request id, timing headers, structured access log and per-client rate limit."""

    def __init__(
        self,
        app: ASGIApp,
        max_per_minute: int = 0,
        exempt_paths: Iterable[str] = DEFAULT_EXEMPT_PATHS,
    ):
        super().__init__(app)
        self.max_per_minute = max_per_minute
        self.exempt_paths = frozenset(exempt_paths)
        self._bucket: Bucket = {}
        self._lock = threading.Lock()
        self._calls = 0

    def _allow(self, key: str) -> Tuple[bool, float]:
        with self._lock:
            self._calls += 1
            now = time.monotonic()
            if self._calls % 100 == 0:
                evict_stale(self._bucket, now)
            return check_rate_limit(self._bucket, key, self.max_per_minute, now=now)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex[:16]
        token = request_id_var.set(rid)
        try:
            if request.url.path not in self.exempt_paths:
                key = client_key(request)
                allowed, retry_after = self._allow(key)
                if not allowed:
                    logger.warning(
                        "Throttled %s", key,
                        extra={"client": key, "path": request.url.path, "retry_after": round(retry_after, 1)},
                    )
                    return throttled_response(rid, retry_after)

            started = time.perf_counter()
            response = await call_next(request)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 1)

            response.headers.update({"X-Request-ID": rid, "X-Response-Time": f"{elapsed_ms}ms"})
            logger.info(
                "%s %s -> %d (%.1fms)", request.method, request.url.path, response.status_code, elapsed_ms,
                extra={"method": request.method, "path": request.url.path,
                       "status_code": response.status_code, "duration_ms": elapsed_ms},
            )
            return response
        finally:
            request_id_var.reset(token)


def throttled_response(rid: str, retry_after: float) -> JSONResponse:
    """429 body in the same shape as every other API error."""
    return JSONResponse(
        status_code=429,
        content={
            "error": ErrorCode.RATE_LIMITED.value,
            "message": "Too many requests, slow down",
            "details": {"retry_after": round(retry_after, 1)},
        },
        headers={"Retry-After": str(math.ceil(retry_after) or 1), "X-Request-ID": rid},
    )
