from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response

logger = logging.getLogger("pickflow.http")


def _get_request_id(request: Request) -> str:
    rid = request.headers.get("X-Request-Id") or request.headers.get("X-Request-ID")
    if rid:
        return rid
    return str(uuid.uuid4())


def _client_ip(request: Request) -> str | None:
    # Behind the warehouse proxy the first X-Forwarded-For hop is the handheld.
    xff = request.headers.get("X-Forwarded-For")
    if xff:
        return xff.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None


async def request_log_middleware(request: Request, call_next: Callable) -> Response:
    """Attach a correlation id (X-Request-Id) and log every request with its duration."""
    request_id = _get_request_id(request)
    start = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception:
        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.exception(
            "%s %s unhandled error request_id=%s ip=%s duration_ms=%d",
            request.method, request.url.path, request_id, _client_ip(request), duration_ms,
        )
        raise

    response.headers["X-Request-Id"] = request_id
    duration_ms = int((time.perf_counter() - start) * 1000)
    level = logging.WARNING if response.status_code >= 400 else logging.INFO
    logger.log(
        level,
        "%s %s status=%d request_id=%s ip=%s duration_ms=%d",
        request.method, request.url.path, response.status_code, request_id, _client_ip(request), duration_ms,
    )
    return response
