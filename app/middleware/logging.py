from __future__ import annotations

import logging
import time
from typing import Any, Awaitable, Callable

from fastapi import Request

from app.middleware.tenant import get_tenant_id

logger = logging.getLogger(__name__)


async def request_logging_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Any]],
):
    """Uma linha de log por request (método, path, status, latência, IP e contexto do token)."""
    start = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        latency_ms = (time.perf_counter() - start) * 1000
        client_ip = request.client.host if request.client else "-"
        user_id = getattr(request.state, "user_id", None)
        tenant_id = get_tenant_id(request)
        logger.info(
            f"[{request.method}] {request.url.path} | Status: {status_code} | "
            f"Latency: {latency_ms:.1f}ms | IP: {client_ip} | user={user_id} tenant={tenant_id}"
        )
