import logging
import time

from fastapi import Request

logger = logging.getLogger(__name__)


async def timing_middleware(request: Request, call_next):
    """Log how long each request took and expose it as a response header."""
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000

    response.headers["X-Process-Time"] = f"{duration_ms:.2f}ms"
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} in {duration_ms:.2f}ms",
        extra={"method": request.method, "path": request.url.path},
    )
    return response
