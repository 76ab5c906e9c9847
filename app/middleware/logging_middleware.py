import logging
import time
import uuid

from fastapi import Request

logger = logging.getLogger("app.middleware.requests")


async def log_requests(request: Request, call_next):
    """Loggt jede Anfrage mit Methode, Pfad, Status und Dauer."""
    request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.exception(f"[{request_id}] {request.method} {request.url.path} -> 500 ({duration_ms:.1f} ms)")
        raise

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-Id"] = request_id
    logger.info(f"[{request_id}] {request.method} {request.url.path} -> {response.status_code} ({duration_ms:.1f} ms)")
    return response
