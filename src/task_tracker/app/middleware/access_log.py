import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("tasks.access")


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Logs start/end of every request and tags it with an X-Request-ID."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        start = time.perf_counter()
        request.state.request_id = request_id

        base = {
            "category": "http",
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }
        logger.info(
            "request.start",
            extra={
                **base,
                "event": "request.start",
                "query": str(request.url.query),
                "client": request.client.host if request.client else None,
            },
        )

        try:
            response: Response = await call_next(request)
        except Exception:
            logger.exception(
                "request.error",
                extra={**base, "event": "request.error", "duration_ms": _elapsed_ms(start)},
            )
            raise

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request.end",
            extra={
                **base,
                "event": "request.end",
                "status_code": response.status_code,
                "duration_ms": _elapsed_ms(start),
            },
        )
        return response


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)
