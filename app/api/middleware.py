import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Loguea cada request entrante con su duración y le asigna un X-Request-ID."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "%s %s falló [request_id=%s, %.3fs]",
                request.method, request.url.path, request_id, time.perf_counter() - start,
            )
            raise

        logger.info(
            "%s %s -> %s [request_id=%s, %.3fs]",
            request.method, request.url.path, response.status_code,
            request_id, time.perf_counter() - start,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
