# app/middleware/request_logging.py
# Log every request at DEBUG and 4xx/5xx responses at WARNING as structured
# records. Never logs bodies: uploads and extracted contacts are PII.

import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("crmintake.request")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        status = response.status_code
        latency_ms = round((time.perf_counter() - start) * 1000, 2)
        fields = {
            "status": status,
            "path": request.url.path,
            "method": request.method,
            "latency_ms": latency_ms,
        }
        if status >= 400:
            logger.warning("4xx_5xx_response", extra=fields)
        else:
            logger.debug("request_done", extra=fields)
        return response
