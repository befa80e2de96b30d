from __future__ import annotations

from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.logging import get_logger

logger = get_logger("app.request")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Propagate (or mint) an X-Request-Id and log the start and end of each request."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid4())
        request.state.request_id = request_id

        logger.info("request start %s %s requestId=%s", request.method, request.url.path, request_id)

        response: Response = await call_next(request)
        response.headers["X-Request-Id"] = request_id

        logger.info(
            "request end %s %s status=%s requestId=%s",
            request.method,
            request.url.path,
            response.status_code,
            request_id,
        )
        return response
