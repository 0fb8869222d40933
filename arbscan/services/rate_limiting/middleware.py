"""
ASGI middleware that applies a RateLimiter to a URL prefix.
"""

import logging
import math

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from arbscan.services.rate_limiting.limiter import RateLimiter

logger = logging.getLogger(__name__)

TOO_MANY_REQUESTS = "Too many requests, please try again after a minute."


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rejects callers over their limit with 429 on paths under `prefix`."""

    def __init__(self, app, limiter: RateLimiter, prefix: str = "/api/"):
        super().__init__(app)
        self.limiter = limiter
        self.prefix = prefix

    async def dispatch(self, request: Request, call_next):
        if not request.url.path.startswith(self.prefix):
            return await call_next(request)

        client = request.client.host if request.client else "unknown"
        retry_after = self.limiter.hit(client)
        if retry_after > 0:
            logger.info("Rate limit hit for %s on %s", client, request.url.path)
            return JSONResponse(
                status_code=429,
                content={"error": TOO_MANY_REQUESTS},
                headers={"Retry-After": str(math.ceil(retry_after))},
            )

        return await call_next(request)
