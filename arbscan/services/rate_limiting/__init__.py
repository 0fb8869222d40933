"""
Rate limiting for API callers.
"""

from arbscan.services.rate_limiting.limiter import RateLimiter
from arbscan.services.rate_limiting.middleware import RateLimitMiddleware

__all__ = ["RateLimiter", "RateLimitMiddleware"]
