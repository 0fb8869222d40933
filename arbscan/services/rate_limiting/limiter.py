"""
Rate limiter for API callers using a sliding window of request timestamps.
"""

import time


class RateLimiter:
    """
    Sliding-window rate limiter, one bucket per caller key.

    Buckets of callers with nothing left in the window are dropped, so the
    table only holds callers seen within the last window.

    Usage:
        limiter = RateLimiter(max_requests=50, window_sec=60.0)
        retry_after = limiter.hit("203.0.113.7")
        if retry_after > 0:
            # Reject the request
            ...
    """

    def __init__(self, max_requests: int, window_sec: float = 60.0):
        """
        Args:
            max_requests: Maximum requests allowed per window
            window_sec: Time window in seconds
        """
        self.max_requests = max_requests
        self.window_sec = window_sec
        self._buckets: dict[str, list[float]] = {}
        self._last_sweep: float = time.monotonic()

    def hit(self, key: str = "default") -> float:
        """
        Record a request for `key` if the window has room.

        Returns 0 when the request is allowed, otherwise the seconds until
        the oldest request in the window expires (nothing is recorded).
        """
        now = time.monotonic()
        cutoff = now - self.window_sec
        self._sweep(now, cutoff)

        # Remove expired timestamps
        bucket = [ts for ts in self._buckets.get(key, ()) if ts > cutoff]

        if len(bucket) >= self.max_requests:
            self._buckets[key] = bucket
            return max(bucket[0] - cutoff, 0.0)

        bucket.append(now)
        self._buckets[key] = bucket
        return 0.0

    def _sweep(self, now: float, cutoff: float) -> None:
        """Drop callers whose newest request left the window. Once per window."""
        if now - self._last_sweep < self.window_sec:
            return
        self._last_sweep = now
        stale = [key for key, bucket in self._buckets.items() if not bucket or bucket[-1] <= cutoff]
        for key in stale:
            del self._buckets[key]

    def __len__(self) -> int:
        """Number of callers currently tracked."""
        return len(self._buckets)

    def reset(self) -> None:
        """Forget every caller."""
        self._buckets.clear()
