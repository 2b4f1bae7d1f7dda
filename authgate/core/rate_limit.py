"""
Rate limiting for the unauthenticated auth routes.

Each client (IP address plus User-Agent) gets a fixed window of attempts per
route. Going over the limit blocks that client on the route for a longer
period, and every blocked request is answered with 429 and a Retry-After
header.

Usage in routes:
    @router.post("/login", dependencies=[Depends(get_rate_limiter("/login"))])
    def login(...):
        ...

Storage is chosen with RATE_LIMIT_STORAGE_URI, e.g. "memory://" (per process)
or "redis://localhost:6379" (shared between workers).
"""

import logging
import time
from functools import lru_cache

from fastapi import Depends, Request
from limits import RateLimitItemPerSecond, storage, strategies

from authgate.core.config import settings
from authgate.core.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)


class AuthRateLimiter:
    def __init__(
        self,
        storage_uri: str = "memory://",
        times: int = 5,
        seconds: int = 15 * 60,
        block_seconds: int = 30 * 60,
        enabled: bool = True,
    ):
        self.enabled = enabled
        self.storage = storage.storage_from_string(storage_uri)
        self.limiter = strategies.FixedWindowRateLimiter(self.storage)
        self.limit = RateLimitItemPerSecond(times, seconds, namespace="AUTH")
        self.block = RateLimitItemPerSecond(1, block_seconds, namespace="AUTH_BLOCK")

    def _retry_after(self, scope: str, key: str) -> int:
        reset_time, _ = self.limiter.get_window_stats(self.block, scope, key)
        return int(reset_time - time.time()) + 1

    def hit(self, scope: str, key: str):
        """Count one attempt for key on scope. Raises RateLimitExceededError when the client is blocked."""
        if not self.enabled:
            return

        if not self.limiter.test(self.block, scope, key):
            raise RateLimitExceededError(self._retry_after(scope, key))

        if not self.limiter.hit(self.limit, scope, key):
            # Over the limit: start the block window
            self.limiter.hit(self.block, scope, key)
            logger.warning("Rate limit exceeded on %s for %s", scope, key)
            raise RateLimitExceededError(self._retry_after(scope, key))

    def reset(self):
        self.storage.reset()


@lru_cache
def get_auth_limiter() -> AuthRateLimiter:
    return AuthRateLimiter(
        storage_uri=settings.RATE_LIMIT_STORAGE_URI,
        times=settings.RATE_LIMIT_AUTH_TIMES,
        seconds=settings.RATE_LIMIT_AUTH_SECONDS,
        block_seconds=settings.RATE_LIMIT_AUTH_BLOCK_SECONDS,
        enabled=settings.RATE_LIMIT_ENABLED,
    )


def client_key(request: Request) -> str:
    host = request.client.host if request.client else "unknown"
    return f"{host}_{request.headers.get('user-agent', 'unknown')}"


def get_rate_limiter(path: str):
    """Dependency that counts one attempt on path for the calling client."""

    def _rate_limit(request: Request, limiter: AuthRateLimiter = Depends(get_auth_limiter)):
        limiter.hit(path, client_key(request))

    return _rate_limit
