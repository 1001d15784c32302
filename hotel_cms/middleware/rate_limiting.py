"""Rate limiting for the authentication endpoints."""

import logging
import time
from typing import Dict, List, Optional, Tuple

import redis.asyncio as redis
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from hotel_cms.core.settings import Settings, get_settings
from hotel_cms.middleware.logging import get_client_ip
from hotel_cms.schemas.base import error_body

logger = logging.getLogger(__name__)


class InMemoryRateLimiter:
    """
    Fallback in-memory rate limiter when Redis is not available.
    Note: This is not suitable for production with multiple instances.
    """

    def __init__(self, cleanup_interval: int = 60):
        self.requests: Dict[str, List[float]] = {}
        self.cleanup_interval = cleanup_interval
        self.last_cleanup = time.time()

    async def hit(self, key: str, limit: int, window: int) -> Tuple[bool, int]:
        """
        Record a request against ``key``.

        Returns:
            Whether the request is allowed, and the requests remaining in the window
        """
        current_time = time.time()
        window_start = current_time - window

        if current_time - self.last_cleanup > self.cleanup_interval:
            self._cleanup_old_entries(window_start)
            self.last_cleanup = current_time

        timestamps = [t for t in self.requests.get(key, []) if t > window_start]
        if len(timestamps) >= limit:
            self.requests[key] = timestamps
            return False, 0

        timestamps.append(current_time)
        self.requests[key] = timestamps
        return True, limit - len(timestamps)

    def _cleanup_old_entries(self, cutoff_time: float) -> None:
        """Remove old entries to prevent memory leaks."""
        for key in list(self.requests):
            self.requests[key] = [t for t in self.requests[key] if t > cutoff_time]
            if not self.requests[key]:
                del self.requests[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Fixed-window limit per client IP on the auth endpoints.

    Counters live in Redis when ``rate_limit_use_redis`` is set and Redis is
    reachable; otherwise the in-process limiter is used.
    """

    def __init__(self, app, settings: Optional[Settings] = None, path_prefix: Optional[str] = None):
        super().__init__(app)
        self.settings = settings or get_settings()
        self.path_prefix = path_prefix or f"{self.settings.api_prefix}/auth"
        self.redis_client: Optional[redis.Redis] = None
        self.memory = InMemoryRateLimiter()
        if self.settings.rate_limit_use_redis:
            self._initialize_redis()

    def _initialize_redis(self) -> None:
        try:
            self.redis_client = redis.from_url(
                self.settings.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
                max_connections=self.settings.redis_pool_size,
            )
            logger.info("Redis client initialized for rate limiting")
        except Exception as e:
            logger.error(f"Failed to initialize Redis client: {e}")
            self.redis_client = None

    async def _hit_redis(self, key: str, limit: int, window: int) -> Tuple[bool, int]:
        bucket = f"rate_limit:auth:{key}:{int(time.time()) // window}"
        async with self.redis_client.pipeline() as pipe:
            pipe.incr(bucket)
            pipe.expire(bucket, window)
            results = await pipe.execute()
        count = results[0]
        return count <= limit, max(0, limit - count)

    async def _hit(self, key: str) -> Tuple[bool, int]:
        limit = self.settings.rate_limit_max_requests
        window = self.settings.rate_limit_window_seconds
        if self.redis_client is not None:
            try:
                return await self._hit_redis(key, limit, window)
            except redis.RedisError as e:
                logger.error(f"Redis error during rate limiting, using in-memory limiter: {e}")
        return await self.memory.hit(key, limit, window)

    async def dispatch(self, request: Request, call_next):
        if not self.settings.rate_limit_enabled or not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        client_ip = get_client_ip(request)
        allowed, remaining = await self._hit(client_ip)
        limit = self.settings.rate_limit_max_requests
        window = self.settings.rate_limit_window_seconds

        if not allowed:
            logger.warning(f"Rate limit exceeded for {client_ip} on {request.url.path}")
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content=error_body("Too many requests, please try again later"),
                headers={
                    "Retry-After": str(window),
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
