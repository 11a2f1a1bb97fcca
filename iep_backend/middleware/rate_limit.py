# FILE: iep_backend/middleware/rate_limit.py
"""
Rate limiting middleware (sliding window, in-memory per process)
"""
import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Iterable
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-client request cap over a sliding window"""

    def __init__(
        self,
        app,
        rpm: int = 60,
        window_seconds: float = 60.0,
        exempt_paths: Iterable[str] = ("/health",)
    ):
        super().__init__(app)
        self.rpm = rpm
        self.window_seconds = window_seconds
        self.exempt_paths = tuple(exempt_paths)
        self.requests: Dict[str, Deque[float]] = defaultdict(deque)

    async def dispatch(self, request: Request, call_next):
        if request.url.path.startswith(self.exempt_paths):
            return await call_next(request)

        client = request.client.host if request.client else "unknown"
        now = time.monotonic()
        history = self.requests[client]

        while history and now - history[0] >= self.window_seconds:
            history.popleft()

        if len(history) >= self.rpm:
            retry_after = max(1, int(self.window_seconds - (now - history[0])))
            logger.warning(f"Rate limit exceeded for {client}")
            return JSONResponse(
                status_code=429,
                content={"error": "Rate limit exceeded"},
                headers={"Retry-After": str(retry_after)}
            )

        history.append(now)
        return await call_next(request)
