# FILE: iep_backend/middleware/body_limit.py
"""
Request body size limit

Declared sizes are checked from Content-Length; chunked bodies are read
once and measured (Starlette caches the body for the endpoint).
"""
import logging
from typing import Optional
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

LIMITED_METHODS = frozenset({"POST", "PUT", "PATCH"})


def declared_length(request: Request) -> Optional[int]:
    """Content-Length as int, None when absent; ValueError when malformed"""
    raw = request.headers.get("content-length")
    if raw is None:
        return None
    raw = raw.strip()
    if not raw.isdigit():
        raise ValueError(f"malformed Content-Length: {raw!r}")
    return int(raw)


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """413 for bodies above max_size bytes on write methods"""

    def __init__(self, app, max_size: int):
        super().__init__(app)
        self.max_size = max_size

    def _too_large(self, size: int, path: str) -> JSONResponse:
        logger.warning(f"Body of {size} bytes rejected on {path} (limit {self.max_size})")
        return JSONResponse(
            status_code=413,
            content={"error": "Request body too large", "maxBytes": self.max_size}
        )

    async def dispatch(self, request: Request, call_next):
        if request.method not in LIMITED_METHODS:
            return await call_next(request)

        try:
            size = declared_length(request)
        except ValueError as e:
            logger.warning(f"Rejected request on {request.url.path}: {e}")
            return JSONResponse(status_code=400, content={"error": "Invalid Content-Length"})

        if size is None:
            size = len(await request.body())

        if size > self.max_size:
            return self._too_large(size, request.url.path)

        return await call_next(request)
