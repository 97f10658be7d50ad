# ===== appointly/api/middleware/rate_limit_middleware.py =====
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
import time


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Per-IP rate limiting for the unauthenticated booking endpoints.

    Sliding one-second window kept in process memory.
    """

    def __init__(self, app, requests_per_second: int = 10, path_prefix: str = "/api/v1/public/"):
        super().__init__(app)
        self.requests_per_second = requests_per_second
        self.path_prefix = path_prefix
        self.request_times = {}

    async def dispatch(self, request: Request, call_next):
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        current_time = time.time()

        # Remove old timestamps (older than 1 second)
        recent = [
            t for t in self.request_times.get(client_ip, [])
            if current_time - t < 1.0
        ]

        if len(recent) >= self.requests_per_second:
            self.request_times[client_ip] = recent
            return JSONResponse(
                status_code=429,
                content={
                    "message": "Rate limit exceeded. Too many requests per second.",
                    "kind": "rate_limited",
                },
                headers={"Retry-After": "1"}
            )

        recent.append(current_time)
        self.request_times[client_ip] = recent

        return await call_next(request)
