import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from app.core.logger import logger

class LogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            # The traceback is logged by the unhandled exception handler
            logger.error(
                f"Method: {request.method} | "
                f"Path: {request.url.path} | "
                f"Status: 500 | "
                f"Duration: {time.perf_counter() - start_time:.4f}s"
            )
            raise

        process_time = time.perf_counter() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        # Static assets are noisy, only API traffic is logged
        if request.url.path.startswith("/api") or request.url.path == "/":
            logger.info(
                f"Method: {request.method} | "
                f"Path: {request.url.path} | "
                f"Status: {response.status_code} | "
                f"Duration: {process_time:.4f}s"
            )

        return response
