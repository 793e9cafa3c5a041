"""
HTTP 中间件
请求ID、安全响应头和访问日志
"""

import time
import uuid

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    为每个请求分配请求ID（沿用客户端传入的 X-Request-ID），
    补充安全响应头，并记录一行访问日志
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        with logger.contextualize(request_id=request_id):
            try:
                response = await call_next(request)
            except Exception:
                elapsed = (time.perf_counter() - started) * 1000
                logger.error(f"{request.method} {request.url.path} 500 {elapsed:.1f}ms")
                raise

            elapsed = (time.perf_counter() - started) * 1000
            logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed:.1f}ms")

        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
