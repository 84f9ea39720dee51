"""
Request tracing middleware
"""
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.utils.logger import clear_request_context, get_logger, set_request_context

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an id, binds it to the logging context and logs
    request start and completion.
    """

    header_name = "X-Request-ID"

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = request_id
        set_request_context(request_id)

        method = request.method
        path = request.url.path
        start_time = time.time()

        logger.info(
            "request_started",
            method=method,
            path=path,
            client_ip=request.client.host if request.client else "unknown"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_exception",
                method=method,
                path=path,
                error=str(e),
                error_type=type(e).__name__
            )
            raise
        else:
            response.headers[self.header_name] = request_id
            logger.info(
                "request_completed",
                method=method,
                path=path,
                status_code=response.status_code,
                duration=time.time() - start_time
            )
            return response
        finally:
            clear_request_context()
