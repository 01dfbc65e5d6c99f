import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Middleware to ensure each request has a unique ID (X-Request-ID).

    - If a valid UUID is provided in the 'X-Request-ID' header, it's used.
    - Otherwise, a new UUIDv4 is generated.
    - The request ID is stored in request.state.request_id
    - The request ID and the handling time are logged and the ID is echoed
      in the response headers.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER)
        try:
            if request_id:
                uuid.UUID(request_id)
            else:
                request_id = str(uuid.uuid4())
        except (ValueError, TypeError):
            request_id = str(uuid.uuid4())

        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed_ms:.1f} ms) [{request_id}]"
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
