"""Request trace context: X-Trace-Id in, X-Trace-Id out, trace_id in every log."""

import logging
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from zkcloud.logging_config import request_log_context

logger = logging.getLogger(__name__)

TRACE_HEADER = "X-Trace-Id"


class TraceContextMiddleware(BaseHTTPMiddleware):
    """Attach a trace id to the request state, the log context and the response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        trace_id = request.headers.get(TRACE_HEADER) or f"trc_{uuid.uuid4().hex[:16]}"
        request.state.trace_id = trace_id

        with request_log_context(trace_id):
            response = await call_next(request)
            logger.debug("%s %s -> %d", request.method, request.url.path, response.status_code)

        response.headers[TRACE_HEADER] = trace_id
        return response
