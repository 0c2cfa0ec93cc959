"""
Request correlation IDs.

Every HTTP request gets a short ID, taken from the incoming
`X-Correlation-ID` header when the caller supplies one. It is echoed back
on the response and exposed to log formatters through a context variable,
so all lines logged while serving (or streaming) one page can be grouped.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from todo_app.constants import CORRELATION_ID_LENGTH

CORRELATION_ID_HEADER = "X-Correlation-ID"

correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Assigns each request a correlation ID and returns it in a header."""

    async def dispatch(self, request: Request, call_next) -> Response:
        cid = (
            request.headers.get(CORRELATION_ID_HEADER) or uuid.uuid4().hex
        )[:CORRELATION_ID_LENGTH]

        request.state.request_id = cid
        token = correlation_id.set(cid)
        try:
            response = await call_next(request)
        finally:
            correlation_id.reset(token)

        response.headers[CORRELATION_ID_HEADER] = cid
        return response


def get_correlation_id() -> str:
    """Correlation ID of the current request, or "" outside a request."""
    return correlation_id.get()
