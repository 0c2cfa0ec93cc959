from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from todo_app.logging import clear_log_context, set_log_context


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """
    Puts the request's endpoint and method, then its status code, into the
    log context for JSON log records, and clears it once the response is
    handed back.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        set_log_context(endpoint=request.url.path, method=request.method)
        try:
            response = await call_next(request)
            set_log_context(status_code=response.status_code)
            return response
        finally:
            clear_log_context()
