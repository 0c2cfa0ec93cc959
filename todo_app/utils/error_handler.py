"""
Exception handlers that convert errors into structured JSON responses.

CRUD errors are always answered with a JSON body carrying an `error`
field. Unexpected errors (for example failures raised by the store) are
logged with their traceback and answered with a generic message so no
stack trace reaches the client.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from todo_app.exceptions import AppException
from todo_app.logging import logger


async def app_exception_handler(
    request: Request, ex: AppException
) -> JSONResponse:
    """
    Convert an `AppException` to its JSON response.

    Args:
        request: The request that failed.
        ex: The raised application exception.

    Returns:
        JSONResponse with the exception's status code and error body.
    """
    logger.warning(
        f"{type(ex).__name__} on {request.method} {request.url.path}: {ex.message}",
        extra={"exception_type": type(ex).__name__},
    )
    return JSONResponse(
        status_code=ex.http_status, content=ex.to_response_body()
    )


async def validation_exception_handler(
    request: Request, ex: RequestValidationError
) -> JSONResponse:
    """Report path/query validation failures in the structured error shape."""
    logger.warning(
        f"Invalid request on {request.method} {request.url.path}: {ex.errors()}"
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Invalid request",
            "details": jsonable_errors(ex.errors()),
        },
    )


async def unhandled_exception_handler(
    request: Request, ex: Exception
) -> JSONResponse:
    """Outer error boundary for anything the endpoints did not handle."""
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {ex}",
        exc_info=ex,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def jsonable_errors(errors) -> list[dict]:
    """
    Reduce pydantic error entries to JSON-safe fields.

    Pydantic includes the original exception object under `ctx` for some
    error types, which cannot be serialized.
    """
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in errors
    ]


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register the application's exception handlers on a FastAPI app.

    Args:
        app: The application to configure.
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(
        RequestValidationError, validation_exception_handler
    )
    app.add_exception_handler(Exception, unhandled_exception_handler)
