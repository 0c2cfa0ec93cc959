"""Health check endpoint for monitoring service status."""

from fastapi import APIRouter, Response, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from todo_app.dependencies import ContextDep
from todo_app.logging import logger

router = APIRouter()


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    database: str
    livereload_connections: int


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check endpoint",
    tags=["health"],
)
async def health_check(
    context: ContextDep, response: Response
) -> HealthResponse:
    """
    Check health status of the application and its store.

    Returns:
        HealthResponse: Health status and the number of open live reload
        channels. Returns 503 Service Unavailable if the store is unhealthy.
    """
    db_status = "healthy"

    try:
        await run_in_threadpool(context.db.ping)
    except (SQLAlchemyError, TimeoutError) as e:
        logger.error(f"Database health check failed: {e}")
        db_status = "unhealthy"
    except Exception as e:
        # Catch-all for health checks to prevent endpoint failure
        logger.error(f"Unexpected database health check error: {e}")
        db_status = "unhealthy"

    if db_status != "healthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status=db_status,
        database=db_status,
        livereload_connections=len(context.registry),
    )
