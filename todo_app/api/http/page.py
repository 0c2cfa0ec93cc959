from fastapi import APIRouter
from fastapi.responses import HTMLResponse
from starlette.responses import Response

from todo_app.dependencies import ContextDep

router = APIRouter(tags=["page"])


@router.get("/", response_class=HTMLResponse, summary="Todo page")
async def index(context: ContextDep) -> Response:
    """
    Server-rendered todo page, streamed as it renders.

    Answers 500 with a minimal fallback document when the render cannot
    start; see `StreamingRenderOrchestrator` for failures after that.
    """
    return await context.orchestrator.render(context.document())
