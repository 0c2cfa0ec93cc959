"""Client bundle and stylesheet, served from the broadcaster's snapshots."""

from fastapi import APIRouter, Response

from todo_app.dependencies import ContextDep

router = APIRouter(tags=["assets"])


@router.get("/client.js", response_class=Response)
async def client_bundle(context: ContextDep) -> Response:
    return Response(
        content=context.broadcaster.client,
        media_type="application/javascript",
    )


@router.get("/styles.css", response_class=Response)
async def stylesheet(context: ContextDep) -> Response:
    """
    Current stylesheet.

    Always the latest snapshot; live reload clients re-fetch it when they
    receive `loadStyles`.
    """
    return Response(content=context.broadcaster.styles, media_type="text/css")
