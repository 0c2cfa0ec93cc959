"""Streaming HTML render of the todo page."""

from todo_app.render.cancellation import CancellationToken
from todo_app.render.document import TodoDocument
from todo_app.render.orchestrator import StreamingRenderOrchestrator
from todo_app.render.page import PageRender, RenderState
from todo_app.render.stream import RenderStream, render_to_stream

__all__ = [
    "CancellationToken",
    "PageRender",
    "RenderState",
    "RenderStream",
    "StreamingRenderOrchestrator",
    "TodoDocument",
    "render_to_stream",
]
