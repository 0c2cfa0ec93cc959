"""
Streaming render orchestrator.

Turns a document factory into the HTTP response for a page view:

- the render cannot start (nothing rendered yet) -> 500 with the fixed
  fallback document, so the client can still boot and render itself;
- the render starts -> the page is streamed, and any error recorded along
  the way resolves the response to a failure.

HTTP fixes the status line before the body, so a failure discovered after
streaming began cannot change the status that was already sent. Two
strategies are available (`RENDER_MODE`):

- ``stream``: send bytes as soon as they exist and report a late failure
  in-band with `RENDER_FAILURE_MARKER`. Best time-to-first-byte.
- ``buffer``: consume the whole render first, then send it with an exact
  status code (500 if anything failed). Correct status line, no streaming.
"""

import time
from typing import Literal

from fastapi.responses import HTMLResponse
from starlette import status
from starlette.responses import Response

from todo_app.constants import FALLBACK_BODY
from todo_app.render.cancellation import CancellationToken
from todo_app.render.page import PageRender
from todo_app.render.response import RenderStreamResponse
from todo_app.render.stream import DocumentFactory, render_to_stream
from todo_app.utils.metrics import page_render_first_chunk_seconds

RenderMode = Literal["stream", "buffer"]


class StreamingRenderOrchestrator:
    """
    Renders page views with partial-failure recovery.

    Args:
        mode: ``"stream"`` or ``"buffer"``, see module docstring.
    """

    def __init__(self, mode: RenderMode = "stream") -> None:
        if mode not in ("stream", "buffer"):
            raise ValueError(f"Unknown render mode: {mode!r}")
        self.mode = mode

    async def render(self, document: DocumentFactory) -> Response:
        """
        Render a document into a response.

        Args:
            document: Factory producing the page's chunks.

        Returns:
            The streaming (or buffered) page, or the fallback document.
        """
        page = PageRender()
        signal = CancellationToken()

        started = time.perf_counter()
        try:
            stream = await render_to_stream(
                document, signal=signal, on_error=page.record_error
            )
        except Exception as exc:
            page.start_failed(exc)
            return HTMLResponse(
                FALLBACK_BODY,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        page_render_first_chunk_seconds.observe(time.perf_counter() - started)
        page.start_streaming()

        if self.mode == "buffer":
            body = b"".join([chunk async for chunk in stream])
            page.finish(cancelled=stream.cancelled)
            return HTMLResponse(body, status_code=page.status_code)

        return RenderStreamResponse(stream, page, signal)
