import asyncio
from typing import AsyncIterator

from starlette.responses import StreamingResponse
from starlette.types import Receive, Scope, Send

from todo_app.constants import HTML_CONTENT_TYPE, RENDER_FAILURE_MARKER
from todo_app.render.cancellation import CancellationToken
from todo_app.render.page import PageRender, RenderState
from todo_app.render.stream import RenderStream


class RenderStreamResponse(StreamingResponse):
    """
    Streams a page render to the client as it is produced.

    The status line is sent with the first chunk, before the render has
    finished. When an error is recorded after that point the document is
    terminated with `RENDER_FAILURE_MARKER`, which the client treats as a
    failed (500) response.

    A client disconnect cancels the render's token so the renderer stops at
    its next chunk boundary.
    """

    def __init__(
        self,
        stream: RenderStream,
        page: PageRender,
        signal: CancellationToken,
    ) -> None:
        self.stream = stream
        self.page = page
        self.signal = signal
        super().__init__(
            self._body(),
            status_code=page.status_code,
            media_type=HTML_CONTENT_TYPE,
        )

    async def _body(self) -> AsyncIterator[bytes]:
        async for chunk in self.stream:
            yield chunk

        self.page.finish(cancelled=self.stream.cancelled)
        if self.page.state is RenderState.STREAM_ERROR:
            yield RENDER_FAILURE_MARKER.encode("utf-8")

    async def _watch_disconnect(self, receive: Receive) -> None:
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                self.signal.cancel("client disconnected")
                return

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        watcher = asyncio.create_task(self._watch_disconnect(receive))
        try:
            await send(
                {
                    "type": "http.response.start",
                    "status": self.status_code,
                    "headers": self.raw_headers,
                }
            )
            async for chunk in self.body_iterator:
                await send(
                    {
                        "type": "http.response.body",
                        "body": chunk,
                        "more_body": True,
                    }
                )
            await send({"type": "http.response.body", "body": b"", "more_body": False})
        except OSError:
            self.signal.cancel("client disconnected")
        finally:
            watcher.cancel()
            await asyncio.gather(watcher, return_exceptions=True)
            await self.body_iterator.aclose()
            await self.stream.aclose()
            if self.page.state is RenderState.STREAMING:
                self.page.finish(cancelled=True)

        if self.background is not None:
            await self.background()
