from typing import Any

from fastapi import APIRouter
from starlette.endpoints import WebSocketEndpoint
from starlette.websockets import WebSocket

from todo_app.constants import LIVERELOAD_PATH, RELOAD_MESSAGE
from todo_app.context import ServerContext
from todo_app.livereload.channel import WebSocketChannel
from todo_app.logging import logger
from todo_app.utils.metrics import livereload_connections_total

router = APIRouter()


@router.websocket_route(LIVERELOAD_PATH)
class LiveReload(WebSocketEndpoint):
    """
    Live reload channel for one browser tab.

    The path carries the build tag the page was rendered with. A tag that
    differs from the running server's means the page is out of date and is
    told to reload right away; otherwise the channel just waits for
    broadcasts. Anything the client sends is ignored.
    """

    encoding = "text"

    channel: WebSocketChannel | None = None

    async def on_connect(self, websocket: WebSocket) -> None:
        context: ServerContext = websocket.app.state.context
        client_tag = websocket.path_params.get("build_id")

        await websocket.accept()
        self.channel = WebSocketChannel(websocket)
        context.registry.register(self.channel)

        stale = context.build_identity.is_stale(client_tag)
        livereload_connections_total.labels(
            freshness="stale" if stale else "current"
        ).inc()
        logger.debug(
            f"Live reload channel ({id(self.channel)}) opened, "
            f"build tag {'stale' if stale else 'current'}"
        )

        if not stale:
            return

        try:
            await self.channel.send(RELOAD_MESSAGE)
        except Exception:
            self.channel.close()
            raise

    async def on_receive(self, websocket: WebSocket, data: Any) -> None:
        pass

    async def on_disconnect(self, websocket: WebSocket, close_code: int) -> None:
        if self.channel is None:
            return

        self.channel.close()
        logger.debug(
            f"Live reload channel ({id(self.channel)}) closed with code {close_code}"
        )
