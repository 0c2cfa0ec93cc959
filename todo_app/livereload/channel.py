from typing import Callable

from starlette.websockets import WebSocket

from todo_app.exceptions import ChannelClosedError


class WebSocketChannel:
    """
    Live reload `Channel` backed by a Starlette WebSocket.

    The owning endpoint calls `close()` when the socket disconnects, which
    fires every close callback exactly once.
    """

    def __init__(self, websocket: WebSocket) -> None:
        self.websocket = websocket
        self._close_callbacks: list[Callable[[], None]] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, message: str) -> None:
        """
        Push a text message to the client.

        Raises:
            ChannelClosedError: If the channel was already closed.
        """
        if self._closed:
            raise ChannelClosedError(
                f"channel ({id(self)}) is closed"
            )
        await self.websocket.send_text(message)

    def on_close(self, callback: Callable[[], None]) -> None:
        """
        Register a callback to run when the channel closes.

        Runs the callback immediately if the channel is already closed.
        """
        if self._closed:
            callback()
            return
        self._close_callbacks.append(callback)

    def close(self) -> None:
        """Mark the channel closed and notify close listeners once."""
        if self._closed:
            return

        self._closed = True
        callbacks, self._close_callbacks = self._close_callbacks, []
        for callback in callbacks:
            callback()
