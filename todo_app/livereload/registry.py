"""
Registry of open live reload channels.

The registry only knows channels through the `Channel` protocol, so it can
be driven by WebSocket connections in production and by plain fakes in
tests. Removal is wired to each channel's own close notification at
registration time, so closed channels never linger in the registry.
"""

import asyncio
from typing import Callable, Protocol, runtime_checkable

from todo_app.constants import LIVERELOAD_SEND_TIMEOUT
from todo_app.logging import logger
from todo_app.utils.metrics import (
    livereload_channels_active,
    livereload_messages_sent_total,
    livereload_send_failures_total,
)


@runtime_checkable
class Channel(Protocol):
    """An open, message-capable connection to one client."""

    async def send(self, message: str) -> None: ...

    def on_close(self, callback: Callable[[], None]) -> None: ...


class ConnectionRegistry:
    """
    Set of currently open live reload channels.

    Membership is unique and unordered. `broadcast` serializes itself so
    that every channel receives messages in the order `broadcast` was
    called, even when a send suspends. A send that does not complete
    within `send_timeout` seconds is abandoned and counted as failed, so one
    stuck client cannot hold up the others.
    """

    def __init__(self, send_timeout: float = LIVERELOAD_SEND_TIMEOUT) -> None:
        self._channels: set[Channel] = set()
        self._send_timeout = send_timeout
        self._broadcast_lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._channels)

    def __contains__(self, channel: object) -> bool:
        return channel in self._channels

    @property
    def channels(self) -> frozenset[Channel]:
        """Snapshot of the registered channels."""
        return frozenset(self._channels)

    def register(self, channel: Channel) -> None:
        """
        Add an open channel and remove it again when it closes.

        Registering a channel that is already present does nothing.

        Args:
            channel: The channel to track.
        """
        if channel in self._channels:
            return

        self._channels.add(channel)
        livereload_channels_active.inc()
        logger.debug(f"Live reload channel ({id(channel)}) registered")

        channel.on_close(lambda: self.unregister(channel))

    def unregister(self, channel: Channel) -> None:
        """
        Remove a channel. Does nothing if it is not registered.

        Args:
            channel: The channel to forget.
        """
        if channel not in self._channels:
            return

        self._channels.discard(channel)
        livereload_channels_active.dec()
        logger.debug(f"Live reload channel ({id(channel)}) unregistered")

    async def broadcast(self, message: str) -> int:
        """
        Send a message to every channel registered at call time.

        A channel that fails or times out is logged and skipped; the failure is
        never raised to the caller. Channels that close before their turn
        are skipped.

        Args:
            message: The message to push.

        Returns:
            Number of channels the message was delivered to.
        """
        # Snapshot before the first suspension point
        channels = list(self._channels)
        delivered = 0

        async with self._broadcast_lock:
            for channel in channels:
                if channel not in self._channels:
                    continue

                try:
                    await asyncio.wait_for(
                        channel.send(message), self._send_timeout
                    )
                except TimeoutError:
                    livereload_send_failures_total.inc()
                    logger.warning(
                        f"Timed out sending {message!r} to live reload channel "
                        f"({id(channel)}) after {self._send_timeout}s"
                    )
                    continue
                except Exception as e:
                    livereload_send_failures_total.inc()
                    logger.warning(
                        f"Failed to send {message!r} to live reload channel "
                        f"({id(channel)}): {e}"
                    )
                    continue

                delivered += 1
                livereload_messages_sent_total.labels(message=message).inc()

        logger.debug(
            f"Broadcast {message!r} delivered to {delivered}/{len(channels)} channels"
        )
        return delivered
