"""
Style broadcaster: owns the served asset snapshots and announces changes.

The stylesheet and client bundle served over HTTP live here and are only
ever replaced wholesale. Each replacement is announced to every open live
reload channel. The announcement carries no payload; clients re-fetch the
asset when they receive it.
"""

from todo_app.constants import LOAD_STYLES_MESSAGE, RELOAD_MESSAGE
from todo_app.livereload.registry import ConnectionRegistry
from todo_app.logging import logger


class StyleBroadcaster:
    """
    Holds the current stylesheet and client bundle.

    Args:
        registry: Channels to notify on updates.
        styles: Initial stylesheet text.
        client: Initial client bundle source.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        *,
        styles: str = "",
        client: str = "",
    ) -> None:
        self._registry = registry
        self._styles = styles
        self._client = client

    @property
    def styles(self) -> str:
        """The current stylesheet snapshot."""
        return self._styles

    @property
    def client(self) -> str:
        """The current client bundle."""
        return self._client

    async def update_styles(self, new_styles: str) -> int:
        """
        Replace the stylesheet and tell every channel to reload styles.

        The snapshot is swapped before the first suspension point, so any
        request served after this call starts sees the new stylesheet.

        Args:
            new_styles: The rebuilt stylesheet.

        Returns:
            Number of channels notified.
        """
        self._styles = new_styles
        logger.info(f"Stylesheet updated ({len(new_styles)} bytes)")
        return await self._registry.broadcast(LOAD_STYLES_MESSAGE)

    async def update_client(self, new_client: str) -> int:
        """
        Replace the client bundle and tell every channel to reload fully.

        Args:
            new_client: The rebuilt client bundle.

        Returns:
            Number of channels notified.
        """
        self._client = new_client
        logger.info(f"Client bundle updated ({len(new_client)} bytes)")
        return await self._registry.broadcast(RELOAD_MESSAGE)
