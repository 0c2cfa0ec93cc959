"""
Asset watcher: feeds rebuilt assets into the style broadcaster.

Watches the stylesheet and client bundle produced by the build tooling
and, whenever one of them changes on disk, replaces the served snapshot
through `StyleBroadcaster`, which notifies connected clients.
"""

import asyncio
from pathlib import Path

from watchfiles import Change, awatch

from todo_app.livereload.broadcaster import StyleBroadcaster
from todo_app.logging import logger


class AssetWatcher:
    """
    Watches built asset files and triggers live reload broadcasts.

    Args:
        broadcaster: Broadcaster owning the served asset snapshots.
        styles_path: Stylesheet file to watch, if any.
        client_path: Client bundle file to watch, if any.
    """

    def __init__(
        self,
        broadcaster: StyleBroadcaster,
        *,
        styles_path: str | Path | None = None,
        client_path: str | Path | None = None,
    ) -> None:
        self.broadcaster = broadcaster
        self.styles_path = Path(styles_path).resolve() if styles_path else None
        self.client_path = Path(client_path).resolve() if client_path else None
        self._task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()

    @property
    def paths(self) -> list[Path]:
        return [p for p in (self.styles_path, self.client_path) if p]

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def handle_change(self, path: Path) -> int:
        """
        Load a changed asset and publish it.

        Args:
            path: The file that changed.

        Returns:
            Number of channels notified (0 when the file is not watched
            or could not be read).
        """
        path = path.resolve()
        if path not in (self.styles_path, self.client_path):
            return 0

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not read changed asset {path}: {e}")
            return 0

        if path == self.styles_path:
            return await self.broadcaster.update_styles(content)
        return await self.broadcaster.update_client(content)

    async def run(self) -> None:
        """Watch the asset files until stopped."""
        logger.info(
            f"Watching assets: {', '.join(str(p) for p in self.paths)}"
        )
        async for changes in awatch(*self.paths, stop_event=self._stop_event):
            for change, path in changes:
                if change == Change.deleted:
                    continue
                await self.handle_change(Path(path))

    def start(self) -> None:
        """Start watching in a background task."""
        if self.is_running or not self.paths:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Stop watching and wait for the background task to finish."""
        if self._task is None:
            return
        self._stop_event.set()
        self._task.cancel()
        await asyncio.gather(self._task, return_exceptions=True)
        self._task = None
