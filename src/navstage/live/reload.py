"""WebSocket-based live reload for development mode.

Monitors page map files for changes, rebuilds the locale table and
notifies connected clients via WebSocket to refresh navigation.
"""

from __future__ import annotations

import asyncio
import json
import logging
import weakref
from pathlib import Path
from typing import TYPE_CHECKING

from aiohttp import WSMsgType, web
from watchfiles import Change, awatch

from navstage.core.errors import PageMapError, ValidationError

if TYPE_CHECKING:
    from navstage.core.loader import PageMapLoader

logger = logging.getLogger(__name__)


class LiveReloadManager:
    """Manages WebSocket connections and page map watching for live reload.

    A failed rebuild keeps the previous locale table in service; clients
    are only notified after a successful swap.
    """

    def __init__(
        self,
        pagemap_dir: Path,
        watch_patterns: list[str] | None = None,
        *,
        loader: PageMapLoader,
    ) -> None:
        """Initialize the live reload manager.

        Args:
            pagemap_dir: Directory to watch for changes
            watch_patterns: Glob patterns to watch (default: ["*.json"])
            loader: PageMapLoader whose table is rebuilt on change
        """
        self._pagemap_dir = pagemap_dir
        self._watch_patterns = watch_patterns or ["*.json"]
        self._connections: weakref.WeakSet[web.WebSocketResponse] = weakref.WeakSet()
        self._watch_task: asyncio.Task[None] | None = None
        self._loader = loader

    async def start(self) -> None:
        """Start the file watcher."""
        if self._watch_task is not None:
            return
        self._watch_task = asyncio.create_task(self._watch_files())

    async def stop(self) -> None:
        """Stop the file watcher and close all connections."""
        if self._watch_task is not None:
            self._watch_task.cancel()
            try:
                await self._watch_task
            except asyncio.CancelledError:
                pass
            self._watch_task = None

        for ws in list(self._connections):
            await ws.close()

    async def handle_websocket(self, request: web.Request) -> web.WebSocketResponse:
        """Handle WebSocket connection for live reload.

        Args:
            request: aiohttp request being upgraded

        Returns:
            Closed WebSocket response once the client disconnects
        """
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        self._connections.add(ws)

        try:
            async for msg in ws:
                if msg.type == WSMsgType.ERROR:
                    break
        finally:
            self._connections.discard(ws)

        return ws

    async def _watch_files(self) -> None:
        """Watch for page map changes and broadcast reload events.

        Deleted files are ignored. The locale of each changed file is taken
        from its stem and announced only after a successful rebuild.
        """
        async for changes in awatch(self._pagemap_dir):
            locales = sorted(
                {
                    Path(path_str).stem
                    for change_type, path_str in changes
                    if change_type != Change.deleted and self._matches_patterns(Path(path_str))
                }
            )
            if not locales:
                continue

            if self.rebuild():
                for locale in locales:
                    await self._broadcast_reload(locale)

    def rebuild(self) -> bool:
        """Rebuild the locale table.

        Returns:
            True if the new table is in service, False if the rebuild failed
        """
        try:
            self._loader.reload()
        except (PageMapError, ValidationError) as e:
            logger.error(f"Page map reload failed, keeping previous table: {e}")
            return False
        return True

    def _matches_patterns(self, path: Path) -> bool:
        """Check if a path matches any watch pattern.

        Args:
            path: Absolute path reported by the watcher

        Returns:
            True if the path is inside the page map directory and matches
        """
        try:
            relative = path.relative_to(self._pagemap_dir)
        except ValueError:
            return False

        return any(relative.match(pattern) for pattern in self._watch_patterns)

    async def _broadcast_reload(self, locale: str) -> None:
        """Broadcast reload event to all connected clients.

        Args:
            locale: Locale whose page map changed
        """
        if not self._connections:
            return

        message = json.dumps({"type": "reload", "locale": locale})

        for ws in list(self._connections):
            if ws.closed:
                continue
            try:
                await ws.send_str(message)
            except ConnectionResetError:
                # Client disconnected mid-send, will be cleaned up by WeakSet
                pass


def create_live_reload_routes(manager: LiveReloadManager) -> list[web.RouteDef]:
    """Create routes for live reload WebSocket.

    Args:
        manager: LiveReloadManager serving the socket

    Returns:
        List of route definitions
    """
    return [web.get("/ws/live-reload", manager.handle_websocket)]
