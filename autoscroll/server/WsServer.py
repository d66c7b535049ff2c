"""WebSocket server: remote recognizers push fragments, followers get positions.

Runs a websockets.serve() loop on a daemon asyncio event loop thread.
Every connection feeds the shared fragment queue; every accepted position is
broadcast back to all connected clients.
"""

import asyncio
import logging
import queue
import threading
from typing import Any, TYPE_CHECKING

from websockets.exceptions import ConnectionClosed

from autoscroll.network.codec import encode_server_message
from autoscroll.network.types import WsPosition
from autoscroll.server.WsFragmentReceiver import receive_fragments

if TYPE_CHECKING:
    from autoscroll.ApplicationState import ApplicationState
    from autoscroll.types import PositionUpdate, RecognizedFragment

logger = logging.getLogger(__name__)


class WsServer:
    """WebSocket endpoint for remote fragment producers.

    Runs on a dedicated daemon asyncio event loop thread. The server binds on
    start() and the bound port is available via the ``port`` property once
    the server is ready. Implements PositionSubscriber so accepted positions
    reach every connected client.

    Args:
        fragment_queue: Shared queue consumed by PositionTracker.
        app_state: Application state; shutdown stops the server.
        host: Hostname or IP to bind to (default ``"127.0.0.1"``).
        port: Port to listen on; 0 means OS assigns an available port.
    """

    def __init__(
        self,
        fragment_queue: queue.Queue,
        app_state: "ApplicationState",
        host: str = "127.0.0.1",
        port: int = 0,
    ) -> None:
        self._fragment_queue = fragment_queue
        self._host = host
        self._port = port
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._stop_future: asyncio.Future | None = None
        self._ready = threading.Event()
        self._connections: set = set()

        app_state.register_component_observer(self.on_state_change)

    @property
    def port(self) -> int:
        """Return the bound port (0 if not started)."""
        return self._port

    def start(self) -> None:
        """Start the asyncio event loop thread and begin accepting connections.

        Blocks until the server is bound and ready to accept connections.
        """
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._run_loop, daemon=True, name="WsServer"
        )
        self._thread.start()
        self._ready.wait()

    def stop(self) -> None:
        """Stop accepting connections and let the event loop thread exit."""
        if self._loop is None or self._stop_future is None or self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._resolve_stop)

    def join(self, timeout: float = 5.0) -> None:
        """Wait for the event loop thread to exit."""
        if self._thread is not None:
            self._thread.join(timeout=timeout)

    def on_state_change(self, old_state: str, new_state: str) -> None:
        """Observes ApplicationState and reacts to shutdown."""
        if new_state == 'shutdown':
            self.stop()

    def on_fragment(self, fragment: "RecognizedFragment", score: float) -> None:
        """Fragments are not echoed to clients."""

    def on_position_change(self, update: "PositionUpdate") -> None:
        """Broadcast an accepted position to all connected clients.

        Called from the PositionTracker thread; the send is scheduled on the
        server's event loop.
        """
        if self._loop is None or self._loop.is_closed():
            return

        payload = encode_server_message(WsPosition(
            line_index=update.line_index,
            score=update.score,
            text=update.fragment.text,
            source=update.fragment.source,
        ))
        asyncio.run_coroutine_threadsafe(self._broadcast(payload), self._loop)

    def _resolve_stop(self) -> None:
        if not self._stop_future.done():
            self._stop_future.set_result(None)

    def _run_loop(self) -> None:
        """Run the asyncio event loop until stop() is called."""
        asyncio.set_event_loop(self._loop)
        try:
            self._loop.run_until_complete(self._serve())
        finally:
            self._ready.set()
            self._loop.close()

    async def _serve(self) -> None:
        """Bind the WebSocket server and run the accept loop.

        Algorithm:
            1. Bind via websockets.serve() on the configured host:port.
            2. Record the actual bound port (important when port=0).
            3. Signal _ready so start() unblocks.
            4. Wait for stop(), then close the server and all connections.
        """
        import websockets

        self._stop_future = asyncio.get_running_loop().create_future()

        async with websockets.serve(self._handle_connection, self._host, self._port) as server:
            self._port = server.sockets[0].getsockname()[1]
            logger.info("WsServer: listening on %s:%s", self._host, self._port)
            self._ready.set()
            await self._stop_future

        logger.info("WsServer: stopped")

    async def _broadcast(self, payload: str) -> None:
        # _connections is only touched on the event loop thread
        if not self._connections:
            return
        for websocket in list(self._connections):
            try:
                await websocket.send(payload)
            except ConnectionClosed:
                self._connections.discard(websocket)

    async def _handle_connection(self, websocket: Any, path: str = "/") -> None:
        """Handle a single WebSocket connection for its full lifetime.

        Args:
            websocket: Connected WebSocket client.
            path: Request path (unused in v1).
        """
        address = getattr(websocket, "remote_address", None)
        peer = f"ws:{address[0]}:{address[1]}" if address else "ws:unknown"
        self._connections.add(websocket)
        logger.info("WsServer: %s connected", peer)

        try:
            reason = await receive_fragments(
                websocket=websocket,
                peer=peer,
                fragment_queue=self._fragment_queue,
            )
            logger.info("WsServer: receive_fragments returned reason=%s for %s", reason, peer)
        except Exception:
            logger.exception("WsServer: error in connection %s", peer)
        finally:
            self._connections.discard(websocket)
