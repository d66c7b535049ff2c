"""Integration tests for WsServer over a real loopback socket."""
import asyncio
import json
import queue

import pytest
import websockets

from autoscroll.ApplicationState import ApplicationState
from autoscroll.server.WsServer import WsServer
from autoscroll.types import PositionUpdate, RecognizedFragment


@pytest.fixture
def app_state():
    return ApplicationState()


@pytest.fixture
def server(app_state):
    fragment_queue: queue.Queue = queue.Queue()
    server = WsServer(fragment_queue, app_state, host="127.0.0.1", port=0)
    server.start()
    yield server, fragment_queue
    server.stop()
    server.join()


def test_binds_to_os_assigned_port(server):
    ws_server, _ = server
    assert ws_server.port > 0


def test_fragment_reaches_queue(server):
    ws_server, fragment_queue = server

    async def push():
        async with websockets.connect(f"ws://127.0.0.1:{ws_server.port}") as websocket:
            await websocket.send(json.dumps({"type": "fragment", "source": "vosk", "text": "mudam-se os tempos"}))
            await websocket.send(json.dumps({"type": "control_command", "command": "shutdown"}))

    asyncio.run(push())

    fragment = fragment_queue.get(timeout=2.0)
    assert fragment.text == "mudam-se os tempos"
    assert fragment.source == "vosk"


def test_position_broadcast_to_clients(server):
    ws_server, fragment_queue = server
    update = PositionUpdate(line_index=8, score=0.93, fragment=RecognizedFragment(text="o tempo", source="vosk"))

    async def listen():
        async with websockets.connect(f"ws://127.0.0.1:{ws_server.port}") as websocket:
            # a fragment round trip guarantees the connection is registered
            await websocket.send(json.dumps({"type": "fragment", "text": "ready"}))
            await asyncio.get_running_loop().run_in_executor(None, fragment_queue.get, True, 2.0)
            ws_server.on_position_change(update)
            return json.loads(await asyncio.wait_for(websocket.recv(), timeout=2.0))

    message = asyncio.run(listen())

    assert message == {"type": "position", "line_index": 8, "score": 0.93, "text": "o tempo", "source": "vosk"}


def test_shutdown_state_stops_server(app_state):
    ws_server = WsServer(queue.Queue(), app_state)
    ws_server.start()

    app_state.set_state('shutdown')
    ws_server.join(timeout=2.0)

    assert not ws_server._thread.is_alive()


class _RecordingConnection:
    def __init__(self, closed: bool = False) -> None:
        self.sent: list[str] = []
        self._closed = closed

    async def send(self, message: str) -> None:
        if self._closed:
            from websockets.exceptions import ConnectionClosed
            from websockets.frames import Close
            raise ConnectionClosed(rcvd=Close(code=1001, reason="going away"), sent=None)
        self.sent.append(message)


def test_broadcast_without_clients_is_noop(app_state):
    ws_server = WsServer(queue.Queue(), app_state)

    asyncio.run(ws_server._broadcast("{}"))

    assert ws_server._connections == set()


def test_broadcast_drops_closed_connections(app_state):
    ws_server = WsServer(queue.Queue(), app_state)
    alive, gone = _RecordingConnection(), _RecordingConnection(closed=True)
    ws_server._connections = {alive, gone}

    asyncio.run(ws_server._broadcast('{"type": "position"}'))

    assert alive.sent == ['{"type": "position"}']
    assert ws_server._connections == {alive}


def test_position_change_with_no_clients(server):
    ws_server, _ = server
    update = PositionUpdate(line_index=1, score=0.9, fragment=RecognizedFragment(text="x"))

    ws_server.on_position_change(update)


def test_position_change_before_start_is_ignored(app_state):
    ws_server = WsServer(queue.Queue(), app_state)
    update = PositionUpdate(line_index=1, score=0.9, fragment=RecognizedFragment(text="x"))

    ws_server.on_position_change(update)
