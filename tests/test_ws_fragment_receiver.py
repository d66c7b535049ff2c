"""Tests for WsFragmentReceiver.

Strategy: a fake async-iterable websocket, asyncio.run() to drive the coroutine.
The fragment_queue is a real queue.Queue (the same type PositionTracker reads).
"""

import asyncio
import json
import queue

from websockets.exceptions import ConnectionClosed
from websockets.frames import Close

from autoscroll.server.WsFragmentReceiver import receive_fragments

_PEER = "ws:127.0.0.1:50000"


def _fragment(text: str, source: str | None = "vosk", timestamp: float = 100.0) -> str:
    obj = {"type": "fragment", "text": text, "timestamp": timestamp}
    if source is not None:
        obj["source"] = source
    return json.dumps(obj)


def _shutdown_command() -> str:
    return json.dumps({"type": "control_command", "command": "shutdown", "timestamp": 100.0})


class _WebSocketSequence:
    """Fake websocket that serves a fixed sequence of messages then raises StopAsyncIteration."""

    def __init__(self, messages: list) -> None:
        self._messages = iter(messages)
        self.sent: list[str] = []

    def __aiter__(self):
        return self

    async def __anext__(self):
        try:
            return next(self._messages)
        except StopIteration:
            raise StopAsyncIteration

    async def send(self, message: str) -> None:
        self.sent.append(message)


class _ClosingWebSocket(_WebSocketSequence):
    """Fake websocket whose connection drops after its messages."""

    async def __anext__(self):
        try:
            return next(self._messages)
        except StopIteration:
            raise ConnectionClosed(rcvd=Close(code=1001, reason="going away"), sent=None)


def _errors(ws: _WebSocketSequence) -> list[dict]:
    return [json.loads(m) for m in ws.sent]


class TestFragmentToQueue:

    def test_fragment_is_queued(self) -> None:
        fragment_queue: queue.Queue = queue.Queue()
        ws = _WebSocketSequence([_fragment("o tempo cobre o chão")])

        reason = asyncio.run(receive_fragments(ws, _PEER, fragment_queue))

        assert reason == "exhausted"
        fragment = fragment_queue.get_nowait()
        assert fragment.text == "o tempo cobre o chão"
        assert fragment.source == "vosk"
        assert fragment.timestamp == 100.0
        assert ws.sent == []

    def test_fragments_keep_arrival_order(self) -> None:
        fragment_queue: queue.Queue = queue.Queue()
        ws = _WebSocketSequence([_fragment("one"), _fragment("two"), _fragment("three")])

        asyncio.run(receive_fragments(ws, _PEER, fragment_queue))

        assert [fragment_queue.get_nowait().text for _ in range(3)] == ["one", "two", "three"]

    def test_empty_source_falls_back_to_peer(self) -> None:
        fragment_queue: queue.Queue = queue.Queue()
        ws = _WebSocketSequence([_fragment("hello", source="")])

        asyncio.run(receive_fragments(ws, _PEER, fragment_queue))

        assert fragment_queue.get_nowait().source == _PEER


class TestControlFlow:

    def test_shutdown_stops_receiving(self) -> None:
        fragment_queue: queue.Queue = queue.Queue()
        ws = _WebSocketSequence([_fragment("before"), _shutdown_command(), _fragment("after")])

        reason = asyncio.run(receive_fragments(ws, _PEER, fragment_queue))

        assert reason == "shutdown"
        assert fragment_queue.qsize() == 1

    def test_connection_lost(self) -> None:
        ws = _ClosingWebSocket([_fragment("partial")])

        reason = asyncio.run(receive_fragments(ws, _PEER, queue.Queue()))

        assert reason == "connection_lost"


class TestErrors:

    def test_binary_frame_rejected(self) -> None:
        fragment_queue: queue.Queue = queue.Queue()
        ws = _WebSocketSequence([b"\x00\x01", _fragment("still works")])

        asyncio.run(receive_fragments(ws, _PEER, fragment_queue))

        assert _errors(ws)[0]["error_code"] == "PROTOCOL_VIOLATION"
        assert fragment_queue.get_nowait().text == "still works"

    def test_invalid_fragment(self) -> None:
        ws = _WebSocketSequence(['{"type": "fragment", "text": 42}'])

        asyncio.run(receive_fragments(ws, _PEER, queue.Queue()))

        error = _errors(ws)[0]
        assert error["error_code"] == "INVALID_FRAGMENT"
        assert error["fatal"] is False

    def test_unknown_message_type(self) -> None:
        ws = _WebSocketSequence(['{"type": "audio_chunk"}'])

        asyncio.run(receive_fragments(ws, _PEER, queue.Queue()))

        assert _errors(ws)[0]["error_code"] == "UNKNOWN_MESSAGE_TYPE"

    def test_full_queue_reports_backpressure(self) -> None:
        fragment_queue: queue.Queue = queue.Queue(maxsize=1)
        ws = _WebSocketSequence([_fragment("kept"), _fragment("dropped")])

        reason = asyncio.run(receive_fragments(ws, _PEER, fragment_queue))

        assert reason == "exhausted"
        assert [e["error_code"] for e in _errors(ws)] == ["BACKPRESSURE_DROP"]
        assert fragment_queue.get_nowait().text == "kept"
