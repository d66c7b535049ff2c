"""WebSocket fragment receiver: async-to-sync bridge for remote recognizers.

receive_fragments() is an async coroutine that runs for the lifetime of one
WebSocket connection. It reads JSON frames, validates them, and puts
RecognizedFragments onto the shared fragment queue PositionTracker consumes.
"""

import logging
import queue
from typing import Any

from websockets.exceptions import ConnectionClosed

from autoscroll.network.codec import (
    UnknownMessageTypeError,
    decode_client_message,
    encode_server_message,
)
from autoscroll.network.types import WsControlCommand, WsError
from autoscroll.types import RecognizedFragment

logger = logging.getLogger(__name__)

_RETURN_SHUTDOWN = "shutdown"
_RETURN_EXHAUSTED = "exhausted"
_RETURN_CONNECTION_LOST = "connection_lost"


async def receive_fragments(
    websocket: Any,
    peer: str,
    fragment_queue: queue.Queue,
) -> str:
    """Receive fragment frames from the WebSocket and forward them to fragment_queue.

    Runs until one of: shutdown command received, websocket closes, or the
    async iterator is exhausted (used in tests to supply a fixed sequence).

    Algorithm:
        1. Iterate over websocket messages.
        2. Binary message → non-fatal PROTOCOL_VIOLATION error, continue.
        3. Text message → decode.
           - fragment → put RecognizedFragment on fragment_queue
             (queue full → non-fatal BACKPRESSURE_DROP).
           - shutdown command → return "shutdown".
           - unknown type → non-fatal UNKNOWN_MESSAGE_TYPE; bad fields →
             non-fatal INVALID_FRAGMENT.
        4. ConnectionClosed → return "connection_lost".
        5. Async iterator exhausted → return "exhausted".

    Args:
        websocket: WebSocket connection object (must support async iteration and send).
        peer: Connection label used in logs and as default fragment source.
        fragment_queue: Thread-safe queue consumed by PositionTracker.

    Returns:
        Reason string: ``"shutdown"``, ``"connection_lost"``, or ``"exhausted"``.
    """
    try:
        async for message in websocket:
            if isinstance(message, bytes):
                logger.warning("WsFragmentReceiver[%s]: binary frame rejected", peer)
                await websocket.send(encode_server_message(WsError(
                    error_code="PROTOCOL_VIOLATION",
                    message="binary frames are not supported",
                    fatal=False,
                )))
                continue

            stop, error = _handle_text(message, peer, fragment_queue)
            if error is not None:
                await websocket.send(encode_server_message(error))
            if stop:
                return _RETURN_SHUTDOWN
    except ConnectionClosed:
        logger.info("WsFragmentReceiver[%s]: connection closed", peer)
        return _RETURN_CONNECTION_LOST

    return _RETURN_EXHAUSTED


def _handle_text(
    text: str,
    peer: str,
    fragment_queue: queue.Queue,
) -> tuple[bool, WsError | None]:
    """Decode a JSON text frame and enqueue fragments.

    Returns:
        Tuple of (should_stop, optional_error_to_send).
    """
    try:
        msg = decode_client_message(text)
    except UnknownMessageTypeError as exc:
        logger.warning("WsFragmentReceiver[%s]: unknown message: %s", peer, exc)
        return False, WsError(error_code="UNKNOWN_MESSAGE_TYPE", message=str(exc), fatal=False)
    except ValueError as exc:
        logger.warning("WsFragmentReceiver[%s]: invalid fragment: %s", peer, exc)
        return False, WsError(error_code="INVALID_FRAGMENT", message=str(exc), fatal=False)

    if isinstance(msg, WsControlCommand):
        logger.info("WsFragmentReceiver[%s]: shutdown command received", peer)
        return True, None

    fragment = RecognizedFragment(
        text=msg.text,
        source=msg.source or peer,
        timestamp=msg.timestamp,
    )

    try:
        fragment_queue.put_nowait(fragment)
    except queue.Full:
        logger.warning("WsFragmentReceiver[%s]: fragment_queue full, dropping fragment", peer)
        return False, WsError(
            error_code="BACKPRESSURE_DROP",
            message="fragment dropped: ingress queue full",
            fatal=False,
        )

    return False, None
