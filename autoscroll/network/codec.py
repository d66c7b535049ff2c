"""Encode and decode WebSocket wire protocol frames (v1).

All messages are UTF-8 JSON text frames carrying a ``type`` discriminator.
"""

import json

from autoscroll.network.types import (
    ClientTextMessage,
    ServerMessage,
    WsControlCommand,
    WsError,
    WsFragment,
    WsPosition,
)


class UnknownMessageTypeError(ValueError):
    """Raised when a client frame has a missing or unrecognised type."""


# ---------------------------------------------------------------------------
# Server → client
# ---------------------------------------------------------------------------

def encode_server_message(msg: ServerMessage) -> str:
    """Encode a server-side message dataclass to a UTF-8 JSON string.

    Args:
        msg: WsPosition or WsError.

    Returns:
        JSON string suitable for sending as a WebSocket text frame.

    Raises:
        TypeError: If msg is not a recognised server message type.
    """
    if isinstance(msg, WsPosition):
        obj = {
            "type": "position",
            "line_index": msg.line_index,
            "score": msg.score,
            "text": msg.text,
            "source": msg.source,
        }
    elif isinstance(msg, WsError):
        obj = {
            "type": "error",
            "error_code": msg.error_code,
            "message": msg.message,
            "fatal": msg.fatal,
        }
    else:
        raise TypeError(f"Unknown server message type: {type(msg)}")

    return json.dumps(obj, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Client → server
# ---------------------------------------------------------------------------

def decode_client_message(text: str) -> ClientTextMessage:
    """Decode a JSON text frame from a remote recognizer into a typed dataclass.

    Args:
        text: Raw JSON string from a WebSocket text frame.

    Returns:
        WsFragment or WsControlCommand.

    Raises:
        ValueError: On invalid JSON, missing/unknown type, or invalid field values.
    """
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in client message: {exc}") from exc

    if not isinstance(obj, dict):
        raise ValueError("Client message must be a JSON object")

    msg_type = obj.get("type")
    if msg_type is None:
        raise UnknownMessageTypeError("Client message missing 'type' field")

    if msg_type == "fragment":
        fragment_text = obj.get("text")
        if not isinstance(fragment_text, str):
            raise ValueError(f"Invalid fragment text: {fragment_text!r} (must be a string)")
        timestamp = obj.get("timestamp", 0.0)
        if not isinstance(timestamp, (int, float)) or isinstance(timestamp, bool):
            raise ValueError(f"Invalid timestamp: {timestamp!r}")
        return WsFragment(
            source=str(obj.get("source", "remote")),
            text=fragment_text,
            timestamp=float(timestamp),
        )

    if msg_type == "control_command":
        command = obj.get("command")
        if command != "shutdown":
            raise ValueError(f"Invalid command value: {command!r} (must be 'shutdown')")
        return WsControlCommand(
            command="shutdown",
            timestamp=float(obj.get("timestamp", 0.0)),
        )

    raise UnknownMessageTypeError(f"unknown message type: {msg_type!r}")


def decode_server_message(text: str) -> ServerMessage:
    """Decode a JSON text frame from the server (used by client.py).

    Raises:
        ValueError: On invalid JSON or an unknown message type.
    """
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in server message: {exc}") from exc

    msg_type = obj.get("type") if isinstance(obj, dict) else None

    try:
        if msg_type == "position":
            return WsPosition(
                line_index=int(obj["line_index"]),
                score=float(obj["score"]),
                text=obj.get("text", ""),
                source=obj.get("source", ""),
            )
        if msg_type == "error":
            return WsError(
                error_code=obj["error_code"],
                message=obj.get("message", ""),
                fatal=bool(obj.get("fatal", False)),
            )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed {msg_type} message: {exc}") from exc

    raise UnknownMessageTypeError(f"unknown message type: {msg_type!r}")
