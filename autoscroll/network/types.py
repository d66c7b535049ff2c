"""WebSocket wire protocol message types for remote fragment producers (v1)."""

from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Client → Server
# ---------------------------------------------------------------------------

@dataclass
class WsFragment:
    """JSON fragment frame: one burst of recognized text from a remote recognizer.

    Args:
        source: Producer name chosen by the client (e.g. ``"vosk"``).
        text: Recognized text, raw.
        timestamp: Client wall-clock time the text was recognized.
    """

    source: str
    text: str
    timestamp: float


@dataclass
class WsControlCommand:
    """JSON control_command frame sent from client to server.

    Args:
        command: Command name; only ``"shutdown"`` is valid in v1.
        timestamp: Client wall-clock time when the command was issued.
    """

    command: Literal["shutdown"]
    timestamp: float


# ---------------------------------------------------------------------------
# Server → Client
# ---------------------------------------------------------------------------

@dataclass
class WsPosition:
    """JSON position frame broadcast whenever the tracked line changes.

    Args:
        line_index: Accepted document line.
        score: Match confidence in ``[0.0, 1.0]``.
        text: Fragment text that produced the match.
        source: Producer of that fragment.
    """

    line_index: int
    score: float
    text: str
    source: str


@dataclass
class WsError:
    """JSON error frame sent from server to client.

    Args:
        error_code: Machine-readable error code (v1 enum).
        message: Human-readable description.
        fatal: If ``True``, the server closes the connection after sending.
    """

    error_code: Literal[
        "INVALID_FRAGMENT",
        "UNKNOWN_MESSAGE_TYPE",
        "BACKPRESSURE_DROP",
        "PROTOCOL_VIOLATION",
    ]
    message: str
    fatal: bool = False


# ---------------------------------------------------------------------------
# Union types
# ---------------------------------------------------------------------------

ServerMessage = WsPosition | WsError
ClientTextMessage = WsFragment | WsControlCommand
