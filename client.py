# client.py
"""Remote fragment producer for a running follower (main.py --serve).

Reads recognized text, one fragment per line, from stdin or --file and
pushes it to the follower's WebSocket endpoint. Position frames coming back
are logged. Any recognizer that can write lines to stdout can drive the
display this way:

    my_recognizer | python client.py --server-url=ws://127.0.0.1:8765 --source=vosk
"""

import asyncio
import json
import logging
import sys
import time
from typing import Iterable, Optional

from autoscroll.network.codec import decode_server_message


def _parse_args(argv: list[str]) -> tuple[str, str, Optional[str], float, bool]:
    """Parse CLI arguments.

    Returns:
        Tuple of (server_url, source, file_path, interval, verbose).

    Raises:
        SystemExit: If --server-url is missing.
    """
    server_url: str | None = None
    source = "remote"
    file_path: str | None = None
    interval = 0.0
    verbose = "-v" in argv

    for arg in argv:
        if arg.startswith("--server-url="):
            server_url = arg.split("=", 1)[1]
        elif arg.startswith("--source="):
            source = arg.split("=", 1)[1]
        elif arg.startswith("--file="):
            file_path = arg.split("=", 1)[1]
        elif arg.startswith("--interval="):
            interval = float(arg.split("=", 1)[1])

    if server_url is None:
        print("ERROR: --server-url=ws://host:port is required.", file=sys.stderr)
        sys.exit(1)

    return server_url, source, file_path, interval, verbose


def build_fragment_frame(text: str, source: str) -> str:
    """Build a JSON fragment frame for one line of recognized text."""
    return json.dumps({
        "type": "fragment",
        "source": source,
        "text": text,
        "timestamp": time.time(),
    }, ensure_ascii=False)


async def _log_server_messages(websocket) -> None:
    """Log position and error frames until the connection closes."""
    async for message in websocket:
        try:
            msg = decode_server_message(message)
        except ValueError as exc:
            logging.warning("Client: unreadable server frame: %s", exc)
            continue
        logging.info("Client: %s", msg)


async def push_fragments(server_url: str, source: str, lines: Iterable[str], interval: float) -> int:
    """Send every non-blank line as a fragment, then a shutdown command.

    Returns:
        Number of fragments sent.
    """
    import websockets

    sent = 0
    async with websockets.connect(server_url) as websocket:
        listener = asyncio.create_task(_log_server_messages(websocket))

        for line in lines:
            text = line.strip()
            if not text:
                continue
            await websocket.send(build_fragment_frame(text, source))
            sent += 1
            if interval > 0:
                await asyncio.sleep(interval)

        await websocket.send(json.dumps({"type": "control_command", "command": "shutdown", "timestamp": time.time()}))
        listener.cancel()

    return sent


if __name__ == "__main__":
    server_url, source, file_path, interval, verbose = _parse_args(sys.argv[1:])
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='[%(asctime)s] [%(levelname)s] %(message)s'
    )

    try:
        if file_path:
            with open(file_path, encoding="utf-8") as handle:
                count = asyncio.run(push_fragments(server_url, source, handle.readlines(), interval))
        else:
            count = asyncio.run(push_fragments(server_url, source, sys.stdin, interval))
        logging.info("Client: sent %d fragment(s)", count)
    except KeyboardInterrupt:
        sys.exit(0)
    except Exception as exc:
        logging.error("Client ERROR: %s: %s", type(exc).__name__, exc)
        sys.exit(1)
