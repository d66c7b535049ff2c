# autoscroll/sources/TranscriptFileSource.py
from __future__ import annotations
import queue
import time
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List

from ..types import RecognizedFragment


class TranscriptFileSource:
    """Replays a recorded transcript as if a recognizer were producing it.

    Each non-blank line of the UTF-8 transcript file is one fragment. Lines
    are pushed to the fragment queue at a fixed interval from a background
    thread, which makes sessions reproducible without a microphone or a
    recognition engine.

    Several sources may share one fragment queue; PositionTracker treats
    them as parallel, unweighted producers.

    Args:
        fragment_queue: Queue consumed by PositionTracker
        config: Configuration dictionary ('transcript.interval' in seconds)
        file_path: Path to the transcript file
        source_name: Name stamped on every fragment
        verbose: Enable verbose logging
    """

    def __init__(self,
                 fragment_queue: queue.Queue,
                 config: Dict[str, Any],
                 file_path: str | Path,
                 source_name: str = 'transcript',
                 verbose: bool = False):

        self.fragment_queue: queue.Queue = fragment_queue
        self.file_path: Path = Path(file_path)
        self.source_name: str = source_name
        self.verbose: bool = verbose
        self.interval: float = float(config.get('transcript', {}).get('interval', 1.5))

        self.fragments: List[str] = self._load_fragments()

        self.is_running: bool = False
        self.thread: threading.Thread | None = None
        self._stop_event: threading.Event = threading.Event()

        if self.verbose:
            logging.info(f"TranscriptFileSource: loaded {len(self.fragments)} fragments from {self.file_path}")

    def _load_fragments(self) -> List[str]:
        """Read non-blank transcript lines.

        Raises:
            FileNotFoundError: If the transcript file does not exist
        """
        if not self.file_path.exists():
            raise FileNotFoundError(f"Transcript file not found: {self.file_path}")

        text = self.file_path.read_text(encoding='utf-8')
        return [line.strip() for line in text.splitlines() if line.strip()]

    def start(self) -> None:
        """Start feeding fragments in a daemon thread."""
        self.is_running = True
        self._stop_event.clear()
        self.thread = threading.Thread(target=self._feed_fragments, daemon=True, name="TranscriptFileSource")
        self.thread.start()

    def _feed_fragments(self) -> None:
        for index, text in enumerate(self.fragments):
            # First fragment goes out immediately, the rest every interval
            if index > 0 and self._stop_event.wait(self.interval):
                break

            fragment = RecognizedFragment(text=text, source=self.source_name, timestamp=time.time())
            try:
                self.fragment_queue.put_nowait(fragment)
            except queue.Full:
                logging.warning("fragment_queue full, dropping transcript fragment")

        self.is_running = False

        if self.verbose:
            logging.info("TranscriptFileSource: finished replaying transcript")

    def stop(self) -> None:
        """Stop replaying and wait for the thread (up to 1 second)."""
        self.is_running = False
        self._stop_event.set()

        if self.thread and self.thread is not threading.current_thread():
            self.thread.join(timeout=1.0)

    def on_state_change(self, old_state: str, new_state: str) -> None:
        """Observes ApplicationState and reacts to shutdown."""
        if new_state == 'shutdown':
            self.stop()
