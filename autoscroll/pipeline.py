import queue
import signal
import sys
import logging
import json
from pathlib import Path
from typing import Any, Dict, List, Optional
import tkinter as tk

from .ApplicationState import ApplicationState
from .PositionPublisher import PositionPublisher
from .PositionTracker import PositionTracker
from .ReferenceDocument import ReferenceDocument
from .gui.GuiFactory import create_scroll_window, run_gui_loop
from .gui.ScrollView import ScrollView
from .server.WsServer import WsServer
from .sources.TranscriptFileSource import TranscriptFileSource


def load_config(config_path: str | Path) -> Dict:
    """Load configuration from JSON file.

    Args:
        config_path: Path to autoscroll_config.json

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


class ScrollPipeline:
    def __init__(self, document_path: str, config_path: str = "./config/autoscroll_config.json",
                 transcript_path: Optional[str] = None, serve: bool = False, verbose: bool = False) -> None:
        """Wire fragment producers, the position tracker and the display.

        Data flow:
            TranscriptFileSource ─┐
                                  ├─> fragment_queue -> PositionTracker -> PositionPublisher -> ScrollView
            WsServer (remote) ────┘                                                           └> WsServer clients

        Args:
            document_path: Reference document (UTF-8 text, one line per line)
            config_path: Path to configuration JSON file
            transcript_path: Optional transcript to replay as recognized fragments
            serve: Accept fragments from remote recognizers over WebSocket
            verbose: Enable verbose logging
        """
        self.config: Dict = load_config(config_path)
        self._is_stopped: bool = False

        self.document: ReferenceDocument = ReferenceDocument.from_file(document_path)

        tracker_config = self.config.get('tracker', {})
        self.fragment_queue: queue.Queue = queue.Queue(maxsize=int(tracker_config.get('queue_size', 50)))

        self.app_state: ApplicationState = ApplicationState()
        self.publisher: PositionPublisher = PositionPublisher(verbose=verbose)

        self.root: tk.Tk
        self.scroll_view: ScrollView
        self.root, self.scroll_view = create_scroll_window(self.config, self.app_state, self.document)
        self.publisher.subscribe(self.scroll_view)

        self.position_tracker: PositionTracker = PositionTracker.from_config(
            self.fragment_queue,
            self.document,
            self.publisher,
            self.config,
            app_state=self.app_state,
            verbose=verbose
        )

        self.components: List[Any] = [self.position_tracker]

        if transcript_path:
            logging.info(f"Using transcript input: {transcript_path}")
            transcript_source = TranscriptFileSource(
                fragment_queue=self.fragment_queue,
                config=self.config,
                file_path=transcript_path,
                verbose=verbose
            )
            self.app_state.register_component_observer(transcript_source.on_state_change)
            self.components.append(transcript_source)

        server_config = self.config.get('server', {})
        self.ws_server: Optional[WsServer] = None
        if serve or server_config.get('enabled', False):
            self.ws_server = WsServer(
                self.fragment_queue,
                self.app_state,
                host=server_config.get('host', "127.0.0.1"),
                port=int(server_config.get('port', 0)),
            )
            self.publisher.subscribe(self.ws_server)
            self.components.append(self.ws_server)

        if len(self.components) == 1:
            logging.warning("No fragment producers configured: pass --transcript or --serve")

    def start(self) -> None:
        logging.info("Starting auto-scroll pipeline...")

        for component in self.components:
            component.start()

        if self.ws_server is not None:
            logging.info(f"Accepting fragments on ws://{self.config.get('server', {}).get('host', '127.0.0.1')}:{self.ws_server.port}")

        self.app_state.set_state('running')
        logging.info("Pipeline running. Close the window to stop.")

    def stop(self) -> None:
        """Stop all pipeline components via observer pattern.

        Sets ApplicationState to 'shutdown', which triggers all component
        observers to stop themselves.
        """
        if self._is_stopped:
            return

        self._is_stopped = True

        logging.info("Stopping pipeline...")
        self.app_state.set_state('shutdown')
        logging.info("Pipeline stopped.")

    def run(self) -> None:
        self.start()

        def signal_handler(sig: int, frame: Any) -> None:
            self.stop()
            sys.exit(0)

        def on_window_close() -> None:
            self.stop()
            try:
                self.root.destroy()
            except tk.TclError:
                pass

        signal.signal(signal.SIGINT, signal_handler)
        self.root.protocol("WM_DELETE_WINDOW", on_window_close)

        try:
            run_gui_loop(self.root)
        finally:
            self.stop()
