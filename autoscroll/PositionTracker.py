# autoscroll/PositionTracker.py
import queue
import threading
import logging
from typing import Optional, Sequence, TYPE_CHECKING

from .TextNormalizer import TextNormalizer
from .matching.LineAligner import LineAligner
from .PositionPublisher import PositionPublisher
from .types import MatchResult, PositionUpdate, RecognizedFragment

if TYPE_CHECKING:
    from autoscroll.ApplicationState import ApplicationState

DEFAULT_ACCEPTANCE_THRESHOLD = 0.7


class PositionTracker:
    """Follows the reader through the document from recognized fragments.

    PositionTracker consumes RecognizedFragments from a queue that any number
    of producers (transcript replay, remote recognizers) write into. Each
    fragment is normalized and aligned against the whole document; a match
    scoring strictly above the acceptance threshold moves the tracked
    position, anything else leaves the display where it is.

    Matching is serialized on one daemon thread. With coalescing enabled, a
    backlog that built up while a match was running is drained and only the
    newest fragment is aligned.

    Observer Pattern:
    - Subscribes to ApplicationState for pause and shutdown events
    - Publishes fragments and positions via PositionPublisher

    Args:
        fragment_queue: Queue to read RecognizedFragments from
        document: Reference document lines
        publisher: PositionPublisher for distributing results to subscribers
        aligner: Optional LineAligner; default window and weights if None
        app_state: ApplicationState for observer pattern (REQUIRED)
        acceptance_threshold: Score that must be exceeded to move the position
        coalesce_backlog: Align only the newest of several queued fragments
        text_normalizer: Optional normalizer for fragment text
        verbose: Enable verbose logging
    """

    def __init__(self, fragment_queue: queue.Queue,
                 document: Sequence[str],
                 publisher: PositionPublisher,
                 aligner: Optional[LineAligner] = None,
                 app_state: 'ApplicationState' = None,
                 acceptance_threshold: float = DEFAULT_ACCEPTANCE_THRESHOLD,
                 coalesce_backlog: bool = True,
                 text_normalizer: Optional[TextNormalizer] = None,
                 verbose: bool = False
                 ) -> None:
        if not 0.0 <= acceptance_threshold <= 1.0:
            raise ValueError(f"acceptance_threshold must be within [0, 1], got {acceptance_threshold}")

        self.fragment_queue: queue.Queue = fragment_queue
        self.document: Sequence[str] = document
        self.publisher: PositionPublisher = publisher
        self.aligner: LineAligner = aligner if aligner is not None else LineAligner(verbose=verbose)
        self.text_normalizer: TextNormalizer = text_normalizer if text_normalizer is not None else TextNormalizer()
        self.acceptance_threshold: float = acceptance_threshold
        self.coalesce_backlog: bool = coalesce_backlog
        self.app_state: 'ApplicationState' = app_state
        self.verbose: bool = verbose

        self.is_running: bool = False
        self.thread: Optional[threading.Thread] = None
        self.current_line: int = 0
        self.last_result: Optional[MatchResult] = None

        self.app_state.register_component_observer(self.on_state_change)

    @classmethod
    def from_config(cls, fragment_queue: queue.Queue, document: Sequence[str],
                    publisher: PositionPublisher, config: dict,
                    app_state: 'ApplicationState', verbose: bool = False) -> 'PositionTracker':
        """Create tracker from the 'matching' and 'tracker' config sections."""
        matching = config.get('matching', {})
        tracker = config.get('tracker', {})
        return cls(
            fragment_queue,
            document,
            publisher,
            aligner=LineAligner.from_config(config, verbose=verbose),
            app_state=app_state,
            acceptance_threshold=float(matching.get('acceptance_threshold', DEFAULT_ACCEPTANCE_THRESHOLD)),
            coalesce_backlog=bool(tracker.get('coalesce_backlog', True)),
            verbose=verbose,
        )

    def process_fragment(self, fragment: RecognizedFragment) -> Optional[MatchResult]:
        """Align one fragment and publish the outcome.

        Args:
            fragment: Fragment to align

        Returns:
            The MatchResult, or None if the fragment had no usable words
        """
        tokens = self.text_normalizer.tokenize(fragment.text)
        if not tokens:
            if self.verbose:
                logging.debug(f"PositionTracker: ignoring empty fragment from {fragment.source}")
            return None

        result = self.aligner.find_best_match(tokens, self.document)
        self.last_result = result

        if self.verbose:
            logging.debug(
                f"PositionTracker: '{fragment.text}' from {fragment.source} "
                f"-> line {result.line_index} score={result.score:.3f}"
            )

        self.publisher.publish_fragment(fragment, result.score)

        if result.score > self.acceptance_threshold:
            self.current_line = result.line_index
            self.publisher.publish_position(
                PositionUpdate(line_index=result.line_index, score=result.score, fragment=fragment)
            )
        elif self.verbose:
            logging.debug(
                f"PositionTracker: score {result.score:.3f} below threshold "
                f"{self.acceptance_threshold}, staying at line {self.current_line}"
            )

        return result

    def _drain_backlog(self, fragment: RecognizedFragment) -> RecognizedFragment:
        """Return the newest queued fragment, discarding older ones."""
        skipped = 0
        while True:
            try:
                fragment = self.fragment_queue.get_nowait()
                skipped += 1
            except queue.Empty:
                break

        if skipped and self.verbose:
            logging.debug(f"PositionTracker: coalesced {skipped} older fragment(s)")
        return fragment

    def process(self) -> None:
        """Read fragments from queue and align them until stop() is called."""
        while self.is_running:
            try:
                fragment: RecognizedFragment = self.fragment_queue.get(timeout=0.1)
            except queue.Empty:
                continue

            if self.coalesce_backlog:
                fragment = self._drain_backlog(fragment)

            if self.app_state.is_paused():
                continue

            self.process_fragment(fragment)

    def start(self) -> None:
        """Start aligning fragments in a background daemon thread."""
        self.is_running = True
        self.thread = threading.Thread(target=self.process, daemon=True, name="PositionTracker")
        self.thread.start()

    def stop(self) -> None:
        """Stop the background thread after its current fragment."""
        if not self.is_running:
            return

        self.is_running = False
        if self.thread is not None and self.thread is not threading.current_thread():
            self.thread.join(timeout=1.0)

    def on_state_change(self, old_state: str, new_state: str) -> None:
        """Observes ApplicationState and reacts to shutdown."""
        if new_state == 'shutdown':
            self.stop()
