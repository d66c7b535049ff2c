"""Type definitions for auto-scroll queue messages and match results."""

from dataclasses import dataclass, field
import time


@dataclass(frozen=True)
class MatchResult:
    """Best alignment of one recognized fragment against the document.

    Attributes:
        line_index: 0-based index of the matched document line, always valid
        score: Match confidence in [0, 1]
    """
    line_index: int
    score: float


@dataclass
class RecognizedFragment:
    """Burst of recognized text delivered by a recognition producer.

    Producers are independent and unweighted: fragments from different
    sources share one queue and are aligned in arrival order.

    Attributes:
        text: Raw recognized text (punctuation and case as delivered)
        source: Producer name, e.g. 'transcript' or 'ws:<peer>'
        timestamp: Wall-clock time the fragment was produced
    """
    text: str
    source: str = 'unknown'
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class PositionUpdate:
    """Accepted scroll position published to display and network subscribers.

    Attributes:
        line_index: Line the display should scroll to
        score: Confidence of the match that produced this update
        fragment: Fragment the match was computed from
    """
    line_index: int
    score: float
    fragment: RecognizedFragment
