"""Protocol definitions for auto-scroll components.

This module defines structural interfaces using Python's Protocol for duck typing.
"""

from typing import Protocol
from autoscroll.types import PositionUpdate, RecognizedFragment


class PositionSubscriber(Protocol):
    """Subscriber interface for position tracking events.

    Components implementing this protocol receive every recognized fragment
    and every accepted scroll position. The protocol uses structural
    subtyping, so classes don't need explicit inheritance.

    Thread Safety:
        Implementations must handle calls from background threads.
        PositionTracker invokes these methods from its daemon thread.
    """

    def on_fragment(self, fragment: RecognizedFragment, score: float) -> None:
        """Handle a fragment that has just been aligned.

        Called for accepted and rejected fragments alike, so a display can
        show what the recognizer heard even when the position does not move.

        Args:
            fragment: Fragment as delivered by the producer
            score: Confidence of its best match
        """
        ...

    def on_position_change(self, update: PositionUpdate) -> None:
        """Handle an accepted position.

        Args:
            update: PositionUpdate whose score passed the acceptance threshold
        """
        ...
