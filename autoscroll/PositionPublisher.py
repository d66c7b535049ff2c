"""Publisher for position tracking events with thread-safe subscriber management.

This module implements the Observer pattern's publisher component, enabling
the display and the network endpoint to follow the tracked position
independently. The publisher isolates PositionTracker from its consumers.
"""

import threading
import logging
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from autoscroll.protocols import PositionSubscriber
    from autoscroll.types import PositionUpdate, RecognizedFragment


class PositionPublisher:
    """Manages subscribers and publishes position tracking events.

    Thread Safety:
        - Subscription management uses a lock for thread-safe registration
        - Subscriber list is copied before iteration (lock released during callbacks)
        - No locks held during subscriber callbacks (prevents deadlocks)

    Error Handling:
        - Each subscriber notification is wrapped in try-except
        - Exceptions logged but don't affect other subscribers

    Example:
        >>> publisher = PositionPublisher(verbose=True)
        >>> publisher.subscribe(scroll_view)
        >>> publisher.subscribe(ws_server)
        >>> publisher.publish_position(update)  # Both receive event
    """

    def __init__(self, verbose: bool = False) -> None:
        """Initialize publisher.

        Args:
            verbose: Enable verbose logging for subscription events
        """
        self._subscribers: List['PositionSubscriber'] = []
        self._lock: threading.Lock = threading.Lock()
        self._verbose: bool = verbose

    def subscribe(self, subscriber: 'PositionSubscriber') -> None:
        """Register a subscriber. Idempotent.

        Args:
            subscriber: Object implementing PositionSubscriber protocol
        """
        with self._lock:
            if subscriber not in self._subscribers:
                self._subscribers.append(subscriber)
                if self._verbose:
                    logging.info(f"Subscriber registered: {subscriber.__class__.__name__}")

    def unsubscribe(self, subscriber: 'PositionSubscriber') -> None:
        """Unregister a subscriber. Unknown subscribers are ignored."""
        with self._lock:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)
                if self._verbose:
                    logging.info(f"Subscriber unregistered: {subscriber.__class__.__name__}")

    def publish_fragment(self, fragment: 'RecognizedFragment', score: float) -> None:
        """Publish an aligned fragment to all subscribers.

        Args:
            fragment: Fragment that was just aligned
            score: Confidence of its best match
        """
        for subscriber in self._snapshot():
            try:
                subscriber.on_fragment(fragment, score)
            except Exception as e:
                logging.error(
                    f"Subscriber {subscriber.__class__.__name__} failed on_fragment: {e}",
                    exc_info=True
                )

    def publish_position(self, update: 'PositionUpdate') -> None:
        """Publish an accepted position to all subscribers.

        Args:
            update: Accepted PositionUpdate
        """
        for subscriber in self._snapshot():
            try:
                subscriber.on_position_change(update)
            except Exception as e:
                logging.error(
                    f"Subscriber {subscriber.__class__.__name__} failed on_position_change: {e}",
                    exc_info=True
                )

    def subscriber_count(self) -> int:
        """Get current number of subscribers (thread-safe)."""
        with self._lock:
            return len(self._subscribers)

    def _snapshot(self) -> List['PositionSubscriber']:
        # Copy under lock, notify outside it so subscribers may (un)subscribe
        with self._lock:
            return list(self._subscribers)
