# autoscroll/ApplicationState.py
"""
Follower lifecycle: whether fragments are being aligned right now.

    starting ──> running <──> paused
        │           │           │
        └───────────┴───────────┴──> shutdown

PositionTracker drops fragments while paused; every producer and the
WebSocket server stop themselves when shutdown is entered. The Pause button
flips running and paused through toggle_pause().
"""
import threading
from typing import Callable, List, Optional

StateObserver = Callable[[str, str], None]

_NEXT_STATES = {
    'starting': ('running', 'shutdown'),
    'running': ('paused', 'shutdown'),
    'paused': ('running', 'shutdown'),
    'shutdown': (),
}


class ApplicationState:
    """Thread-safe follower state with change notification.

    Observers receive (old_state, new_state) after the change is applied.
    Component observers run on the thread that changed the state. GUI
    observers must run on the tkinter thread, so a change made on a worker
    thread is handed to root.after() once a root is attached.

    Args:
        root: tkinter root, usually attached later with set_tk_root()
    """

    def __init__(self, root=None):
        self._state: str = 'starting'
        self._lock = threading.Lock()
        self._component_observers: List[StateObserver] = []
        self._gui_observers: List[StateObserver] = []
        self._root: Optional[object] = root

    def set_tk_root(self, root) -> None:
        self._root = root

    def get_state(self) -> str:
        with self._lock:
            return self._state

    def is_paused(self) -> bool:
        return self.get_state() == 'paused'

    def set_state(self, new_state: str) -> None:
        """Move to new_state and notify observers.

        Raises:
            ValueError: If new_state is not reachable from the current state
        """
        with self._lock:
            old_state = self._state
            if new_state not in _NEXT_STATES[old_state]:
                raise ValueError(f"Invalid state transition: {old_state} -> {new_state}")
            self._state = new_state

        self._notify_observers(old_state, new_state)

    def toggle_pause(self) -> str:
        """Pause a running follower or resume a paused one.

        Before start and after shutdown the state is left alone.

        Returns:
            State after the call
        """
        with self._lock:
            current = self._state
        if current == 'running':
            self.set_state('paused')
            return 'paused'
        if current == 'paused':
            self.set_state('running')
            return 'running'
        return current

    def register_component_observer(self, observer: StateObserver) -> None:
        with self._lock:
            self._component_observers.append(observer)

    def register_gui_observer(self, observer: StateObserver) -> None:
        with self._lock:
            self._gui_observers.append(observer)

    def _notify_observers(self, old_state: str, new_state: str) -> None:
        # Observers are called without the lock so they may query the state
        with self._lock:
            component_observers = list(self._component_observers)
            gui_observers = list(self._gui_observers)

        for observer in component_observers:
            observer(old_state, new_state)

        on_gui_thread = threading.current_thread() is threading.main_thread()
        for observer in gui_observers:
            if on_gui_thread or self._root is None:
                observer(old_state, new_state)
            else:
                self._root.after(0, observer, old_state, new_state)
