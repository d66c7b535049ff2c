import threading
import tkinter as tk
from tkinter import scrolledtext
from typing import Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from autoscroll.ReferenceDocument import ReferenceDocument
    from autoscroll.types import PositionUpdate, RecognizedFragment

DEFAULT_VISIBLE_LINES = 40


class ScrollView:
    """Shows the reference document scrolled to the tracked line.

    Renders up to visible_lines lines starting at the current position, with
    the current line highlighted, and a status line with the last recognized
    fragment. Implements PositionSubscriber; updates arriving from the
    PositionTracker thread are scheduled on the tkinter main loop.

    Args:
        text_widget: Text widget the document is rendered into
        document: Reference document lines
        root: Tk root for thread-safe scheduling (None in tests)
        status_label: Optional label for the last fragment and its score
        visible_lines: Number of lines rendered from the current position
    """

    def __init__(self, text_widget: scrolledtext.ScrolledText,
                 document: 'ReferenceDocument',
                 root: Optional[tk.Tk] = None,
                 status_label: Optional[tk.Label] = None,
                 visible_lines: int = DEFAULT_VISIBLE_LINES) -> None:
        self.text_widget: scrolledtext.ScrolledText = text_widget
        self.document: 'ReferenceDocument' = document
        self.root: Optional[tk.Tk] = root
        self.status_label: Optional[tk.Label] = status_label
        self.visible_lines: int = visible_lines
        self.current_line: int = 0

        self._setup_text_styles()

    def _is_main_thread(self) -> bool:
        return threading.current_thread() is threading.main_thread()

    def _setup_text_styles(self) -> None:
        self.text_widget.tag_configure("current", foreground="black", background="#fff3b0",
                                       font=("TkDefaultFont", 14, "bold"))
        self.text_widget.tag_configure("upcoming", foreground="gray25", font=("TkDefaultFont", 14, "normal"))

    def _schedule(self, callback, *args) -> None:
        if self.root and not self._is_main_thread():
            self.root.after(0, callback, *args)
        else:
            # Direct call when on main thread or in tests
            callback(*args)

    def on_position_change(self, update: 'PositionUpdate') -> None:
        """Scroll to an accepted position."""
        self._schedule(self.show_position, update.line_index)

    def on_fragment(self, fragment: 'RecognizedFragment', score: float) -> None:
        """Show what was heard, whether or not the position moved."""
        self._schedule(self._show_status, f"Heard ({fragment.source}): {fragment.text}  [{score:.2f}]")

    def show_position(self, line_index: int) -> None:
        """Render the document starting at line_index.

        Must run on the main thread.
        """
        lines: Sequence[str] = self.document.visible_lines(line_index, self.visible_lines)
        self.current_line = line_index

        self.text_widget.delete("1.0", tk.END)
        for offset, line in enumerate(lines):
            tag = "current" if offset == 0 else "upcoming"
            self.text_widget.insert(tk.END, line + "\n", tag)
        self.text_widget.see("1.0")

    def _show_status(self, text: str) -> None:
        if self.status_label is not None:
            self.status_label.config(text=text)
