"""
GuiFactory provides the window layout for the auto-scroll display.
"""
import tkinter as tk
from tkinter import scrolledtext
from typing import Dict, Tuple, TYPE_CHECKING

from autoscroll.gui.ScrollView import ScrollView, DEFAULT_VISIBLE_LINES

if TYPE_CHECKING:
    from autoscroll.ApplicationState import ApplicationState
    from autoscroll.ReferenceDocument import ReferenceDocument


class GuiFactory:
    """Factory for creating GUI components with consistent configuration."""

    @staticmethod
    def create_window(title: str, geometry: str) -> tk.Tk:
        window = tk.Tk()
        window.title(title)
        window.geometry(geometry)
        return window

    @staticmethod
    def create_scrolled_text(parent, **kwargs) -> scrolledtext.ScrolledText:
        return scrolledtext.ScrolledText(parent, **kwargs)


def create_scroll_window(config: Dict,
                         app_state: 'ApplicationState',
                         document: 'ReferenceDocument') -> Tuple[tk.Tk, ScrollView]:
    """Creates the follower window: document view, status line and pause button.

    Args:
        config: Application configuration ('display' section)
        app_state: ApplicationState toggled by the pause button
        document: Reference document to display

    Returns:
        Tuple of (root, scroll_view)
    """
    display = config.get('display', {})
    root = GuiFactory.create_window("Auto-Scroll", display.get('geometry', "800x600"))
    app_state.set_tk_root(root)

    main_frame = tk.Frame(root, padx=10, pady=10)
    main_frame.pack(fill=tk.BOTH, expand=True)

    controls = tk.Frame(main_frame)
    controls.pack(fill=tk.X, pady=(0, 10))

    pause_button = tk.Button(controls, text="Pause", width=10)
    pause_button.pack(side=tk.LEFT)

    status_label = tk.Label(controls, text="Waiting for speech...", font=("Arial", 10), fg="gray", anchor="w")
    status_label.pack(side=tk.LEFT, fill=tk.X, expand=True, padx=(10, 0))

    text_widget = GuiFactory.create_scrolled_text(
        main_frame,
        wrap=tk.WORD,
        width=80,
        height=30,
        font=("Arial", int(display.get('font_size', 14))),
        bg="white",
        fg="black"
    )
    text_widget.pack(fill=tk.BOTH, expand=True)

    def on_pause_click() -> None:
        app_state.toggle_pause()

    def on_state_change(old_state: str, new_state: str) -> None:
        pause_button.config(text="Resume" if new_state == 'paused' else "Pause")

    pause_button.config(command=on_pause_click)
    app_state.register_gui_observer(on_state_change)

    scroll_view = ScrollView(
        text_widget,
        document,
        root=root,
        status_label=status_label,
        visible_lines=int(display.get('visible_lines', DEFAULT_VISIBLE_LINES)),
    )
    scroll_view.show_position(0)

    return root, scroll_view


def run_gui_loop(root: tk.Tk) -> None:
    """Starts the tkinter main loop."""
    try:
        root.mainloop()
    except KeyboardInterrupt:
        pass
    finally:
        try:
            root.destroy()
        except tk.TclError:
            pass
