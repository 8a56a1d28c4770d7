"""
Input state machine - interprets key events according to the input mode.
"""

from .controller import SessionController
from .keys import Event, Key, KeyEvent, KeyEventKind
from .models import InputMode


QUIT_CHARS = ("q", "Q")
UP_CHARS = ("k",)
DOWN_CHARS = ("j",)


def handle_event(controller: SessionController, event: Event) -> None:
    """
    Apply one input event to the controller's session.
    
    Only key presses change anything. Every key press first clears the
    transient message, then is dispatched on the current input mode.
    """
    if not isinstance(event, KeyEvent) or event.kind != KeyEventKind.PRESS:
        return

    controller.clear_message()

    mode = controller.session.mode
    if mode is InputMode.FILTER_ENTRY:
        _handle_filter_entry(controller, event)
    elif mode is InputMode.NORMAL:
        _handle_normal(controller, event)
    else:
        raise ValueError(f"Unknown input mode: {mode!r}")


def _handle_filter_entry(controller: SessionController, event: KeyEvent) -> None:
    if event.key in (Key.ESCAPE, Key.ENTER):
        controller.leave_filter_mode()
    elif event.key == Key.CHAR:
        if event.is_plain:
            controller.append_filter_char(event.char)
    elif event.key == Key.BACKSPACE:
        controller.pop_filter_char()
    elif event.key in (Key.UP, Key.DOWN):
        # Navigating leaves the filter but still moves the selection
        controller.leave_filter_mode()
        if event.key == Key.UP:
            controller.move_up()
        else:
            controller.move_down()


def _handle_normal(controller: SessionController, event: KeyEvent) -> None:
    key = event.key
    char = event.char

    if key == Key.ESCAPE:
        controller.quit()
    elif key == Key.UP or (key == Key.CHAR and char in UP_CHARS):
        controller.move_up()
    elif key == Key.DOWN or (key == Key.CHAR and char in DOWN_CHARS):
        controller.move_down()
    elif key == Key.CHAR and event.is_control:
        lowered = char.lower()
        if lowered == "c":
            controller.quit()
        elif lowered == "d":
            controller.disconnect()
        elif lowered == "r":
            controller.refresh_status()
        elif char == "/":
            controller.enter_filter_mode()
    elif key == Key.ENTER:
        controller.connect_selected()
    elif key == Key.CHAR:
        if char == "/":
            controller.enter_filter_mode()
        elif not event.is_plain:
            return
        elif char in QUIT_CHARS:
            controller.quit()
        elif char.isalnum():
            # Typing in normal mode starts a filter
            controller.enter_filter_mode()
            controller.append_filter_char(char)
    elif key == Key.BACKSPACE and event.is_plain:
        if controller.session.filter_text:
            controller.enter_filter_mode()
            controller.pop_filter_char()
