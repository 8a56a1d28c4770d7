"""
Rendering of a session with Rich.
"""

from typing import Optional

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text
from rich.box import ROUNDED, HEAVY, SQUARE

from .models import Connected, Connecting, ConnectionState, Disconnected, InputMode, MessageKind, Session
from .status_parser import describe_status


HELP_TEXT = (
    "↑/↓ j/k: navigate  Enter: connect  Ctrl+D: disconnect  "
    "Ctrl+R: refresh  /: filter  q/Esc: quit"
)

# Outer border plus the status, filter and footer panels and the list borders
FIXED_ROWS = 2 + 3 + 3 + 3 + 2


def _status_style(state: ConnectionState) -> tuple[str, str]:
    """Get (color, symbol) for a connection state."""
    if isinstance(state, Connected):
        return "green", "●"
    if isinstance(state, Connecting):
        return "yellow", "◐"
    if isinstance(state, Disconnected):
        return "red", "●"
    raise TypeError(f"Unknown connection state: {state!r}")


def _create_status_panel(session: Session) -> Panel:
    color, symbol = _status_style(session.status)

    content = Text()
    content.append(symbol, style=color)
    content.append(" ")
    content.append(describe_status(session.status), style=f"bold {color}")
    if isinstance(session.status, Connected) and session.status.ip:
        content.append(f"  IP: {session.status.ip}", style="dim")

    return Panel(
        content,
        title="[bold white] Status [/]",
        title_align="left",
        box=HEAVY,
        border_style=color,
    )


def _create_filter_panel(session: Session) -> Panel:
    if session.mode is InputMode.FILTER_ENTRY:
        content = Text(f"/{session.filter_text}_", style="bold yellow")
        border = "yellow"
    elif session.filter_text:
        content = Text(f"Filter: {session.filter_text}", style="cyan")
        border = "cyan"
    else:
        content = Text("Type to filter countries", style="bright_black")
        border = "bright_black"

    return Panel(
        content,
        title="[bold white] Filter [/]",
        title_align="left",
        box=SQUARE,
        border_style=border,
    )


def visible_window(count: int, selected: int, size: int) -> tuple[int, int]:
    """
    Get the [start, end) slice of a list of `count` rows to display.
    
    The selected row is always inside the window when the list is not empty.
    """
    size = max(1, size)
    if count <= size:
        return 0, count
    start = min(max(0, selected - size // 2), count - size)
    return start, start + size


def _connected_name(state: ConnectionState) -> Optional[str]:
    if isinstance(state, Connected):
        return state.country.replace("_", " ").lower()
    return None


def _create_region_panel(session: Session, rows: int) -> Panel:
    connected = _connected_name(session.status)
    start, end = visible_window(len(session.filtered), session.selected_index, rows)

    content = Text()
    if not session.filtered:
        content.append("No matches", style="dim")
    for i in range(start, end):
        region = session.filtered[i]
        is_selected = i == session.selected_index
        is_connected = connected is not None and region.display_name.lower() == connected

        line = ("▶ " if is_selected else "  ") + region.display_name
        if is_connected:
            line += " ●"

        if is_selected:
            style = "bold cyan"
        elif is_connected:
            style = "green"
        else:
            style = "white"

        content.append(line, style=style)
        if i < end - 1:
            content.append("\n")

    title = f"[bold white] Countries ({len(session.filtered)}/{len(session.roster)}) [/]"
    return Panel(
        content,
        title=title,
        title_align="left",
        box=ROUNDED,
        border_style="blue",
        height=rows + 2,
    )


def _create_footer_panel(session: Session, show_help: bool) -> Panel:
    message = session.message
    if message is not None and message.kind is MessageKind.ERROR:
        content = Text(message.text, style="bold red")
        border = "red"
    elif message is not None and message.kind is MessageKind.SUCCESS:
        content = Text(message.text, style="bold green")
        border = "green"
    elif show_help:
        content = Text(HELP_TEXT, style="dim")
        border = "bright_black"
    else:
        content = Text("")
        border = "bright_black"

    return Panel(content, box=ROUNDED, border_style=border)


def render_session(session: Session, height: int, show_help: bool = True) -> RenderableType:
    """
    Build the full screen for a session.
    
    Args:
        session: Session to draw.
        height: Terminal height in rows.
        show_help: Whether to show key help when no message is held.
        
    Returns:
        A renderable filling `height` rows.
    """
    rows = max(1, height - FIXED_ROWS)
    body = Group(
        _create_status_panel(session),
        _create_filter_panel(session),
        _create_region_panel(session, rows),
        _create_footer_panel(session, show_help),
    )
    return Panel(
        body,
        title="[bold cyan] NordVPN [/]",
        box=ROUNDED,
        border_style="bright_cyan",
        padding=(0, 0),
        height=max(height, FIXED_ROWS + 1),
    )
