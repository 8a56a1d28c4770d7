"""
TUI (Text User Interface) for NordVPN.
Full-screen region picker with live connection status.
"""

import logging
import termios
from contextlib import ExitStack
from typing import Callable, Optional

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel

from .backend import BackendError, VPNBackend
from .controller import SessionController
from .input_handler import handle_event
from .keys import TerminalReader
from .ui import render_session

logger = logging.getLogger(__name__)


STARTUP_HELP = """[bold red]Error: Failed to initialize nordvpn-tui[/]

This application requires the NordVPN service to be running.

Please ensure:
  1. NordVPN is installed: https://nordvpn.com/download/linux/
  2. The nordvpn daemon is running
  3. You are logged in: nordvpn login
"""


class NordVPNTUI:
    """Interactive TUI driving a SessionController."""

    def __init__(self, backend: VPNBackend, console: Optional[Console] = None,
                 show_help: bool = True,
                 reader_factory: Callable[[], TerminalReader] = TerminalReader):
        """
        Initialize the TUI.
        
        Args:
            backend: VPN client to use.
            console: Rich console to draw on.
            show_help: Show key help in the footer.
            reader_factory: Builds the terminal event reader.
        """
        self.console = console if console is not None else Console()
        self.controller = SessionController(backend)
        self.show_help = show_help
        self.reader_factory = reader_factory

    @property
    def session(self):
        return self.controller.session

    def initialize(self) -> bool:
        """
        Load the roster and status.
        
        Returns:
            False if the region list could not be loaded.
        """
        try:
            with self.console.status("[bold blue]Loading countries from NordVPN...[/]"):
                self.controller.start()
        except BackendError as e:
            logger.error("Startup failed: %s", e)
            self.console.print(Panel(STARTUP_HELP, border_style="red"))
            self.console.print(f"[dim]Original error: {escape(str(e))}[/]")
            return False
        return True

    def _render(self):
        return render_session(self.session, self.console.size.height, self.show_help)

    def run(self) -> int:
        """
        Run the interactive loop until the user quits.
        
        Returns:
            Process exit code.
        """
        if not self.initialize():
            return 1

        with ExitStack() as stack:
            try:
                reader = stack.enter_context(self.reader_factory())
            except (termios.error, OSError) as e:
                logger.error("Cannot open terminal input: %s", e)
                self.console.print(
                    f"[bold red]Error: nordvpn-tui needs an interactive terminal[/] "
                    f"[dim]({escape(str(e))})[/]"
                )
                return 1
            live = stack.enter_context(
                Live(self._render(), console=self.console, screen=True,
                     auto_refresh=False, redirect_stdout=False, redirect_stderr=False)
            )
            while self.session.running:
                try:
                    event = reader.read_event()
                except EOFError:
                    break
                handle_event(self.controller, event)
                live.update(self._render(), refresh=True)

        logger.info("Session ended")
        return 0


def run_tui(backend: VPNBackend, show_help: bool = True) -> int:
    """Entry point for TUI."""
    tui = NordVPNTUI(backend, show_help=show_help)
    return tui.run()
