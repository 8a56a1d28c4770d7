"""
Session controller - owns the session state and issues backend commands.
"""

import logging
from typing import Optional

from .backend import BackendError, VPNBackend
from .filtering import refilter
from .models import Connecting, Disconnected, InputMode, Message, Session
from .roster import parse_roster
from .status_parser import parse_status

logger = logging.getLogger(__name__)


class SessionController:
    """
    Holds the interactive session and performs every state change on it.
    
    Backend failures after startup never propagate: they become a
    transient error message and the session stays consistent.
    """

    def __init__(self, backend: VPNBackend, session: Optional[Session] = None):
        """
        Initialize the controller.
        
        Args:
            backend: VPN client used for all commands.
            session: Existing session to drive. A fresh one if None.
        """
        self.backend = backend
        self.session = session if session is not None else Session()

    # Startup

    def start(self) -> None:
        """
        Load the roster and the current status.
        
        Raises:
            BackendError: If the roster cannot be loaded.
        """
        self.load_roster()
        try:
            self.session.status = parse_status(self.backend.query_status())
        except BackendError as e:
            logger.warning("Initial status query failed: %s", e)
            self.session.status = Disconnected()

    def load_roster(self) -> None:
        """
        Replace the roster from the backend and refresh the filtered view.
        
        Raises:
            BackendError: If the region list cannot be fetched.
        """
        self.session.roster = parse_roster(self.backend.list_regions())
        logger.info("Loaded %d regions", len(self.session.roster))
        refilter(self.session)

    # Messages

    def clear_message(self) -> None:
        self.session.message = None

    def _error(self, text: str) -> None:
        self.session.message = Message.error(text)

    def _success(self, text: str) -> None:
        self.session.message = Message.success(text)

    # Navigation

    def move_up(self) -> None:
        """Select the previous region, stopping at the first one."""
        if self.session.filtered and self.session.selected_index > 0:
            self.session.selected_index -= 1

    def move_down(self) -> None:
        """Select the next region, stopping at the last one."""
        if self.session.selected_index + 1 < len(self.session.filtered):
            self.session.selected_index += 1

    # Filtering

    def enter_filter_mode(self) -> None:
        self.session.mode = InputMode.FILTER_ENTRY

    def leave_filter_mode(self) -> None:
        self.session.mode = InputMode.NORMAL

    def append_filter_char(self, char: str) -> None:
        """Add a character to the filter text and refilter."""
        self.session.filter_text += char
        refilter(self.session)

    def pop_filter_char(self) -> None:
        """Remove the last filter character, if any, and refilter."""
        self.session.filter_text = self.session.filter_text[:-1]
        refilter(self.session)

    # Backend actions

    def connect_selected(self) -> None:
        """Connect to the highlighted region, then refresh the status once."""
        region = self.session.selected_region
        if region is None:
            self._error("No region selected")
            return

        self.session.status = Connecting()
        try:
            self.backend.connect(region.id)
        except BackendError as e:
            self._error(f"Failed to connect: {e}")
            self.session.status = Disconnected()
            return

        self._success(f"Connecting to {region.display_name}...")
        # The tunnel may not be reported yet; a stale status is accepted
        self.refresh_status()

    def disconnect(self) -> None:
        """Disconnect from the VPN."""
        try:
            self.backend.disconnect()
        except BackendError as e:
            self._error(f"Failed to disconnect: {e}")
            return

        self._success("Disconnected")
        self.session.status = Disconnected()

    def refresh_status(self) -> None:
        """Re-query the connection status, keeping the old one on failure."""
        try:
            raw = self.backend.query_status()
        except BackendError as e:
            self._error(f"Failed to get status: {e}")
            return
        self.session.status = parse_status(raw)

    def quit(self) -> None:
        self.session.running = False
