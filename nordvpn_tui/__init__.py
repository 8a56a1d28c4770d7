"""
NordVPN TUI
An interactive terminal controller for the NordVPN Linux client.
"""

import logging

__version__ = "0.1.0"
__author__ = "NordVPN TUI"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .models import Region, Disconnected, Connecting, Connected, InputMode, Session
from .status_parser import parse_status, describe_status
from .roster import parse_roster
from .filtering import apply_filter

__all__ = [
    "Region",
    "Disconnected",
    "Connecting",
    "Connected",
    "InputMode",
    "Session",
    "parse_status",
    "describe_status",
    "parse_roster",
    "apply_filter",
]
