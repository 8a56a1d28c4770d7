"""
Data models for NordVPN TUI.
"""

from dataclasses import dataclass, field
from typing import Optional
from enum import Enum


@dataclass(frozen=True)
class Region:
    """A connectable VPN region as reported by the client."""
    id: str
    display_name: str

    @classmethod
    def from_id(cls, region_id: str) -> "Region":
        """Build a region whose display name is the id with underscores as spaces."""
        return cls(id=region_id, display_name=region_id.replace("_", " "))

    def __str__(self) -> str:
        return self.display_name


class ConnectionState:
    """Base class of the connection states below."""


@dataclass(frozen=True)
class Disconnected(ConnectionState):
    """No tunnel is up."""


@dataclass(frozen=True)
class Connecting(ConnectionState):
    """A connect command is in flight."""


@dataclass(frozen=True)
class Connected(ConnectionState):
    """An established tunnel and whatever details the client reported."""
    country: str
    city: Optional[str] = None
    server: Optional[str] = None
    ip: Optional[str] = None


class InputMode(Enum):
    """How key presses are interpreted."""
    NORMAL = "normal"
    FILTER_ENTRY = "filter_entry"


class MessageKind(Enum):
    """Kind of a transient message."""
    ERROR = "error"
    SUCCESS = "success"


@dataclass(frozen=True)
class Message:
    """One-shot notification shown until the next key press."""
    kind: MessageKind
    text: str

    @classmethod
    def error(cls, text: str) -> "Message":
        return cls(MessageKind.ERROR, text)

    @classmethod
    def success(cls, text: str) -> "Message":
        return cls(MessageKind.SUCCESS, text)


@dataclass
class Session:
    """All mutable state of one interactive session."""
    roster: list[Region] = field(default_factory=list)
    filtered: list[Region] = field(default_factory=list)
    selected_index: int = 0
    filter_text: str = ""
    mode: InputMode = InputMode.NORMAL
    message: Optional[Message] = None
    status: ConnectionState = field(default_factory=Disconnected)
    running: bool = True

    @property
    def selected_region(self) -> Optional[Region]:
        """The highlighted region, or None when nothing matches the filter."""
        if not self.filtered:
            return None
        return self.filtered[self.selected_index]
