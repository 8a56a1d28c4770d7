"""
Status parser - turns `nordvpn status` output into a connection state.
"""

from typing import Optional

from .models import ConnectionState, Connected, Connecting, Disconnected


DISCONNECTED_MARKER = "Status: Disconnected"
CONNECTED_MARKER = "Status: Connected"

COUNTRY_KEY = "Country:"
CITY_KEY = "City:"
SERVER_KEYS = ("Server:", "Hostname:")
IP_KEY = "IP:"


def _value_after(line: str, prefixes: tuple[str, ...]) -> Optional[str]:
    """Return the trimmed remainder of line after the first matching prefix."""
    for prefix in prefixes:
        if line.startswith(prefix):
            return line[len(prefix):].strip()
    return None


def parse_status(raw: str) -> ConnectionState:
    """
    Parse raw status text into a connection state.
    
    Never raises: anything that does not describe a connection with a
    known country is reported as Disconnected.
    
    Args:
        raw: Multi-line output of the status command.
        
    Returns:
        Disconnected or Connected.
    """
    lines = raw.splitlines()

    if any(DISCONNECTED_MARKER in line for line in lines):
        return Disconnected()

    if not any(CONNECTED_MARKER in line for line in lines):
        return Disconnected()

    country = None
    city = None
    server = None
    ip = None

    # Later occurrences of a key overwrite earlier ones
    for line in lines:
        line = line.strip()
        value = _value_after(line, (COUNTRY_KEY,))
        if value is not None:
            country = value
            continue
        value = _value_after(line, (CITY_KEY,))
        if value is not None:
            city = value
            continue
        value = _value_after(line, SERVER_KEYS)
        if value is not None:
            server = value
            continue
        value = _value_after(line, (IP_KEY,))
        if value is not None:
            ip = value

    if country is None:
        return Disconnected()

    return Connected(country=country, city=city, server=server, ip=ip)


def describe_status(state: ConnectionState) -> str:
    """Get a one-line human readable description of a connection state."""
    if isinstance(state, Connected):
        if state.city:
            text = f"Connected to {state.city}, {state.country}"
        else:
            text = f"Connected to {state.country}"
        if state.server:
            text += f" ({state.server})"
        return text
    if isinstance(state, Connecting):
        return "Connecting..."
    if isinstance(state, Disconnected):
        return "Disconnected"
    raise TypeError(f"Unknown connection state: {state!r}")
