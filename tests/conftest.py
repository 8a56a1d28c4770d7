"""
Shared fixtures.
"""

from typing import Optional

import pytest

from nordvpn_tui.backend import BackendError, VPNBackend
from nordvpn_tui.controller import SessionController


COUNTRIES = "Canada\nGermany\nSouth_Africa\nUnited_Kingdom\nUnited_States\n"

CONNECTED_STATUS = """Status: Connected
Hostname: de512.nordvpn.com
IP: 185.130.184.12
Country: Germany
City: Frankfurt
Current technology: NORDLYNX
"""

DISCONNECTED_STATUS = "Status: Disconnected\n"


class FakeBackend(VPNBackend):
    """In-memory backend recording the calls it receives."""

    def __init__(self, countries: str = COUNTRIES, status: str = DISCONNECTED_STATUS):
        self.countries = countries
        self.status = status
        self.calls: list[tuple] = []
        self.fail: dict[str, str] = {}
        self.status_after_connect: Optional[str] = None

    def _maybe_fail(self, name: str) -> None:
        if name in self.fail:
            raise BackendError(self.fail[name])

    def list_regions(self) -> str:
        self.calls.append(("list_regions",))
        self._maybe_fail("list_regions")
        return self.countries

    def query_status(self) -> str:
        self.calls.append(("query_status",))
        self._maybe_fail("query_status")
        return self.status

    def connect(self, region_id: str) -> None:
        self.calls.append(("connect", region_id))
        self._maybe_fail("connect")
        if self.status_after_connect is not None:
            self.status = self.status_after_connect

    def disconnect(self) -> None:
        self.calls.append(("disconnect",))
        self._maybe_fail("disconnect")
        self.status = DISCONNECTED_STATUS


@pytest.fixture
def backend():
    """Fake backend with five countries, disconnected."""
    return FakeBackend()


@pytest.fixture
def controller(backend):
    """Started controller over the fake backend."""
    controller = SessionController(backend)
    controller.start()
    backend.calls.clear()
    return controller
