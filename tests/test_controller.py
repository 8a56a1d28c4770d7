"""
Tests for the session controller.
"""

import pytest

from nordvpn_tui.backend import BackendError
from nordvpn_tui.controller import SessionController
from nordvpn_tui.models import (
    Connected, Connecting, Disconnected, InputMode, Message, MessageKind, Region
)

from conftest import CONNECTED_STATUS, FakeBackend


class TestStart:
    """Tests for controller startup."""

    def test_loads_roster_and_status(self):
        backend = FakeBackend(status=CONNECTED_STATUS)
        controller = SessionController(backend)
        controller.start()

        session = controller.session
        assert [r.id for r in session.roster] == [
            "Canada", "Germany", "South_Africa", "United_Kingdom", "United_States"
        ]
        assert session.filtered == session.roster
        assert session.selected_index == 0
        assert session.status == Connected(
            country="Germany", city="Frankfurt", server="de512.nordvpn.com", ip="185.130.184.12"
        )
        assert session.message is None

    def test_roster_failure_is_fatal(self):
        backend = FakeBackend()
        backend.fail["list_regions"] = "Whoops! Cannot reach System Daemon."
        controller = SessionController(backend)
        with pytest.raises(BackendError, match="Cannot reach"):
            controller.start()

    def test_status_failure_defaults_to_disconnected(self):
        backend = FakeBackend(status=CONNECTED_STATUS)
        backend.fail["query_status"] = "daemon down"
        controller = SessionController(backend)
        controller.start()
        assert controller.session.status == Disconnected()
        assert controller.session.message is None

    def test_reload_roster_reapplies_filter(self, controller, backend):
        """Reloading keeps the filter text and clamps the selection."""
        controller.session.filter_text = "united"
        controller.session.selected_index = 4
        backend.countries = "United_States\nFrance\n"
        controller.load_roster()
        assert controller.session.filtered == [Region.from_id("United_States")]
        assert controller.session.selected_index == 0


class TestConnect:
    """Tests for connect_selected."""

    def test_success_refreshes_status(self, controller, backend):
        backend.status_after_connect = CONNECTED_STATUS
        controller.move_down()
        controller.connect_selected()

        assert backend.calls == [("connect", "Germany"), ("query_status",)]
        assert controller.session.message == Message.success("Connecting to Germany...")
        assert isinstance(controller.session.status, Connected)

    def test_uses_display_name_in_message(self, controller):
        controller.session.selected_index = 2
        controller.connect_selected()
        assert controller.session.message.text == "Connecting to South Africa..."

    def test_stale_status_is_not_an_error(self, controller, backend):
        """The refresh right after connecting may still say disconnected."""
        controller.connect_selected()
        assert controller.session.status == Disconnected()
        assert controller.session.message.kind is MessageKind.SUCCESS

    def test_connecting_while_command_runs(self, controller, backend):
        seen = []
        original = backend.connect

        def connect(region_id):
            seen.append(controller.session.status)
            original(region_id)

        backend.connect = connect
        controller.connect_selected()
        assert seen == [Connecting()]

    def test_failure(self, controller, backend):
        backend.fail["connect"] = "The specified server does not exist."
        controller.connect_selected()
        assert controller.session.message == Message.error(
            "Failed to connect: The specified server does not exist."
        )
        assert controller.session.status == Disconnected()
        assert ("query_status",) not in backend.calls

    def test_no_selection(self, controller, backend):
        controller.append_filter_char("z")
        controller.connect_selected()
        assert controller.session.message == Message.error("No region selected")
        assert backend.calls == []

    def test_refresh_failure_after_connect(self, controller, backend):
        """Only one message is held: the later status error replaces the success."""
        backend.fail["query_status"] = "timeout"
        controller.connect_selected()
        assert controller.session.message == Message.error("Failed to get status: timeout")


class TestDisconnect:
    """Tests for disconnect."""

    def test_success(self, controller):
        controller.session.status = Connected(country="Germany")
        controller.disconnect()
        assert controller.session.status == Disconnected()
        assert controller.session.message == Message.success("Disconnected")

    def test_failure_keeps_state(self, controller, backend):
        controller.session.status = Connected(country="Germany")
        backend.fail["disconnect"] = "permission denied"
        controller.disconnect()
        assert controller.session.status == Connected(country="Germany")
        assert controller.session.message == Message.error("Failed to disconnect: permission denied")


class TestRefreshStatus:
    """Tests for refresh_status."""

    def test_replaces_state(self, controller, backend):
        backend.status = CONNECTED_STATUS
        controller.refresh_status()
        assert controller.session.status.country == "Germany"

    def test_failure_keeps_state(self, controller, backend):
        controller.session.status = Connected(country="Japan")
        backend.fail["query_status"] = "daemon down"
        controller.refresh_status()
        assert controller.session.status == Connected(country="Japan")
        assert controller.session.message.kind is MessageKind.ERROR


class TestNavigationAndFilter:
    """Tests for navigation and filter helpers."""

    def test_move_bounds(self, controller):
        controller.move_up()
        assert controller.session.selected_index == 0
        for _ in range(10):
            controller.move_down()
        assert controller.session.selected_index == 4

    def test_move_on_empty_view(self, controller):
        controller.append_filter_char("z")
        controller.move_down()
        controller.move_up()
        assert controller.session.filtered == []

    def test_filter_mode_switches(self, controller):
        controller.enter_filter_mode()
        assert controller.session.mode is InputMode.FILTER_ENTRY
        controller.leave_filter_mode()
        assert controller.session.mode is InputMode.NORMAL

    def test_pop_on_empty(self, controller):
        controller.pop_filter_char()
        assert controller.session.filter_text == ""
        assert len(controller.session.filtered) == 5

    def test_quit(self, controller):
        controller.quit()
        assert controller.session.running is False
