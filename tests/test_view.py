"""Tests for view rendering."""

import pytest

from calendar_quickstart.session import SessionState
from calendar_quickstart.view import View


class TestButton:
    @pytest.mark.parametrize(
        "client_ready,identity_ready,enabled",
        [(False, False, False), (True, False, False), (False, True, False), (True, True, True)],
    )
    def test_authorize_enabled_when_ready(self, client_ready, identity_ready, enabled):
        """Should only enable Authorize once both SDKs are ready."""
        state = SessionState(client_ready=client_ready, identity_ready=identity_ready)
        assert View().button(state) == ("Authorize", enabled)

    def test_sign_out_when_authorized(self):
        state = SessionState(client_ready=True, identity_ready=True, authorized=True)
        assert View().button(state) == ("Sign Out", True)


class TestRender:
    def test_render_unauthorized(self):
        rendered = View().render(SessionState())
        assert rendered.startswith("Google Calendar API Quickstart")
        assert "[Authorize] (disabled)" in rendered

    def test_render_events_below_button(self):
        view = View()
        view.show_events("Standup (2024-01-01T09:00:00Z)")
        state = SessionState(client_ready=True, identity_ready=True, authorized=True)

        lines = view.render(state).splitlines()
        assert lines.index("[Sign Out]") < lines.index("Standup (2024-01-01T09:00:00Z)")

    def test_clear_events(self):
        view = View()
        view.show_events("something")
        view.clear_events()
        assert view.events == ""
        assert "something" not in view.render(SessionState())
