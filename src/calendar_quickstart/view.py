"""Terminal rendering of the session state and event list."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from calendar_quickstart.session import SessionState

TITLE = "Google Calendar API Quickstart"
AUTHORIZE_LABEL = "Authorize"
SIGN_OUT_LABEL = "Sign Out"


class View:
    """Authorize/Sign Out button plus the event text block."""

    def __init__(self) -> None:
        self.events = ""

    def show_events(self, text: str) -> None:
        self.events = text

    def clear_events(self) -> None:
        self.events = ""

    def button(self, state: SessionState) -> tuple[str, bool]:
        """Return (label, enabled) for the single action button."""
        if state.authorized:
            return SIGN_OUT_LABEL, True
        return AUTHORIZE_LABEL, state.client_ready and state.identity_ready

    def render(self, state: SessionState) -> str:
        label, enabled = self.button(state)
        lines = [TITLE, "=" * len(TITLE), ""]
        lines.append(f"[{label}]" if enabled else f"[{label}] (disabled)")
        if self.events:
            lines.append("")
            lines.append(self.events)
        return "\n".join(lines)
