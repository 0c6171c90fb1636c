"""CLI for calendar-quickstart.

Usage:
    calendar-quickstart run                 # Interactive: authorize, list events, sign out
    calendar-quickstart events              # Print upcoming events from the saved session
    calendar-quickstart status              # Show configuration and token status
    calendar-quickstart signout             # Revoke and forget the saved token
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import webbrowser

from calendar_quickstart.calendar import EventsFetcher
from calendar_quickstart.google import ApiClient, ConfigurationError, TokenStore
from calendar_quickstart.google.identity import ConsentHandler
from calendar_quickstart.loader import ScriptLoader
from calendar_quickstart.session import AuthSessionController
from calendar_quickstart.view import View

COMMANDS = {
    "a": "authorize",
    "authorize": "authorize",
    "s": "signout",
    "signout": "signout",
    "r": "refresh",
    "refresh": "refresh",
    "q": "quit",
    "quit": "quit",
}


def browser_consent(open_browser: bool = True) -> ConsentHandler:
    """Consent handler that opens the browser and asks for the redirect URL."""

    def _ask(url: str) -> str:
        print("\nA browser window will open for Google consent.")
        print("After granting access, copy the redirect URL back here.\n")
        print(f"Authorization URL:\n{url}\n")
        if open_browser:
            webbrowser.open(url)
        return input("Paste redirect URL: ").strip()

    async def consent(url: str) -> str:
        return await asyncio.to_thread(_ask, url)

    return consent


def build_controller(open_browser: bool = True) -> AuthSessionController:
    """Wire up the controller from settings.

    Raises:
        ConfigurationError: If a required setting is missing.
    """
    from calendar_quickstart.config import load_settings

    settings = load_settings()
    view = View()
    api_client = ApiClient()
    return AuthSessionController(
        settings=settings,
        loader=ScriptLoader(),
        store=TokenStore(settings.token_path),
        api_client=api_client,
        fetcher=EventsFetcher(api_client, view),
        view=view,
        consent=browser_consent(open_browser),
    )


async def _run(controller: AuthSessionController) -> int:
    await controller.initialize()

    while True:
        print()
        print(controller.render())
        print()
        raw = await asyncio.to_thread(input, "[a]uthorize, [s]ignout, [r]efresh, [q]uit: ")
        command = COMMANDS.get(raw.strip().lower())

        if command == "quit":
            return 0
        if command == "authorize":
            if not controller.can_authorize:
                print("Not ready yet")
            elif not await controller.authorize():
                print("Authorization failed - see log output")
        elif command == "signout":
            if not await controller.sign_out():
                print("Not signed in")
        elif command == "refresh":
            if await controller.refresh_events() is None:
                print("Not signed in")
        else:
            print(f"Unknown command: {raw.strip()}")


async def _events(controller: AuthSessionController) -> int:
    await controller.initialize()
    if not controller.state.authorized:
        print("No saved session - run 'calendar-quickstart run' and authorize")
        return 1
    print(controller.render())
    return 0


async def _signout(controller: AuthSessionController) -> int:
    await controller.initialize()
    if not await controller.sign_out():
        print("No saved session")
        return 0
    print("Token revoked and local cache cleared")
    return 0


def cmd_status() -> int:
    """Show configuration and token status."""
    from calendar_quickstart.config import GOOGLE_TOKEN, get_config_status

    status = get_config_status()

    print("=" * 60)
    print("CALENDAR QUICKSTART STATUS")
    print("=" * 60)
    print()
    print(f"Repository: {status['repo_root']}")
    print()
    print(f"  .env:               {'[x]' if status['env_file'] else '[ ]'}")
    print(f"  GCAL_CLIENT_ID:     {'[x]' if status['client_id'] else '[ ]'}")
    print(f"  GCAL_API_KEY:       {'[x]' if status['api_key'] else '[ ]'}")
    print(f"  GCAL_CLIENT_SECRET: {'[x]' if status['client_secret'] else '[ ]'}")

    try:
        from calendar_quickstart.config import load_settings

        token_path = load_settings().token_path
    except ConfigurationError:
        token_path = GOOGLE_TOKEN
    store = TokenStore(token_path)
    print(f"  token.json:         {'[x]' if store.exists() else '[ ]'}  ({token_path})")
    print()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="calendar-quickstart",
        description="Authorize with Google and list upcoming calendar events",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    run_parser = subparsers.add_parser("run", help="Interactive session")
    run_parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Don't open browser automatically",
    )
    subparsers.add_parser("events", help="Print upcoming events from the saved session")
    subparsers.add_parser("status", help="Show configuration and token status")
    subparsers.add_parser("signout", help="Revoke and forget the saved token")

    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "status":
        return cmd_status()

    try:
        controller = build_controller(open_browser=not getattr(args, "no_browser", False))
    except ConfigurationError as e:
        print(f"Error: {e}")
        print("Run 'calendar-quickstart status' to see what is configured")
        return 1

    if args.command == "run":
        return asyncio.run(_run(controller))
    if args.command == "events":
        return asyncio.run(_events(controller))
    if args.command == "signout":
        return asyncio.run(_signout(controller))

    return 0


if __name__ == "__main__":
    sys.exit(main())
