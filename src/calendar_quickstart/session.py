"""Auth session controller.

Sequences startup of the two Google SDKs, restores a saved session, and
drives authorize / sign-out. All collaborators are passed in; nothing is
looked up from module globals.

Startup runs two branches concurrently:
    A: discovery document -> ApiClient.init -> client_ready -> restore session
    B: provider metadata  -> IdentityProvider -> token client -> identity_ready

Authorize is only possible once both branches have finished.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from calendar_quickstart.calendar.events import EventsFetcher
from calendar_quickstart.config import DISCOVERY_DOC, IDENTITY_METADATA_URL, SCOPES, Settings
from calendar_quickstart.google.api_client import ApiClient
from calendar_quickstart.google.exceptions import TokenRequestError
from calendar_quickstart.google.identity import ConsentHandler, IdentityProvider, TokenClient
from calendar_quickstart.google.models import ClientConfig, TokenClientConfig
from calendar_quickstart.google.token_store import TokenStore
from calendar_quickstart.loader import ScriptLoader
from calendar_quickstart.view import View

logger = logging.getLogger(__name__)

IdentityFactory = Callable[[dict[str, Any], ConsentHandler], IdentityProvider]


class Phase(Enum):
    UNINITIALIZED = "uninitialized"
    CLIENT_LOADING = "client_loading"
    READY = "ready"
    AUTHORIZING = "authorizing"
    AUTHORIZED = "authorized"


@dataclass
class SessionState:
    """Readiness flags; the view is derived from these."""

    client_ready: bool = False
    identity_ready: bool = False
    authorized: bool = False


class AuthSessionController:
    """Owns the session flags, the token client and the live token."""

    def __init__(
        self,
        settings: Settings,
        loader: ScriptLoader,
        store: TokenStore,
        api_client: ApiClient,
        fetcher: EventsFetcher,
        view: View,
        consent: ConsentHandler,
        identity_factory: IdentityFactory = IdentityProvider.from_metadata,
    ):
        self.settings = settings
        self.state = SessionState()
        self._loader = loader
        self._store = store
        self._api = api_client
        self._fetcher = fetcher
        self._view = view
        self._consent = consent
        self._identity_factory = identity_factory

        self._identity: IdentityProvider | None = None
        self._token_client: TokenClient | None = None
        self._started = False
        self._authorizing = False

    @property
    def phase(self) -> Phase:
        if self._authorizing:
            return Phase.AUTHORIZING
        if self.state.authorized:
            return Phase.AUTHORIZED
        if self.state.client_ready and self.state.identity_ready:
            return Phase.READY
        if self._started:
            return Phase.CLIENT_LOADING
        return Phase.UNINITIALIZED

    @property
    def can_authorize(self) -> bool:
        return self.state.client_ready and self.state.identity_ready

    async def initialize(self) -> None:
        """Load both SDKs and restore any saved session.

        Errors raised while initializing either SDK propagate.
        """
        self._started = True
        await asyncio.gather(
            self._loader.load(DISCOVERY_DOC, self._on_client_loaded),
            self._loader.load(IDENTITY_METADATA_URL, self._on_identity_loaded),
        )

    async def _on_client_loaded(self, document: dict[str, Any]) -> None:
        config = ClientConfig(api_key=self.settings.api_key, discovery_document=document)
        await asyncio.to_thread(self._api.init, config)
        self.state.client_ready = True
        await self._restore_session()

    async def _restore_session(self) -> None:
        token = self._store.load()
        if token is None:
            return

        self._api.set_token(token)
        self.state.authorized = True
        logger.info("Restored saved session")
        await self._fetcher.list_events()

    async def _on_identity_loaded(self, metadata: dict[str, Any]) -> None:
        self._identity = self._identity_factory(metadata, self._consent)
        self._token_client = self._identity.init_token_client(
            TokenClientConfig(
                client_id=self.settings.client_id,
                scope=SCOPES,
                client_secret=self.settings.client_secret,
                redirect_uri=self.settings.redirect_uri,
            )
        )
        self.state.identity_ready = True
        logger.info("Identity provider ready")

    async def authorize(self) -> bool:
        """Request a token and, on success, show the upcoming events.

        Does nothing until both SDKs are ready. With no token attached the
        consent screen is forced; with one attached the request is silent.

        Returns:
            True if a new token was attached.
        """
        if not self.can_authorize or self._token_client is None:
            logger.debug("Authorize ignored: SDKs not ready")
            return False
        if self._authorizing:
            logger.debug("Authorize ignored: request already in flight")
            return False

        current = self._api.get_token()
        prompt = "consent" if current is None else ""

        self._authorizing = True
        try:
            token = await self._token_client.request_access_token(prompt=prompt, token=current)
        except TokenRequestError as e:
            logger.error(f"Authorization failed: {e}")
            return False
        finally:
            self._authorizing = False

        self._store.save(token)
        self._api.set_token(token)
        self.state.authorized = True
        await self._fetcher.list_events()
        return True

    async def sign_out(self) -> bool:
        """Revoke and forget the current token.

        Returns:
            False if there was no token to sign out.
        """
        token = self._api.get_token()
        if token is None:
            return False

        if self._identity is not None:
            await self._identity.revoke(token.access_token)
        else:
            logger.warning("Identity provider not loaded; skipping remote revocation")

        self._api.set_token(None)
        self._store.clear()
        self.state.authorized = False
        self._view.clear_events()
        return True

    async def refresh_events(self) -> str | None:
        """Fetch events again while authorized."""
        if not self.state.authorized:
            return None
        return await self._fetcher.list_events()

    def render(self) -> str:
        return self._view.render(self.state)
