"""Google identity provider: token requests and revocation using Authlib.

The provider is built from Google's OpenID configuration document. It hands
out a TokenClient whose request_access_token() coroutine resolves with exactly
one token or raises TokenRequestError. Either way it settles once per call.

The consent step happens outside the program: the user opens the
authorization URL, grants access, and the consent handler returns the URL
the provider redirected to.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any
from urllib.parse import parse_qs, urlparse

import httpx
import requests
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.requests_client import OAuth2Session

from calendar_quickstart.google.exceptions import TokenRequestError
from calendar_quickstart.google.models import ProviderMetadata, Token, TokenClientConfig

logger = logging.getLogger(__name__)

ConsentHandler = Callable[[str], Awaitable[str]]


class TokenClient:
    """Requests access tokens for one client id and scope."""

    def __init__(
        self,
        config: TokenClientConfig,
        metadata: ProviderMetadata,
        consent: ConsentHandler,
    ):
        self.config = config
        self.metadata = metadata
        self._consent = consent
        self.session = OAuth2Session(
            client_id=config.client_id,
            client_secret=config.client_secret,
            scope=config.scope,
            redirect_uri=config.redirect_uri,
            token_endpoint=metadata.token_endpoint,
            token_endpoint_auth_method="client_secret_post",
        )

    async def request_access_token(
        self,
        prompt: str = "consent",
        token: Token | None = None,
    ) -> Token:
        """Obtain a new access token.

        Args:
            prompt: "consent" forces the provider's consent screen. An empty
                string asks silently: the refresh token is used when ``token``
                has one, otherwise the user goes through the authorization
                URL without a forced consent screen.
            token: The currently attached token, if any.

        Returns:
            The new Token.

        Raises:
            TokenRequestError: If the user cancels, the provider reports an
                error, or the exchange fails.
        """
        try:
            if not prompt and token is not None and token.refresh_token:
                raw = await asyncio.to_thread(self._refresh, token.refresh_token)
                if not raw.get("refresh_token"):
                    raw["refresh_token"] = token.refresh_token
            else:
                raw = await self._authorize(prompt)
            return Token.from_dict(raw)
        except (AuthlibBaseError, requests.RequestException, ValueError) as e:
            raise TokenRequestError(f"Token request failed: {e}") from e

    def authorization_url(self, prompt: str = "consent") -> tuple[str, str]:
        """Build the authorization URL and its state value."""
        params = {"access_type": "offline", "include_granted_scopes": "true"}
        if prompt:
            params["prompt"] = prompt
        return self.session.create_authorization_url(
            self.metadata.authorization_endpoint, **params
        )

    async def _authorize(self, prompt: str) -> dict[str, Any]:
        url, state = self.authorization_url(prompt)
        logger.info(f"Waiting for authorization (prompt={prompt!r})")

        redirect_url = (await self._consent(url) or "").strip()
        if not redirect_url:
            raise TokenRequestError("Authorization cancelled")

        error = _provider_error(redirect_url)
        if error:
            raise TokenRequestError(f"Provider returned error: {error}")

        token = await asyncio.to_thread(
            self.session.fetch_token,
            self.metadata.token_endpoint,
            authorization_response=redirect_url,
            grant_type="authorization_code",
            state=state,
        )
        return dict(token)

    def _refresh(self, refresh_token: str) -> dict[str, Any]:
        logger.info("Refreshing token without consent screen")
        token = self.session.refresh_token(
            self.metadata.token_endpoint,
            refresh_token=refresh_token,
        )
        return dict(token)


class IdentityProvider:
    """Entry point to the provider once its metadata has loaded.

    Example:
        >>> provider = IdentityProvider.from_metadata(document, consent=ask_user)
        >>> client = provider.init_token_client(
        ...     TokenClientConfig(client_id="...", scope=SCOPES)
        ... )
        >>> token = await client.request_access_token(prompt="consent")
        >>> await provider.revoke(token.access_token)
    """

    def __init__(
        self,
        metadata: ProviderMetadata,
        consent: ConsentHandler,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.metadata = metadata
        self._consent = consent
        self._transport = transport

    @classmethod
    def from_metadata(
        cls,
        document: dict[str, Any],
        consent: ConsentHandler,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "IdentityProvider":
        """Create a provider from an openid-configuration document.

        Raises:
            ProviderMetadataError: If a required endpoint is missing.
        """
        return cls(ProviderMetadata.from_document(document), consent, transport)

    def init_token_client(self, config: TokenClientConfig) -> TokenClient:
        return TokenClient(config, self.metadata, self._consent)

    async def revoke(self, access_token: str) -> None:
        """Revoke a token with the provider.

        Failures are logged, not raised; local sign-out proceeds regardless.
        """
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    self.metadata.revocation_endpoint,
                    params={"token": access_token},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Failed to revoke token remotely: {e}")
            return

        logger.info("Token revoked successfully")


def _provider_error(redirect_url: str) -> str | None:
    """Return the provider's error code from a redirect URL, if present."""
    query = parse_qs(urlparse(redirect_url).query)
    errors = query.get("error")
    return errors[0] if errors else None
