"""Calendar API client holding the live token."""

import logging
from typing import Any

from google.oauth2.credentials import Credentials as GoogleCredentials
from googleapiclient.discovery import build_from_document

from calendar_quickstart.google.exceptions import ClientNotInitializedError
from calendar_quickstart.google.models import ClientConfig, Token

logger = logging.getLogger(__name__)


class ApiClient:
    """Google Calendar API client built from a discovery document.

    Holds at most one attached token. Attaching or detaching a token only marks
    the service stale; the next list_events() rebuilds it with the current
    credentials, off the event loop when called through asyncio.to_thread.

    Example:
        >>> client = ApiClient()
        >>> client.init(ClientConfig(api_key="...", discovery_document=doc))
        >>> client.set_token(token)
        >>> client.list_events(calendarId="primary", maxResults=10)
    """

    def __init__(self) -> None:
        self._config: ClientConfig | None = None
        self._token: Token | None = None
        self._service: Any = None

    @property
    def initialized(self) -> bool:
        return self._config is not None

    def init(self, config: ClientConfig) -> None:
        """Build the Calendar service from the discovery document."""
        self._config = config
        self._service = self._build()
        logger.info("Calendar API client initialized")

    def get_token(self) -> Token | None:
        return self._token

    def set_token(self, token: Token | None) -> None:
        """Attach a token, or detach it with None."""
        self._token = token
        self._service = None

    def list_events(self, **params: Any) -> dict[str, Any]:
        """Run events.list with the given query parameters.

        Raises:
            ClientNotInitializedError: If init() has not run yet.
        """
        if self._config is None:
            raise ClientNotInitializedError("Calendar API client is not initialized")
        if self._service is None:
            self._service = self._build()
        return self._service.events().list(**params).execute()

    def _build(self) -> Any:
        credentials = None
        if self._token is not None:
            credentials = GoogleCredentials(token=self._token.access_token)
        return build_from_document(
            self._config.discovery_document,
            developerKey=self._config.api_key,
            credentials=credentials,
        )
