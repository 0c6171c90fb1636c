"""Google OAuth and Calendar API plumbing."""

from calendar_quickstart.google.api_client import ApiClient
from calendar_quickstart.google.exceptions import (
    ClientNotInitializedError,
    ConfigurationError,
    ProviderMetadataError,
    QuickstartError,
    TokenRequestError,
)
from calendar_quickstart.google.identity import IdentityProvider, TokenClient
from calendar_quickstart.google.models import (
    ClientConfig,
    ProviderMetadata,
    Token,
    TokenClientConfig,
)
from calendar_quickstart.google.token_store import TokenStore

__all__ = [
    "ApiClient",
    "IdentityProvider",
    "TokenClient",
    "TokenStore",
    "Token",
    "ClientConfig",
    "TokenClientConfig",
    "ProviderMetadata",
    "QuickstartError",
    "ConfigurationError",
    "TokenRequestError",
    "ClientNotInitializedError",
    "ProviderMetadataError",
]
