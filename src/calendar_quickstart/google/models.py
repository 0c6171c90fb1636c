"""Typed shapes for what the Google SDKs hand back."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from calendar_quickstart.google.exceptions import ProviderMetadataError


@dataclass
class Token:
    """OAuth token as returned by the provider.

    Only ``access_token`` is interpreted. Everything else the provider sends
    is kept in ``extra`` and written back on serialization.
    """

    access_token: str
    token_type: str = "Bearer"
    expires_in: int | None = None
    scope: str | None = None
    refresh_token: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    _FIELDS = ("access_token", "token_type", "expires_in", "scope", "refresh_token")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Token:
        """Validate a provider token payload.

        Raises:
            ValueError: If the payload has no string access_token.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Token payload must be an object, got {type(data).__name__}")

        access_token = data.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise ValueError("Token payload has no access_token")

        expires_in = data.get("expires_in")
        return cls(
            access_token=access_token,
            token_type=data.get("token_type") or "Bearer",
            expires_in=int(expires_in) if expires_in is not None else None,
            scope=data.get("scope"),
            refresh_token=data.get("refresh_token"),
            extra={k: v for k, v in data.items() if k not in cls._FIELDS},
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.extra)
        data["access_token"] = self.access_token
        data["token_type"] = self.token_type
        if self.expires_in is not None:
            data["expires_in"] = self.expires_in
        if self.scope is not None:
            data["scope"] = self.scope
        if self.refresh_token is not None:
            data["refresh_token"] = self.refresh_token
        return data


@dataclass
class ClientConfig:
    """Configuration for the Calendar API client."""

    api_key: str
    discovery_document: dict[str, Any]


@dataclass
class TokenClientConfig:
    """Configuration for the token-request client."""

    client_id: str
    scope: str
    client_secret: str | None = None
    redirect_uri: str = "http://localhost"


@dataclass
class ProviderMetadata:
    """Endpoints published in the provider's OpenID configuration."""

    authorization_endpoint: str
    token_endpoint: str
    revocation_endpoint: str

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> ProviderMetadata:
        """Pick the OAuth endpoints out of an openid-configuration document."""
        required = {"authorization_endpoint", "token_endpoint", "revocation_endpoint"}
        missing = {key for key in required if not document.get(key)}
        if missing:
            raise ProviderMetadataError(missing)
        return cls(
            authorization_endpoint=document["authorization_endpoint"],
            token_endpoint=document["token_endpoint"],
            revocation_endpoint=document["revocation_endpoint"],
        )
