"""Quickstart exceptions."""


class QuickstartError(Exception):
    """Base exception for calendar quickstart errors."""

    pass


class ConfigurationError(QuickstartError):
    """Raised when a required setting is missing."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Missing required setting {name}. "
            "Set it in the environment or in the .env file at the repo root."
        )


class TokenRequestError(QuickstartError):
    """Raised when the provider does not hand out an access token."""

    pass


class ClientNotInitializedError(QuickstartError):
    """Raised when the API client is used before init()."""

    pass


class ProviderMetadataError(QuickstartError):
    """Raised when the identity provider's metadata document is unusable."""

    def __init__(self, missing: set[str]):
        self.missing = missing
        super().__init__(f"Provider metadata missing endpoints: {sorted(missing)}")
