"""
Pytest configuration and shared fakes.
"""

import inspect
import json

import pytest
import requests
from requests.adapters import BaseAdapter

from calendar_quickstart.calendar import EventsFetcher
from calendar_quickstart.config import DISCOVERY_DOC, IDENTITY_METADATA_URL, Settings
from calendar_quickstart.google import Token, TokenRequestError, TokenStore
from calendar_quickstart.session import AuthSessionController
from calendar_quickstart.view import View

PROVIDER_METADATA = {
    "issuer": "https://accounts.google.com",
    "authorization_endpoint": "https://accounts.google.com/o/oauth2/v2/auth",
    "token_endpoint": "https://oauth2.googleapis.com/token",
    "revocation_endpoint": "https://oauth2.googleapis.com/revoke",
}


class TokenEndpointAdapter(BaseAdapter):
    """requests adapter answering every call with a fixed JSON response."""

    def __init__(self, status_code, payload):
        super().__init__()
        self.status_code = status_code
        self.payload = payload
        self.bodies = []

    def send(self, request, **kwargs):
        body = request.body or ""
        self.bodies.append(body.decode() if isinstance(body, bytes) else body)

        response = requests.Response()
        response.status_code = self.status_code
        response.headers["Content-Type"] = "application/json"
        response._content = json.dumps(self.payload).encode()
        response.encoding = "utf-8"
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


class FakeLoader:
    """Serves canned documents; unknown URLs behave like a failed load."""

    def __init__(self, documents):
        self.documents = documents
        self.calls = []

    async def load(self, url, on_loaded=None):
        self.calls.append(url)
        if url not in self.documents or on_loaded is None:
            return
        result = on_loaded(self.documents[url])
        if inspect.isawaitable(result):
            await result


class FakeApiClient:
    """Stands in for ApiClient without building a real service."""

    def __init__(self, response=None, error=None, init_error=None):
        self.response = response if response is not None else {"items": []}
        self.error = error
        self.init_error = init_error
        self.config = None
        self.token = None
        self.list_calls = []

    @property
    def initialized(self):
        return self.config is not None

    def init(self, config):
        if self.init_error:
            raise self.init_error
        self.config = config

    def get_token(self):
        return self.token

    def set_token(self, token):
        self.token = token

    def list_events(self, **params):
        assert self.initialized, "list_events called before init"
        self.list_calls.append(params)
        if self.error:
            raise self.error
        return self.response


class FakeTokenClient:
    def __init__(self, config, result):
        self.config = config
        self.result = result
        self.requests = []

    async def request_access_token(self, prompt="consent", token=None):
        self.requests.append({"prompt": prompt, "token": token})
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class FakeIdentityProvider:
    def __init__(self, metadata, consent, result):
        self.metadata = metadata
        self.consent = consent
        self.result = result
        self.token_client = None
        self.revoked = []

    def init_token_client(self, config):
        self.token_client = FakeTokenClient(config, self.result)
        return self.token_client

    async def revoke(self, access_token):
        self.revoked.append(access_token)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        client_id="test-client-id.apps.googleusercontent.com",
        api_key="test-api-key",
        token_path=tmp_path / "token.json",
    )


@pytest.fixture
def provider_metadata():
    return dict(PROVIDER_METADATA)


@pytest.fixture
def token_endpoint():
    return TokenEndpointAdapter


@pytest.fixture
def fake_api():
    return FakeApiClient


@pytest.fixture
def stored_token():
    return Token(access_token="stored-access-token", scope="calendar.readonly")


@pytest.fixture
def issued_token():
    return Token(
        access_token="issued-access-token",
        expires_in=3599,
        scope="https://www.googleapis.com/auth/calendar.readonly",
    )


@pytest.fixture
def make_session(settings, issued_token):
    """Build a controller wired to fakes.

    Returns a namespace-like dict with the controller and every fake.
    """

    def _make(
        client_loads=True,
        identity_loads=True,
        token_result=None,
        response=None,
        fetch_error=None,
        init_error=None,
    ):
        documents = {}
        if client_loads:
            documents[DISCOVERY_DOC] = {"name": "calendar", "version": "v3"}
        if identity_loads:
            documents[IDENTITY_METADATA_URL] = PROVIDER_METADATA

        view = View()
        api = FakeApiClient(response=response, error=fetch_error, init_error=init_error)
        store = TokenStore(settings.token_path)
        fetcher = EventsFetcher(api, view)
        providers = []

        def identity_factory(metadata, consent):
            result = token_result if token_result is not None else issued_token
            provider = FakeIdentityProvider(metadata, consent, result)
            providers.append(provider)
            return provider

        async def consent(url):
            raise AssertionError("consent handler should not be reached")

        controller = AuthSessionController(
            settings=settings,
            loader=FakeLoader(documents),
            store=store,
            api_client=api,
            fetcher=fetcher,
            view=view,
            consent=consent,
            identity_factory=identity_factory,
        )
        return {
            "controller": controller,
            "api": api,
            "store": store,
            "view": view,
            "providers": providers,
        }

    return _make


@pytest.fixture
def token_denied():
    return TokenRequestError("Provider returned error: access_denied")
