"""Centralized configuration.

Settings come from the environment, with a .env file at the repo root
loaded on import:
    .env                - GCAL_CLIENT_ID, GCAL_API_KEY, GCAL_CLIENT_SECRET, ...
    google/token.json   - persisted OAuth token (written after authorization)

Environment variables that are already set take precedence over .env values.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from calendar_quickstart.google.exceptions import ConfigurationError

# __file__ is src/calendar_quickstart/config.py, so 3 levels up
REPO_ROOT = Path(__file__).parent.parent.parent
GOOGLE_DIR = REPO_ROOT / "google"

ENV_FILE = REPO_ROOT / ".env"
GOOGLE_TOKEN = GOOGLE_DIR / "token.json"

# Remote documents loaded at startup
DISCOVERY_DOC = "https://www.googleapis.com/discovery/v1/apis/calendar/v3/rest"
IDENTITY_METADATA_URL = "https://accounts.google.com/.well-known/openid-configuration"

SCOPES = "https://www.googleapis.com/auth/calendar.readonly"
DEFAULT_REDIRECT_URI = "http://localhost"


@dataclass
class Settings:
    """Runtime settings for the quickstart."""

    client_id: str
    api_key: str
    client_secret: str | None = None
    redirect_uri: str = DEFAULT_REDIRECT_URI
    token_path: Path = GOOGLE_TOKEN


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from a file.

    Args:
        env_path: Path to .env file.

    Returns:
        Dictionary of loaded variables.
    """
    loaded = {}
    if not env_path.exists():
        return loaded

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            # Remove surrounding quotes
            if (value.startswith('"') and value.endswith('"')) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]

            # Only set if not already in environment (env vars take precedence)
            if key and key not in os.environ:
                os.environ[key] = value
                loaded[key] = value

    return loaded


def _require(name: str) -> str:
    value = os.environ.get(name, "").strip()
    if not value:
        raise ConfigurationError(name)
    return value


def load_settings() -> Settings:
    """Build settings from the environment.

    Raises:
        ConfigurationError: If GCAL_CLIENT_ID or GCAL_API_KEY is missing.
    """
    token_path = os.environ.get("GCAL_TOKEN_PATH")
    return Settings(
        client_id=_require("GCAL_CLIENT_ID"),
        api_key=_require("GCAL_API_KEY"),
        client_secret=os.environ.get("GCAL_CLIENT_SECRET") or None,
        redirect_uri=os.environ.get("GCAL_REDIRECT_URI") or DEFAULT_REDIRECT_URI,
        token_path=Path(token_path).expanduser() if token_path else GOOGLE_TOKEN,
    )


def get_config_status() -> dict:
    """Get status of the configured values."""
    return {
        "repo_root": str(REPO_ROOT),
        "env_file": ENV_FILE.exists(),
        "client_id": bool(os.environ.get("GCAL_CLIENT_ID")),
        "api_key": bool(os.environ.get("GCAL_API_KEY")),
        "client_secret": bool(os.environ.get("GCAL_CLIENT_SECRET")),
    }


# Auto-load .env from repo root on import
_loaded = _load_env_file(ENV_FILE)
