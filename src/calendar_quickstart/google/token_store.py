"""Persistent storage for the single OAuth token.

The token file is plain JSON in whatever shape the provider returned, so a
session survives restarts. No expiry check is done here; a stale token shows
up later as a failed API call.
"""

import json
import logging
from pathlib import Path

from calendar_quickstart.google.models import Token

logger = logging.getLogger(__name__)


class TokenStore:
    """File-backed store holding at most one token."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def save(self, token: Token) -> None:
        """Persist the token, replacing any earlier one."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(token.to_dict(), f, indent=2)
        logger.info(f"Token saved to {self.path}")

    def load(self) -> Token | None:
        """Return the saved token, or None if there is no usable one."""
        if not self.path.exists():
            logger.info("No existing token found")
            return None

        try:
            with open(self.path) as f:
                data = json.load(f)
            return Token.from_dict(data)
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Failed to load token: {e}")
            return None

    def clear(self) -> None:
        """Remove the saved token."""
        self.path.unlink(missing_ok=True)
        logger.info("Token cleared")

    def exists(self) -> bool:
        return self.path.exists()
