"""Loader for the remote documents the Google SDKs are built from."""

import inspect
import logging
from collections.abc import Callable
from typing import Any

import httpx

logger = logging.getLogger(__name__)

OnLoaded = Callable[[Any], Any]


class ScriptLoader:
    """Fetches a remote JSON resource and hands it to a callback.

    Each call fetches once; repeated URLs are not deduplicated. A failed
    fetch is logged and the callback is never invoked. Errors raised by the
    callback itself propagate to the caller.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self._transport = transport

    async def load(self, url: str, on_loaded: OnLoaded | None = None) -> None:
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Failed to load {url}: {e}")
            return

        logger.info(f"Loaded {url}")
        if on_loaded is None:
            return

        result = on_loaded(payload)
        if inspect.isawaitable(result):
            await result
