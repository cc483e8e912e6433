"""Lazy client provider and authenticated-identity cache.

Both are owned by a plugin's ToolContext and injected into every tool, so
their lifetime is the plugin's lifetime and tests get fresh instances
instead of resetting module globals.

ClientProvider
    Resolves credentials and builds the ClientPair on the first
    get_write_client()/get_read_client() call, then memoizes it. Tool
    registration therefore succeeds with no credentials configured; the
    ConfigurationError surfaces at the first invocation instead. A failed
    resolution is not memoized — fixing the environment and calling again
    works without a restart.

IdentityCache
    The authenticated account's ID, looked up once through /users/me on the
    write client. Concurrent first lookups are tolerated (the lookup is a
    pure read; last write wins). An empty lookup raises IdentityLookupError
    and leaves the cache unset.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any

from clawbird.client import ClientPair, XApiClient, create_clients
from clawbird.config import resolve_credentials
from clawbird.errors import IdentityLookupError
from clawbird.models import CredentialSet

logger = logging.getLogger(__name__)


class ClientProvider:
    """Initialize-on-first-use holder for the shared ClientPair."""

    def __init__(
        self,
        config: Mapping[str, Any] | None = None,
        factory: Callable[[CredentialSet], ClientPair] = create_clients,
    ) -> None:
        self._config = config
        self._factory = factory
        self._clients: ClientPair | None = None
        self._lock = threading.Lock()

    def _ensure_clients(self) -> ClientPair:
        if self._clients is None:
            with self._lock:
                if self._clients is None:
                    credentials = resolve_credentials(self._config)
                    self._clients = self._factory(credentials)
                    logger.info(
                        "X API clients created "
                        f"(read via {'bearer token' if credentials.bearer_token else 'OAuth1'})"
                    )
        return self._clients

    def get_write_client(self) -> XApiClient:
        return self._ensure_clients().write_client

    def get_read_client(self) -> XApiClient:
        return self._ensure_clients().read_client

    @property
    def initialized(self) -> bool:
        return self._clients is not None

    def reset(self) -> None:
        """Forget the client pair so the next call re-resolves credentials.

        Does not close the HTTP clients; use aclose() for that.
        """
        with self._lock:
            self._clients = None

    async def aclose(self) -> None:
        """Close the HTTP clients (if any were created) and forget them."""
        with self._lock:
            clients, self._clients = self._clients, None
        if clients is None:
            return
        await clients.write_client.aclose()
        if clients.read_client is not clients.write_client:
            await clients.read_client.aclose()


class IdentityCache:
    """Process-lifetime cache of the authenticated account ID."""

    def __init__(self) -> None:
        self._user_id: str | None = None

    @property
    def cached(self) -> str | None:
        return self._user_id

    async def get_user_id(self, write_client: XApiClient) -> str:
        """Return the cached account ID, looking it up on first use.

        Raises:
            IdentityLookupError: /users/me returned no data or no id.
        """
        if self._user_id:
            return self._user_id

        response = await write_client.get_me()
        data = response.data if isinstance(response.data, dict) else {}
        user_id = data.get("id")
        if not user_id:
            raise IdentityLookupError("Could not retrieve authenticated user ID")

        self._user_id = str(user_id)
        logger.info(f"Authenticated as X user {self._user_id}")
        return self._user_id

    def reset(self) -> None:
        self._user_id = None
