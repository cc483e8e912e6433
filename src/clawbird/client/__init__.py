"""Client factory — builds the write/read X API client pair from credentials.

  write_client — OAuth 1.0a user context; required for mutations, DMs and
                 /users/me.
  read_client  — app-only bearer client when a bearer token is configured,
                 otherwise the write client itself.

Construction only configures signing material; the first network request
happens on the first tool call that uses the client.
"""

from __future__ import annotations

from dataclasses import dataclass

from clawbird.client.auth import BearerAuth, OAuth1Auth
from clawbird.client.x_api import DEFAULT_BASE_URL, XApiClient
from clawbird.models import CredentialSet


@dataclass(frozen=True)
class ClientPair:
    """The two handles shared by every tool invocation."""

    write_client: XApiClient
    read_client: XApiClient


def create_clients(credentials: CredentialSet, base_url: str = DEFAULT_BASE_URL) -> ClientPair:
    """Build the client pair. No network I/O."""
    write_client = XApiClient(OAuth1Auth.from_credentials(credentials), base_url=base_url)
    if credentials.bearer_token:
        read_client = XApiClient(BearerAuth(credentials.bearer_token), base_url=base_url)
    else:
        read_client = write_client
    return ClientPair(write_client=write_client, read_client=read_client)


__all__ = ["ClientPair", "XApiClient", "create_clients"]
