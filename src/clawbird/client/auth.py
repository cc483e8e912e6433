"""httpx auth flows for the two X API credential schemes.

  OAuth1Auth — OAuth 1.0a user context (HMAC-SHA1), required for every
               mutation and for /users/me. Signing is done by oauthlib.
  BearerAuth — OAuth 2.0 app-only bearer token, read-only endpoints.

X v2 request bodies are JSON, which OAuth 1.0a leaves out of the signature
base string — only the method, URL and query parameters are signed.
"""

from __future__ import annotations

from collections.abc import Generator

import httpx
from oauthlib import oauth1

from clawbird.models import CredentialSet


class OAuth1Auth(httpx.Auth):
    """Sign each request with the four-part OAuth 1.0a user credential."""

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        access_token: str,
        access_token_secret: str,
    ) -> None:
        self._signer = oauth1.Client(
            api_key,
            client_secret=api_secret,
            resource_owner_key=access_token,
            resource_owner_secret=access_token_secret,
            signature_method=oauth1.SIGNATURE_HMAC_SHA1,
            signature_type=oauth1.SIGNATURE_TYPE_AUTH_HEADER,
        )

    @classmethod
    def from_credentials(cls, credentials: CredentialSet) -> OAuth1Auth:
        return cls(
            api_key=credentials.api_key,
            api_secret=credentials.api_secret,
            access_token=credentials.access_token,
            access_token_secret=credentials.access_token_secret,
        )

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        _, headers, _ = self._signer.sign(str(request.url), http_method=request.method)
        request.headers["Authorization"] = headers["Authorization"]
        yield request


class BearerAuth(httpx.Auth):
    """Attach an app-only bearer token."""

    def __init__(self, token: str) -> None:
        self._token = token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self._token}"
        yield request
