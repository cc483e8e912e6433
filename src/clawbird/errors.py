"""Exception types raised inside the tool pipeline.

None of these escape a tool's execute function — the dispatch layer turns
every one of them into a result envelope. They exist so the pipeline can
tell the failure classes apart:

  ConfigurationError  — required credentials missing after env fallback
  ValidationError     — bad tool input, caught before any API call
  IdentityLookupError — /users/me returned no usable ID
  ApiError            — the X API answered with a non-2xx status
"""

from __future__ import annotations

from typing import Any

import httpx


class ClawbirdError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(ClawbirdError, ValueError):
    """Raised when the credential set cannot be assembled."""


class ValidationError(ClawbirdError):
    """Raised by a tool body for domain-level input problems (empty text, bad IDs)."""


class IdentityLookupError(ClawbirdError):
    """Raised when the authenticated account's ID cannot be resolved."""


class ApiError(ClawbirdError):
    """A non-2xx reply from the X API.

    Carries the HTTP status and the response headers so the rate-limit
    interpreter can read x-rate-limit-reset off a 429.
    """

    def __init__(
        self,
        status: int,
        message: str,
        headers: httpx.Headers | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.headers = headers if headers is not None else httpx.Headers()
        self.body = body

    @classmethod
    def from_response(cls, response: httpx.Response) -> ApiError:
        """Build an ApiError from an X API error reply.

        X v2 errors come back as {"title", "detail"} or {"errors": [...]};
        use whichever is present, falling back to the reason phrase.
        """
        try:
            body = response.json()
        except ValueError:
            body = response.text
        detail = ""
        if isinstance(body, dict):
            detail = body.get("detail") or body.get("title") or ""
            if not detail and body.get("errors"):
                first = body["errors"][0]
                detail = first.get("message") or first.get("detail") or ""
        if not detail:
            detail = response.reason_phrase or "request failed"
        return cls(
            status=response.status_code,
            message=f"X API error {response.status_code}: {detail}",
            headers=response.headers,
            body=body,
        )
