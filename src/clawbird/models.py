"""Pydantic models shared across the tool pipeline.

These are the contract types that flow between the client layer, the
bookkeeping singletons and the tool handlers. The tool result envelope is the
one shape every tool returns — the agent host parses `content[0].text` as
JSON whether the call succeeded, failed, or was rate limited.
"""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class CredentialSet(BaseModel):
    """OAuth 1.0a user-context credentials plus an optional app-only bearer token."""

    model_config = ConfigDict(frozen=True)

    api_key: str
    api_secret: str
    access_token: str
    access_token_secret: str
    bearer_token: str | None = None


class RateLimitInfo(BaseModel):
    """Quota state read from one response's x-rate-limit-* headers."""

    model_config = ConfigDict(populate_by_name=True)

    remaining: int = -1
    limit: int = -1
    resets_at: str = Field(default="", alias="resetsAt")


class RateLimitError(BaseModel):
    """Structured 429 report — returned to the agent as a success-shaped payload."""

    model_config = ConfigDict(populate_by_name=True)

    error: str
    rate_limited: Literal[True] = Field(default=True, alias="rateLimited")
    retry_after_seconds: int = Field(alias="retryAfterSeconds", ge=0)
    resets_at: str = Field(default="", alias="resetsAt")


class AuditEntry(BaseModel):
    """One line of the interaction log."""

    timestamp: str
    action: str
    summary: str
    details: dict[str, Any] = {}


class ApiResponse(BaseModel):
    """Uniform return of every X API client call: payload plus quota headers."""

    data: Any = None
    includes: dict[str, Any] = {}
    meta: dict[str, Any] = {}
    rate_limit: RateLimitInfo | None = None


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Standard envelope returned by every tool's execute function."""

    content: list[TextContent]

    def payload(self) -> Any:
        """Decode the JSON text carried by the envelope."""
        return json.loads(self.content[0].text)


def _to_jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(by_alias=True)
    return data


def ok(data: Any) -> ToolResult:
    """Wrap a successful payload in the tool result envelope."""
    text = json.dumps(_to_jsonable(data), indent=2, default=str)
    return ToolResult(content=[TextContent(text=text)])


def err(message: str, details: Any = None) -> ToolResult:
    """Wrap an error message (and optional details) in the tool result envelope."""
    payload: dict[str, Any] = {"error": message}
    if details is not None:
        payload["details"] = _to_jsonable(details)
    return ToolResult(content=[TextContent(text=json.dumps(payload, indent=2, default=str))])
