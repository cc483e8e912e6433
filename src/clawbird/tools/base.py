"""Tool contract — how every X tool is defined, bound and executed.

A ToolSpec is the static definition: name, description, parameter model and
the async handler. Binding a spec to a ToolContext yields a Tool, which is
what the agent host registers and calls.

Tool.execute() is the only entry point the host sees, and it never raises:

  1. Parameters are validated structurally against the pydantic model.
     Failure → error envelope, no client is touched.
  2. The handler runs. Handlers obtain clients lazily from the context, do
     their own domain validation (raising ValidationError), call the API,
     then track cost / write the audit entry and return ok(...).
  3. Any exception is classified:
       ValidationError, ConfigurationError → error envelope with the message
       429 ApiError                        → ok(RateLimitError) — success-shaped
       anything else                       → "Failed to <action>: <message>"

Cost and audit bookkeeping only happen on the success path inside handlers,
so a failed call never touches either. Nothing retries — that is the
agent's decision, informed by retryAfterSeconds.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from clawbird.audit_log import AuditLog
from clawbird.client.provider import ClientProvider, IdentityCache
from clawbird.costs import CostLedger
from clawbird.errors import ConfigurationError, ValidationError
from clawbird.identifiers import normalize_username, parse_tweet_id
from clawbird.models import ApiResponse, ToolResult, err, ok
from clawbird.rate_limit import format_rate_limit, parse_rate_limit_error

logger = logging.getLogger(__name__)

TOOL_NAME_PREFIX = "x_"


class ToolParams(BaseModel):
    """Base for tool parameter models — camelCase on the wire, snake_case in code."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


@dataclass
class ToolContext:
    """State shared by all tools of one plugin instance."""

    clients: ClientProvider = field(default_factory=ClientProvider)
    costs: CostLedger = field(default_factory=CostLedger)
    audit_log: AuditLog = field(default_factory=AuditLog)
    identity: IdentityCache = field(default_factory=IdentityCache)

    @classmethod
    def create(cls, config: Mapping[str, Any] | None = None) -> ToolContext:
        """Build a context from plugin config (credentials and optional log_path)."""
        config = config or {}
        log_path = config.get("log_path") or config.get("logPath")
        return cls(clients=ClientProvider(config), audit_log=AuditLog(log_path))

    async def aclose(self) -> None:
        await self.clients.aclose()


Handler = Callable[[ToolContext, Any], Awaitable[ToolResult]]


@dataclass(frozen=True)
class ToolSpec:
    """Static tool definition, independent of any plugin instance."""

    name: str
    description: str
    parameters: type[ToolParams]
    handler: Handler
    action: str

    def bind(self, context: ToolContext) -> Tool:
        return Tool(spec=self, context=context)


@dataclass(frozen=True)
class Tool:
    """A ToolSpec bound to the context its handler runs against."""

    spec: ToolSpec
    context: ToolContext

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def description(self) -> str:
        return self.spec.description

    @property
    def parameters(self) -> dict[str, Any]:
        """JSON schema of the parameters, as handed to the agent host."""
        return self.spec.parameters.model_json_schema(by_alias=True)

    async def execute(self, session_id: str, params: Mapping[str, Any] | None = None) -> ToolResult:
        """Run the tool and always return an envelope."""
        try:
            parsed = self.spec.parameters.model_validate(params or {})
        except PydanticValidationError as e:
            return err(
                f"Invalid parameters for {self.name}",
                e.errors(include_url=False, include_context=False),
            )

        try:
            return await self.spec.handler(self.context, parsed)
        except (ValidationError, ConfigurationError) as e:
            return err(str(e))
        except Exception as e:
            rate_limited = parse_rate_limit_error(e)
            if rate_limited is not None:
                logger.warning(
                    f"{self.name} rate limited (session {session_id}), "
                    f"retry after {rate_limited.retry_after_seconds}s"
                )
                return ok(rate_limited)
            logger.warning(f"{self.name} failed (session {session_id}): {e}")
            return err(f"Failed to {self.spec.action}: {e}")


def tool(
    name: str,
    description: str,
    parameters: type[ToolParams],
    action: str,
) -> Callable[[Handler], ToolSpec]:
    """Decorator turning an async handler into a ToolSpec."""
    if not name.startswith(TOOL_NAME_PREFIX):
        raise ValueError(f"Tool name '{name}' must start with '{TOOL_NAME_PREFIX}'")

    def decorator(handler: Handler) -> ToolSpec:
        return ToolSpec(
            name=name,
            description=description,
            parameters=parameters,
            handler=handler,
            action=action,
        )

    return decorator


def require_text(value: str, message: str) -> str:
    """Raise ValidationError when value is empty or whitespace only."""
    if not value or not value.strip():
        raise ValidationError(message)
    return value


def resolve_tweet_id(value: str) -> str:
    tweet_id = parse_tweet_id(value)
    if not tweet_id:
        raise ValidationError("Invalid tweet ID or URL")
    return tweet_id


def resolve_username(value: str, message: str = "Username cannot be empty") -> str:
    username = normalize_username(value)
    if not username:
        raise ValidationError(message)
    return username


def with_rate_limit(payload: dict[str, Any], response: ApiResponse) -> dict[str, Any]:
    """Attach quota headers to a payload when the response carried them."""
    rate_limit = format_rate_limit(response.rate_limit)
    if rate_limit is not None:
        payload["rateLimit"] = rate_limit
    return payload
