"""Direct message tools.

DM endpoints only accept OAuth 1.0a user context, so both sending and
reading go through the write client. Username → ID lookups use the read
client like every other profile lookup.
"""

from __future__ import annotations

from pydantic import Field

from clawbird.costs import ACTION_COSTS, format_cost
from clawbird.identifiers import truncate
from clawbird.models import ToolResult, err, ok
from clawbird.tools.base import (
    ToolContext,
    ToolParams,
    require_text,
    resolve_username,
    tool,
    with_rate_limit,
)


async def _lookup_user_id(ctx: ToolContext, username: str) -> str | None:
    response = await ctx.clients.get_read_client().get_user_by_username(username)
    return (response.data or {}).get("id")


class SendDmParams(ToolParams):
    username: str = Field(
        description="X/Twitter username of the recipient (with or without leading @)"
    )
    text: str = Field(description="Message text")


@tool(
    name="x_send_dm",
    description=(
        "Send a direct message to a user on X/Twitter by username. Returns the DM event "
        "and conversation IDs and estimated API cost."
    ),
    parameters=SendDmParams,
    action="send DM",
)
async def send_dm(ctx: ToolContext, params: SendDmParams) -> ToolResult:
    require_text(params.text, "DM text cannot be empty")
    username = resolve_username(params.username, "Recipient username cannot be empty")

    recipient_id = await _lookup_user_id(ctx, username)
    if not recipient_id:
        return err(f"User @{username} not found")

    response = await ctx.clients.get_write_client().send_dm(recipient_id, params.text)
    data = response.data or {}
    event_id = data.get("dm_event_id")
    conversation_id = data.get("dm_conversation_id")

    cost = ACTION_COSTS["dm_send"]
    ctx.costs.track("dm_send", cost)
    ctx.audit_log.log(
        "x_send_dm",
        f'Sent DM to @{username}: "{truncate(params.text)}"',
        {
            "eventId": event_id,
            "conversationId": conversation_id,
            "recipientId": recipient_id,
            "recipientUsername": username,
        },
    )

    payload = {
        "sent": True,
        "eventId": event_id,
        "conversationId": conversation_id,
        "recipient": {"id": recipient_id, "username": username},
        "estimatedCost": format_cost(cost),
    }
    return ok(with_rate_limit(payload, response))


class GetDmsParams(ToolParams):
    username: str | None = Field(
        default=None,
        description="Username to get DM history with (optional — omit to get all recent DMs)",
    )
    max_results: int = Field(
        default=10, ge=1, le=100, description="Maximum DM events (1-100, default 10)"
    )


@tool(
    name="x_get_dms",
    description=(
        "Get recent direct messages on X/Twitter. Optionally filter by username to get DM "
        "history with a specific user. Returns message events with metadata and estimated "
        "API cost."
    ),
    parameters=GetDmsParams,
    action="get DMs",
)
async def get_dms(ctx: ToolContext, params: GetDmsParams) -> ToolResult:
    # An empty username means no filter, as if it were omitted.
    with_user = resolve_username(params.username) if (params.username or "").strip() else None
    client = ctx.clients.get_write_client()

    if with_user is not None:
        participant_id = await _lookup_user_id(ctx, with_user)
        if not participant_id:
            return err(f"User @{with_user} not found")
        response = await client.get_dm_events_with(participant_id, params.max_results)
    else:
        response = await client.get_dm_events(params.max_results)

    messages = [
        {
            "id": event.get("id"),
            "text": event.get("text"),
            "senderId": event.get("sender_id"),
            "createdAt": event.get("created_at"),
            "conversationId": event.get("dm_conversation_id"),
            "eventType": event.get("event_type"),
        }
        for event in response.data or []
    ]

    cost = ACTION_COSTS["dm_read_per_result"] * len(messages)
    ctx.costs.track("dm_read", cost)

    payload = {"resultCount": len(messages), "messages": messages}
    if with_user:
        payload["withUser"] = with_user
    payload["estimatedCost"] = format_cost(cost)
    return ok(with_rate_limit(payload, response))
