"""Session bookkeeping tools — no API calls, no cost."""

from __future__ import annotations

from pydantic import Field

from clawbird.costs import format_cost
from clawbird.models import ToolResult, ok
from clawbird.tools.base import ToolContext, ToolParams, tool


class GetInteractionLogParams(ToolParams):
    limit: int | None = Field(
        default=None,
        ge=1,
        description="Only return the most recent N entries (omit for all)",
    )


@tool(
    name="x_get_interaction_log",
    description=(
        "Get the interaction log of all write actions performed on X/Twitter (posts, "
        "replies, likes, follows, DMs, deletes). Useful to review what has already been "
        "done and avoid duplicating actions."
    ),
    parameters=GetInteractionLogParams,
    action="read interaction log",
)
async def get_interaction_log(ctx: ToolContext, params: GetInteractionLogParams) -> ToolResult:
    entries = ctx.audit_log.get_entries()
    limited = entries[-params.limit :] if params.limit else entries
    return ok(
        {
            "totalEntries": len(entries),
            "returned": len(limited),
            "logFile": ctx.audit_log.get_path(),
            "entries": [entry.model_dump() for entry in limited],
        }
    )


class GetCostSummaryParams(ToolParams):
    pass


@tool(
    name="x_get_cost_summary",
    description=(
        "Get a summary of estimated X/Twitter API costs for this session. Shows total "
        "cost and per-action breakdown (posts, searches, likes, etc.)."
    ),
    parameters=GetCostSummaryParams,
    action="get cost summary",
)
async def get_cost_summary(ctx: ToolContext, params: GetCostSummaryParams) -> ToolResult:
    summary = ctx.costs.get_summary()
    return ok(
        {
            "totalCost": format_cost(summary["total_cost"]),
            "breakdown": {
                action: {"calls": entry["calls"], "totalCost": format_cost(entry["total_cost"])}
                for action, entry in summary["breakdown"].items()
            },
        }
    )
