"""Plugin entry point — registers every X tool on an agent host.

Registration never touches credentials. Each tool gets the same
ToolContext, whose ClientProvider resolves credentials and builds the X API
clients on the first tool call that needs one. A host with no X_* variables
set can still load the plugin; invoking a tool then returns an error
envelope naming the missing variables.

Tools registered:
  x_post_tweet          — post a tweet (optional image)
  x_post_thread         — post a multi-tweet thread
  x_reply_tweet         — reply to a tweet by ID/URL (optional image)
  x_like_tweet          — like a tweet
  x_unlike_tweet        — unlike a tweet
  x_delete_tweet        — delete one of your tweets
  x_search_tweets       — search recent tweets
  x_get_user_profile    — get a user profile by username
  x_get_mentions        — get mentions of your account
  x_follow_user         — follow a user
  x_send_dm             — send a direct message
  x_get_dms             — get recent direct messages
  x_get_tweet           — get a single tweet by ID/URL
  x_get_interaction_log — get the log of write actions performed
  x_get_cost_summary    — get cumulative estimated API cost
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from clawbird.registry import ToolHost
from clawbird.tools import ALL_TOOLS, ToolContext

logger = logging.getLogger(__name__)


def register(
    host: ToolHost,
    config: Mapping[str, Any] | None = None,
    context: ToolContext | None = None,
) -> ToolContext:
    """Register all tools on `host` and return the context they share."""
    context = context or ToolContext.create(config)
    for spec in ALL_TOOLS:
        host.register_tool(spec.bind(context))
    logger.info(
        f"Registered {len(ALL_TOOLS)} X tools "
        f"(interaction log: {context.audit_log.get_path()})"
    )
    return context
