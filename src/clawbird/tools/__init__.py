"""Tool table — every X tool the plugin registers.

Adding a tool:
  1. Write an async handler decorated with @tool in one of these modules
  2. Add it to ALL_TOOLS below
"""

from __future__ import annotations

from clawbird.tools.base import Tool, ToolContext, ToolSpec
from clawbird.tools.discovery import get_mentions, get_user_profile, search_tweets
from clawbird.tools.engagement import follow_user, like_tweet, unlike_tweet
from clawbird.tools.messages import get_dms, send_dm
from clawbird.tools.posts import delete_tweet, get_tweet, post_thread, post_tweet, reply_tweet
from clawbird.tools.session import get_cost_summary, get_interaction_log

ALL_TOOLS: list[ToolSpec] = [
    post_tweet,
    post_thread,
    reply_tweet,
    like_tweet,
    unlike_tweet,
    delete_tweet,
    search_tweets,
    get_user_profile,
    get_mentions,
    follow_user,
    send_dm,
    get_dms,
    get_tweet,
    get_interaction_log,
    get_cost_summary,
]

__all__ = ["ALL_TOOLS", "Tool", "ToolContext", "ToolSpec"]
