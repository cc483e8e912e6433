"""Read-only discovery tools — search, user profiles and mentions.

Reads are billed per returned result where X prices them that way, and are
never written to the interaction log.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from clawbird.costs import ACTION_COSTS, format_cost
from clawbird.identifiers import tweet_url
from clawbird.models import ToolResult, err, ok
from clawbird.tools.base import (
    ToolContext,
    ToolParams,
    require_text,
    resolve_username,
    tool,
    with_rate_limit,
)

USER_FIELDS = [
    "description",
    "public_metrics",
    "verified",
    "profile_image_url",
    "url",
    "created_at",
    "location",
    "pinned_tweet_id",
]


def summarize_tweet(tweet: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": tweet.get("id"),
        "text": tweet.get("text"),
        "authorId": tweet.get("author_id"),
        "createdAt": tweet.get("created_at"),
        "metrics": tweet.get("public_metrics"),
        "url": tweet_url(tweet.get("id", "")),
    }


class SearchTweetsParams(ToolParams):
    query: str = Field(
        description="Search query; supports X operators like from:user, #hashtag, \"exact phrase\""
    )
    max_results: int = Field(
        default=10, ge=10, le=100, description="Number of results (10-100, default 10)"
    )


@tool(
    name="x_search_tweets",
    description=(
        "Search recent tweets on X/Twitter (last 7 days). Supports X search operators like "
        "'from:user', '#hashtag', keyword phrases. Returns matching tweets with metadata "
        "and estimated API cost."
    ),
    parameters=SearchTweetsParams,
    action="search tweets",
)
async def search_tweets(ctx: ToolContext, params: SearchTweetsParams) -> ToolResult:
    require_text(params.query, "Search query cannot be empty")

    response = await ctx.clients.get_read_client().search_recent(params.query, params.max_results)
    tweets = [summarize_tweet(t) for t in response.data or []]

    cost = ACTION_COSTS["search_per_result"] * len(tweets)
    ctx.costs.track("search", cost)

    payload = {
        "query": params.query,
        "resultCount": len(tweets),
        "tweets": tweets,
        "estimatedCost": format_cost(cost),
    }
    return ok(with_rate_limit(payload, response))


class GetUserProfileParams(ToolParams):
    username: str = Field(description="X/Twitter username (with or without leading @)")


@tool(
    name="x_get_user_profile",
    description=(
        "Get an X/Twitter user's profile by username: bio, follower/following counts, "
        "verification, location and profile URL."
    ),
    parameters=GetUserProfileParams,
    action="get user profile",
)
async def get_user_profile(ctx: ToolContext, params: GetUserProfileParams) -> ToolResult:
    username = resolve_username(params.username)

    response = await ctx.clients.get_read_client().get_user_by_username(username, USER_FIELDS)
    user = response.data
    if not user:
        return err(f"User @{username} not found")

    metrics = user.get("public_metrics") or {}
    cost = ACTION_COSTS["user_lookup"]
    ctx.costs.track("user_lookup", cost)

    payload = {
        "id": user.get("id"),
        "name": user.get("name"),
        "username": user.get("username"),
        "description": user.get("description"),
        "followersCount": metrics.get("followers_count"),
        "followingCount": metrics.get("following_count"),
        "tweetCount": metrics.get("tweet_count"),
        "verified": user.get("verified"),
        "profileImageUrl": user.get("profile_image_url"),
        "url": user.get("url"),
        "createdAt": user.get("created_at"),
        "location": user.get("location"),
        "profileUrl": f"https://x.com/{user.get('username', username)}",
        "estimatedCost": format_cost(cost),
    }
    return ok(with_rate_limit(payload, response))


class GetMentionsParams(ToolParams):
    max_results: int = Field(
        default=10, ge=5, le=100, description="Number of mentions (5-100, default 10)"
    )


@tool(
    name="x_get_mentions",
    description=(
        "Get recent mentions of your authenticated X/Twitter account. Returns tweets "
        "mentioning you with metadata and estimated API cost."
    ),
    parameters=GetMentionsParams,
    action="get mentions",
)
async def get_mentions(ctx: ToolContext, params: GetMentionsParams) -> ToolResult:
    # /users/me needs user context, so the ID always comes via the write client.
    user_id = await ctx.identity.get_user_id(ctx.clients.get_write_client())

    response = await ctx.clients.get_read_client().get_mentions(user_id, params.max_results)
    mentions = [summarize_tweet(t) for t in response.data or []]

    cost = ACTION_COSTS["mention_per_result"] * len(mentions)
    ctx.costs.track("mentions", cost)

    payload = {
        "resultCount": len(mentions),
        "mentions": mentions,
        "estimatedCost": format_cost(cost),
    }
    return ok(with_rate_limit(payload, response))
