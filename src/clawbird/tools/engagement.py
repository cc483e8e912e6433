"""Engagement tools — like, unlike and follow.

All three act on behalf of the authenticated account, so they resolve its
ID through the context's identity cache before the mutation.
"""

from __future__ import annotations

from pydantic import Field

from clawbird.costs import ACTION_COSTS, format_cost
from clawbird.models import ToolResult, err, ok
from clawbird.tools.base import (
    ToolContext,
    ToolParams,
    resolve_tweet_id,
    resolve_username,
    tool,
    with_rate_limit,
)
from clawbird.tools.posts import TweetRefParams


@tool(
    name="x_like_tweet",
    description=(
        "Like a tweet on X/Twitter by its ID or URL. Returns confirmation and estimated "
        "API cost."
    ),
    parameters=TweetRefParams,
    action="like tweet",
)
async def like_tweet(ctx: ToolContext, params: TweetRefParams) -> ToolResult:
    tweet_id = resolve_tweet_id(params.tweet_id)
    client = ctx.clients.get_write_client()
    user_id = await ctx.identity.get_user_id(client)

    response = await client.like_post(user_id, tweet_id)
    liked = (response.data or {}).get("liked", True)

    cost = ACTION_COSTS["like"]
    ctx.costs.track("like", cost)
    ctx.audit_log.log("x_like_tweet", f"Liked tweet {tweet_id}", {"tweetId": tweet_id})

    payload = {"liked": liked, "tweetId": tweet_id, "estimatedCost": format_cost(cost)}
    return ok(with_rate_limit(payload, response))


@tool(
    name="x_unlike_tweet",
    description=(
        "Unlike a previously liked tweet on X/Twitter by its ID or URL. Returns "
        "confirmation and estimated API cost."
    ),
    parameters=TweetRefParams,
    action="unlike tweet",
)
async def unlike_tweet(ctx: ToolContext, params: TweetRefParams) -> ToolResult:
    tweet_id = resolve_tweet_id(params.tweet_id)
    client = ctx.clients.get_write_client()
    user_id = await ctx.identity.get_user_id(client)

    response = await client.unlike_post(user_id, tweet_id)
    # The API reports the resulting state: liked == false once unliked.
    unliked = not (response.data or {}).get("liked", False)

    cost = ACTION_COSTS["like"]
    ctx.costs.track("unlike", cost)
    ctx.audit_log.log("x_unlike_tweet", f"Unliked tweet {tweet_id}", {"tweetId": tweet_id})

    payload = {"unliked": unliked, "tweetId": tweet_id, "estimatedCost": format_cost(cost)}
    return ok(with_rate_limit(payload, response))


class FollowUserParams(ToolParams):
    username: str = Field(description="X/Twitter username to follow (with or without leading @)")


@tool(
    name="x_follow_user",
    description=(
        "Follow a user on X/Twitter by username. Returns the follow state (pending for "
        "protected accounts) and estimated API cost."
    ),
    parameters=FollowUserParams,
    action="follow user",
)
async def follow_user(ctx: ToolContext, params: FollowUserParams) -> ToolResult:
    username = resolve_username(params.username)

    lookup = await ctx.clients.get_read_client().get_user_by_username(username)
    target_id = (lookup.data or {}).get("id")
    if not target_id:
        return err(f"User @{username} not found")

    client = ctx.clients.get_write_client()
    source_id = await ctx.identity.get_user_id(client)
    response = await client.follow_user(source_id, target_id)
    data = response.data or {}
    following = data.get("following", True)
    pending = data.get("pending_follow", False)

    cost = ACTION_COSTS["user_lookup"]
    ctx.costs.track("follow", cost)
    ctx.audit_log.log(
        "x_follow_user",
        f"Followed @{username}" if not pending else f"Requested to follow @{username}",
        {"userId": target_id, "username": username, "pending": pending},
    )

    payload = {
        "following": following,
        "pending": pending,
        "user": {"id": target_id, "username": username},
        "estimatedCost": format_cost(cost),
    }
    return ok(with_rate_limit(payload, response))
