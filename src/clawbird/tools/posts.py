"""Post tools — create, thread, reply, delete and fetch tweets."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import Field

from clawbird.costs import ACTION_COSTS, format_cost
from clawbird.identifiers import truncate, tweet_url
from clawbird.media import upload_image
from clawbird.models import ApiResponse, ToolResult, err, ok
from clawbird.rate_limit import parse_rate_limit_error
from clawbird.tools.base import (
    ToolContext,
    ToolParams,
    require_text,
    resolve_tweet_id,
    tool,
    with_rate_limit,
)

logger = logging.getLogger(__name__)

IMAGE_DESCRIPTION = "Optional image to attach: an http(s) URL or a local file path"


class PostTweetParams(ToolParams):
    text: str = Field(description="The text content of the tweet (max 280 characters)")
    image: str | None = Field(default=None, description=IMAGE_DESCRIPTION)


@tool(
    name="x_post_tweet",
    description=(
        "Post a tweet to X/Twitter, optionally with an image. Returns the tweet ID, "
        "text, URL, and estimated API cost."
    ),
    parameters=PostTweetParams,
    action="post tweet",
)
async def post_tweet(ctx: ToolContext, params: PostTweetParams) -> ToolResult:
    require_text(params.text, "Tweet text cannot be empty")
    client = ctx.clients.get_write_client()

    media_ids = [await upload_image(client, params.image)] if params.image else None
    response = await client.create_post(params.text, media_ids=media_ids)
    data = response.data or {}
    tweet_id = data.get("id")
    if not tweet_id:
        return err("Failed to create tweet — no ID returned", response)

    text = data.get("text") or params.text
    cost = ACTION_COSTS["post"]
    ctx.costs.track("post", cost)

    url = tweet_url(tweet_id)
    details: dict[str, Any] = {"id": tweet_id, "text": text, "url": url}
    if media_ids:
        details["mediaIds"] = media_ids
    ctx.audit_log.log("x_post_tweet", f'Posted tweet: "{truncate(text)}"', details)

    return ok(with_rate_limit({**details, "estimatedCost": format_cost(cost)}, response))


class PostThreadParams(ToolParams):
    tweets: list[str] = Field(
        min_length=1,
        description="Array of tweet texts to post as a thread (in order)",
    )


@tool(
    name="x_post_thread",
    description=(
        "Post a thread (multi-tweet sequence) to X/Twitter. Each tweet is posted as a "
        "reply to the previous one. Returns all tweet IDs, texts, and URLs."
    ),
    parameters=PostThreadParams,
    action="post thread",
)
async def post_thread(ctx: ToolContext, params: PostThreadParams) -> ToolResult:
    for index, text in enumerate(params.tweets):
        require_text(text, f"Tweet at index {index} is empty")
    client = ctx.clients.get_write_client()

    posted: list[dict[str, str]] = []
    previous_id: str | None = None
    failure: Exception | None = None
    missing_id_response: ApiResponse | None = None

    # Strictly sequential: each tweet needs the ID of the one before it.
    for text in params.tweets:
        try:
            response = await client.create_post(text, reply_to=previous_id)
        except Exception as e:
            failure = e
            break
        data = response.data or {}
        tweet_id = data.get("id")
        if not tweet_id:
            missing_id_response = response
            break
        text = data.get("text") or text
        posted.append({"id": tweet_id, "text": text, "url": tweet_url(tweet_id)})
        previous_id = tweet_id

    if failure is None and missing_id_response is None:
        cost = ACTION_COSTS["post"] * len(posted)
        ctx.costs.track("post", cost)
        thread_id = posted[0]["id"]
        ctx.audit_log.log(
            "x_post_thread",
            f'Posted {len(posted)}-tweet thread: "{truncate(posted[0]["text"])}"',
            {"threadId": thread_id, "tweetIds": [t["id"] for t in posted], "url": posted[0]["url"]},
        )
        return ok(
            {
                "threadId": thread_id,
                "tweetCount": len(posted),
                "tweets": posted,
                "estimatedCost": format_cost(cost),
            }
        )

    # The tweets that did go out are live; record them so the agent doesn't repost.
    if posted:
        ctx.audit_log.log(
            "x_post_thread",
            f"Partially posted thread: {len(posted)} of {len(params.tweets)} tweets",
            {"threadId": posted[0]["id"], "tweetIds": [t["id"] for t in posted], "complete": False},
        )
    logger.warning(f"Thread stopped after {len(posted)} of {len(params.tweets)} tweets")

    if missing_id_response is not None:
        return err(
            f"Failed to create tweet in thread — no ID returned after {len(posted)} tweets",
            {"response": missing_id_response.model_dump(), "postedSoFar": posted},
        )

    rate_limited = parse_rate_limit_error(failure)
    if rate_limited is not None:
        return ok({**rate_limited.model_dump(by_alias=True), "postedSoFar": posted})
    return err(f"Failed to post thread: {failure}", {"postedSoFar": posted})


class ReplyTweetParams(ToolParams):
    tweet_id: str = Field(description="ID or URL of the tweet to reply to")
    text: str = Field(description="The text content of the reply (max 280 characters)")
    image: str | None = Field(default=None, description=IMAGE_DESCRIPTION)


@tool(
    name="x_reply_tweet",
    description=(
        "Reply to a tweet on X/Twitter by its ID or URL, optionally with an image. Returns "
        "the reply tweet ID, text, URL, and the tweet being replied to."
    ),
    parameters=ReplyTweetParams,
    action="reply to tweet",
)
async def reply_tweet(ctx: ToolContext, params: ReplyTweetParams) -> ToolResult:
    require_text(params.text, "Reply text cannot be empty")
    in_reply_to = resolve_tweet_id(params.tweet_id)
    client = ctx.clients.get_write_client()

    media_ids = [await upload_image(client, params.image)] if params.image else None
    response = await client.create_post(params.text, reply_to=in_reply_to, media_ids=media_ids)
    data = response.data or {}
    tweet_id = data.get("id")
    if not tweet_id:
        return err("Failed to create reply — no ID returned", response)

    text = data.get("text") or params.text
    cost = ACTION_COSTS["post"]
    ctx.costs.track("post", cost)

    url = tweet_url(tweet_id)
    ctx.audit_log.log(
        "x_reply_tweet",
        f'Replied to {in_reply_to}: "{truncate(text)}"',
        {"id": tweet_id, "text": text, "url": url, "inReplyTo": in_reply_to},
    )

    payload = {
        "id": tweet_id,
        "text": text,
        "url": url,
        "inReplyTo": in_reply_to,
        "estimatedCost": format_cost(cost),
    }
    return ok(with_rate_limit(payload, response))


class TweetRefParams(ToolParams):
    tweet_id: str = Field(description="Tweet ID or status URL")


@tool(
    name="x_delete_tweet",
    description=(
        "Delete a tweet on X/Twitter by its ID or URL. Only works for tweets posted by "
        "the authenticated user."
    ),
    parameters=TweetRefParams,
    action="delete tweet",
)
async def delete_tweet(ctx: ToolContext, params: TweetRefParams) -> ToolResult:
    tweet_id = resolve_tweet_id(params.tweet_id)
    client = ctx.clients.get_write_client()

    response = await client.delete_post(tweet_id)
    data = response.data or {}
    deleted = data.get("deleted", True)

    cost = ACTION_COSTS["post"]
    ctx.costs.track("delete", cost)
    ctx.audit_log.log("x_delete_tweet", f"Deleted tweet {tweet_id}", {"tweetId": tweet_id})

    return ok({"deleted": deleted, "tweetId": tweet_id, "estimatedCost": format_cost(cost)})


@tool(
    name="x_get_tweet",
    description=(
        "Get a single tweet from X/Twitter by its ID or URL, including author details "
        "and public metrics."
    ),
    parameters=TweetRefParams,
    action="get tweet",
)
async def get_tweet(ctx: ToolContext, params: TweetRefParams) -> ToolResult:
    tweet_id = resolve_tweet_id(params.tweet_id)
    client = ctx.clients.get_read_client()

    response = await client.get_post(
        tweet_id,
        tweet_fields=[
            "created_at",
            "author_id",
            "public_metrics",
            "conversation_id",
            "in_reply_to_user_id",
            "lang",
            "source",
        ],
        expansions=["author_id"],
        user_fields=["name", "username", "verified", "profile_image_url"],
    )
    tweet = response.data
    if not tweet:
        return err(f"Tweet {tweet_id} not found")

    users = response.includes.get("users") or []
    author = users[0] if users else None

    cost = ACTION_COSTS["search_per_result"]
    ctx.costs.track("get_tweet", cost)

    payload = {
        "id": tweet.get("id"),
        "text": tweet.get("text"),
        "authorId": tweet.get("author_id"),
        "createdAt": tweet.get("created_at"),
        "metrics": tweet.get("public_metrics"),
        "conversationId": tweet.get("conversation_id"),
        "inReplyToUserId": tweet.get("in_reply_to_user_id"),
        "lang": tweet.get("lang"),
        "url": tweet_url(tweet.get("id", tweet_id), author.get("username") if author else None),
        "author": (
            {
                "id": author.get("id"),
                "name": author.get("name"),
                "username": author.get("username"),
                "verified": author.get("verified"),
                "profileImageUrl": author.get("profile_image_url"),
            }
            if author
            else None
        ),
        "estimatedCost": format_cost(cost),
    }
    return ok(with_rate_limit(payload, response))
