"""Tests for the post tools: tweet, thread, reply, delete, get."""

import time

import httpx
from clawbird.errors import ApiError
from clawbird.models import RateLimitInfo
from clawbird.tools.posts import delete_tweet, get_tweet, post_thread, post_tweet, reply_tweet

from ..conftest import api_response, payload

# ---------------------------------------------------------------------------
# x_post_tweet
# ---------------------------------------------------------------------------


class TestPostTweet:
    async def test_success(self, context, write_client, audit_log):
        write_client.create_post.return_value = api_response({"id": "100", "text": "hello"})

        result = payload(await post_tweet.bind(context).execute("s1", {"text": "hello"}))

        assert result["id"] == "100"
        assert result["text"] == "hello"
        assert result["url"] == "https://x.com/i/status/100"
        assert result["estimatedCost"] == "$0.0100"
        write_client.create_post.assert_awaited_once_with("hello", media_ids=None)

        assert context.costs.get_summary()["breakdown"]["post"] == {"calls": 1, "total_cost": 0.01}
        entries = audit_log.get_entries()
        assert len(entries) == 1
        assert entries[0].action == "x_post_tweet"
        assert entries[0].details["id"] == "100"

    async def test_includes_rate_limit_when_present(self, context, write_client):
        write_client.create_post.return_value = api_response(
            {"id": "100"}, rate_limit=RateLimitInfo(remaining=5, limit=100, resets_at="")
        )
        result = payload(await post_tweet.bind(context).execute("s1", {"text": "hello"}))
        assert result["rateLimit"] == {"remaining": 5, "limit": 100, "resetsAt": ""}
        assert result["text"] == "hello"

    async def test_empty_text_never_calls_api(self, context, write_client, audit_log):
        result = payload(await post_tweet.bind(context).execute("s1", {"text": "   "}))
        assert result == {"error": "Tweet text cannot be empty"}
        write_client.create_post.assert_not_awaited()
        assert context.costs.total_cost == 0
        assert audit_log.get_entries() == []

    async def test_missing_text_parameter(self, context):
        result = payload(await post_tweet.bind(context).execute("s1", {}))
        assert result["error"] == "Invalid parameters for x_post_tweet"
        assert result["details"][0]["loc"] == ["text"]

    async def test_no_id_returned(self, context, write_client, audit_log):
        write_client.create_post.return_value = api_response({})
        result = payload(await post_tweet.bind(context).execute("s1", {"text": "hello"}))
        assert "no ID returned" in result["error"]
        assert context.costs.total_cost == 0
        assert audit_log.get_entries() == []

    async def test_with_image(self, context, write_client, tmp_path):
        image = tmp_path / "cat.png"
        image.write_bytes(b"png")
        write_client.upload_media.return_value = api_response({"id": "m-1"})
        write_client.create_post.return_value = api_response({"id": "100", "text": "cat"})

        result = payload(
            await post_tweet.bind(context).execute("s1", {"text": "cat", "image": str(image)})
        )

        assert result["mediaIds"] == ["m-1"]
        write_client.create_post.assert_awaited_once_with("cat", media_ids=["m-1"])

    async def test_missing_image_file(self, context, write_client, tmp_path):
        result = payload(
            await post_tweet.bind(context).execute(
                "s1", {"text": "cat", "image": str(tmp_path / "nope.png")}
            )
        )
        assert "Image file not found" in result["error"]
        write_client.create_post.assert_not_awaited()

    async def test_api_error(self, context, write_client, audit_log):
        write_client.create_post.side_effect = ApiError(403, "X API error 403: Forbidden")
        result = payload(await post_tweet.bind(context).execute("s1", {"text": "hello"}))
        assert result == {"error": "Failed to post tweet: X API error 403: Forbidden"}
        assert context.costs.total_cost == 0
        assert audit_log.get_entries() == []

    async def test_rate_limited(self, context, write_client):
        reset = int(time.time()) + 120
        write_client.create_post.side_effect = ApiError(
            429, "Too Many Requests", headers=httpx.Headers({"x-rate-limit-reset": str(reset)})
        )
        result = payload(await post_tweet.bind(context).execute("s1", {"text": "hello"}))
        assert result["rateLimited"] is True
        assert 0 < result["retryAfterSeconds"] <= 120
        assert "error" in result


# ---------------------------------------------------------------------------
# x_post_thread
# ---------------------------------------------------------------------------


class TestPostThread:
    async def test_chains_each_tweet_to_the_previous(self, context, write_client, audit_log):
        write_client.create_post.side_effect = [
            api_response({"id": "100", "text": "a"}),
            api_response({"id": "101", "text": "b"}),
            api_response({"id": "102", "text": "c"}),
        ]

        result = payload(await post_thread.bind(context).execute("s1", {"tweets": ["a", "b", "c"]}))

        assert result["threadId"] == "100"
        assert result["tweetCount"] == 3
        assert [t["id"] for t in result["tweets"]] == ["100", "101", "102"]
        calls = write_client.create_post.await_args_list
        assert calls[0].kwargs["reply_to"] is None
        assert calls[1].kwargs["reply_to"] == "100"
        assert calls[2].kwargs["reply_to"] == "101"
        assert context.costs.total_cost == 0.03
        assert result["estimatedCost"] == "$0.0300"
        assert audit_log.get_entries()[0].details["tweetIds"] == ["100", "101", "102"]

    async def test_empty_list_rejected(self, context, write_client):
        result = payload(await post_thread.bind(context).execute("s1", {"tweets": []}))
        assert "error" in result
        write_client.create_post.assert_not_awaited()

    async def test_empty_item_rejected(self, context, write_client):
        result = payload(await post_thread.bind(context).execute("s1", {"tweets": ["a", " "]}))
        assert result == {"error": "Tweet at index 1 is empty"}
        write_client.create_post.assert_not_awaited()

    async def test_stops_at_first_failure_and_reports_posted(self, context, write_client, audit_log):
        write_client.create_post.side_effect = [
            api_response({"id": "100", "text": "a"}),
            ApiError(500, "X API error 500: Internal Server Error"),
            api_response({"id": "102", "text": "c"}),
        ]

        result = payload(await post_thread.bind(context).execute("s1", {"tweets": ["a", "b", "c"]}))

        assert result["error"].startswith("Failed to post thread")
        assert [t["id"] for t in result["details"]["postedSoFar"]] == ["100"]
        assert write_client.create_post.await_count == 2
        assert context.costs.total_cost == 0
        entry = audit_log.get_entries()[0]
        assert entry.details["complete"] is False

    async def test_missing_id_mid_thread(self, context, write_client):
        write_client.create_post.side_effect = [
            api_response({"id": "100", "text": "a"}),
            api_response(None),
        ]
        result = payload(await post_thread.bind(context).execute("s1", {"tweets": ["a", "b", "c"]}))
        assert "no ID returned after 1 tweets" in result["error"]
        assert len(result["details"]["postedSoFar"]) == 1

    async def test_rate_limited_mid_thread(self, context, write_client):
        write_client.create_post.side_effect = [
            api_response({"id": "100", "text": "a"}),
            ApiError(429, "Too Many Requests"),
        ]
        result = payload(await post_thread.bind(context).execute("s1", {"tweets": ["a", "b"]}))
        assert result["rateLimited"] is True
        assert result["retryAfterSeconds"] == 60
        assert result["postedSoFar"][0]["id"] == "100"


# ---------------------------------------------------------------------------
# x_reply_tweet
# ---------------------------------------------------------------------------


class TestReplyTweet:
    async def test_reply_by_url(self, context, write_client, audit_log):
        write_client.create_post.return_value = api_response({"id": "200", "text": "nice"})

        result = payload(
            await reply_tweet.bind(context).execute(
                "s1", {"tweetId": "https://x.com/bob/status/150?s=20", "text": "nice"}
            )
        )

        assert result["id"] == "200"
        assert result["inReplyTo"] == "150"
        write_client.create_post.assert_awaited_once_with("nice", reply_to="150", media_ids=None)
        assert audit_log.get_entries()[0].details["inReplyTo"] == "150"
        assert context.costs.get_summary()["breakdown"]["post"]["calls"] == 1

    async def test_empty_text(self, context, write_client):
        result = payload(await reply_tweet.bind(context).execute("s1", {"tweetId": "1", "text": ""}))
        assert result == {"error": "Reply text cannot be empty"}

    async def test_empty_tweet_id(self, context, write_client):
        result = payload(await reply_tweet.bind(context).execute("s1", {"tweetId": " ", "text": "x"}))
        assert result == {"error": "Invalid tweet ID or URL"}
        write_client.create_post.assert_not_awaited()


# ---------------------------------------------------------------------------
# x_delete_tweet
# ---------------------------------------------------------------------------


class TestDeleteTweet:
    async def test_success(self, context, write_client, audit_log):
        write_client.delete_post.return_value = api_response({"deleted": True})
        result = payload(await delete_tweet.bind(context).execute("s1", {"tweetId": "300"}))
        assert result == {"deleted": True, "tweetId": "300", "estimatedCost": "$0.0100"}
        assert context.costs.get_summary()["breakdown"]["delete"]["calls"] == 1
        assert audit_log.get_entries()[0].action == "x_delete_tweet"

    async def test_not_found(self, context, write_client, audit_log):
        write_client.delete_post.side_effect = ApiError(404, "X API error 404: Not Found")
        result = payload(await delete_tweet.bind(context).execute("s1", {"tweetId": "300"}))
        assert result["error"] == "Failed to delete tweet: X API error 404: Not Found"
        assert audit_log.get_entries() == []


# ---------------------------------------------------------------------------
# x_get_tweet
# ---------------------------------------------------------------------------


class TestGetTweet:
    async def test_with_author(self, context, read_client, write_client, audit_log):
        read_client.get_post.return_value = api_response(
            {"id": "400", "text": "hi", "author_id": "9", "public_metrics": {"like_count": 3}},
            includes={"users": [{"id": "9", "name": "Alice", "username": "alice", "verified": False}]},
        )

        result = payload(await get_tweet.bind(context).execute("s1", {"tweetId": "400"}))

        assert result["url"] == "https://x.com/alice/status/400"
        assert result["author"]["username"] == "alice"
        assert result["metrics"] == {"like_count": 3}
        assert context.costs.get_summary()["breakdown"]["get_tweet"]["calls"] == 1
        write_client.get_post.assert_not_awaited()
        assert audit_log.get_entries() == []

    async def test_not_found(self, context, read_client):
        read_client.get_post.return_value = api_response(None)
        result = payload(await get_tweet.bind(context).execute("s1", {"tweetId": "400"}))
        assert result == {"error": "Tweet 400 not found"}
        assert context.costs.total_cost == 0
