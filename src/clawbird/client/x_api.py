"""X API v2 client — the single seam between the tools and the network.

Every call returns an ApiResponse carrying the decoded payload (data,
includes, meta) together with the quota headers of that response, so tools
never have to choose between a typed result and the raw headers.

Failure modes:
  - Non-2xx reply → ApiError with status, headers and decoded body. Never
    retried here; a 429 is classified by the rate-limit interpreter.
  - Transport failure / timeout → retried up to 3 times with exponential
    backoff (tenacity), then re-raised.

The underlying httpx.AsyncClient is created on first request, so building
an XApiClient performs no I/O.

Base URL: https://api.x.com/2/
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from clawbird.errors import ApiError
from clawbird.models import ApiResponse
from clawbird.rate_limit import extract_rate_limit

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.x.com/2/"

TWEET_FIELDS = ["created_at", "author_id", "public_metrics", "conversation_id"]
DM_EVENT_FIELDS = ["created_at", "sender_id", "dm_conversation_id", "text"]


def _csv(values: list[str] | None) -> str | None:
    return ",".join(values) if values else None


def _params(**kwargs: Any) -> dict[str, Any]:
    """Drop unset query parameters and map python names to X's dotted names."""
    params: dict[str, Any] = {}
    for key, value in kwargs.items():
        if value is None:
            continue
        params[key.replace("__", ".")] = value
    return params


class XApiClient:
    """Thin async wrapper over the X API v2 endpoints the tools use."""

    def __init__(
        self,
        auth: httpx.Auth,
        base_url: str = DEFAULT_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.auth = auth
        self.base_url = base_url
        self._transport = transport
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None
        self.request_count: int = 0

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                auth=self.auth,
                transport=self._transport,
                timeout=self._timeout,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @retry(
        retry=retry_if_exception_type((httpx.TransportError, httpx.TimeoutException)),
        wait=wait_exponential(multiplier=1, min=1, max=30),
        stop=stop_after_attempt(3),
        reraise=True,
    )
    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        self.request_count += 1
        return await self._get_client().request(method, path, **kwargs)

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> ApiResponse:
        """Issue one API call and decode it into an ApiResponse."""
        response = await self._send(method, path, params=params, json=json)
        if response.is_error:
            raise ApiError.from_response(response)

        body = response.json() if response.content else {}
        if not isinstance(body, dict):
            body = {"data": body}
        return ApiResponse(
            data=body.get("data"),
            includes=body.get("includes") or {},
            meta=body.get("meta") or {},
            rate_limit=extract_rate_limit(response.headers),
        )

    # -- posts ---------------------------------------------------------------

    async def create_post(
        self,
        text: str,
        reply_to: str | None = None,
        media_ids: list[str] | None = None,
    ) -> ApiResponse:
        body: dict[str, Any] = {"text": text}
        if reply_to:
            body["reply"] = {"in_reply_to_tweet_id": reply_to}
        if media_ids:
            body["media"] = {"media_ids": media_ids}
        return await self.request("POST", "tweets", json=body)

    async def delete_post(self, tweet_id: str) -> ApiResponse:
        return await self.request("DELETE", f"tweets/{tweet_id}")

    async def get_post(
        self,
        tweet_id: str,
        tweet_fields: list[str] | None = None,
        expansions: list[str] | None = None,
        user_fields: list[str] | None = None,
    ) -> ApiResponse:
        params = _params(
            tweet__fields=_csv(tweet_fields),
            expansions=_csv(expansions),
            user__fields=_csv(user_fields),
        )
        return await self.request("GET", f"tweets/{tweet_id}", params=params)

    async def search_recent(
        self,
        query: str,
        max_results: int = 10,
        tweet_fields: list[str] | None = None,
    ) -> ApiResponse:
        params = _params(
            query=query,
            max_results=max_results,
            tweet__fields=_csv(tweet_fields or TWEET_FIELDS),
        )
        return await self.request("GET", "tweets/search/recent", params=params)

    # -- users ---------------------------------------------------------------

    async def get_me(self) -> ApiResponse:
        return await self.request("GET", "users/me")

    async def get_user_by_username(
        self, username: str, user_fields: list[str] | None = None
    ) -> ApiResponse:
        params = _params(user__fields=_csv(user_fields))
        return await self.request("GET", f"users/by/username/{username}", params=params)

    async def get_mentions(
        self,
        user_id: str,
        max_results: int = 10,
        tweet_fields: list[str] | None = None,
    ) -> ApiResponse:
        params = _params(
            max_results=max_results,
            tweet__fields=_csv(tweet_fields or TWEET_FIELDS),
        )
        return await self.request("GET", f"users/{user_id}/mentions", params=params)

    async def like_post(self, user_id: str, tweet_id: str) -> ApiResponse:
        return await self.request("POST", f"users/{user_id}/likes", json={"tweet_id": tweet_id})

    async def unlike_post(self, user_id: str, tweet_id: str) -> ApiResponse:
        return await self.request("DELETE", f"users/{user_id}/likes/{tweet_id}")

    async def follow_user(self, source_user_id: str, target_user_id: str) -> ApiResponse:
        return await self.request(
            "POST",
            f"users/{source_user_id}/following",
            json={"target_user_id": target_user_id},
        )

    # -- direct messages -----------------------------------------------------

    async def send_dm(self, participant_id: str, text: str) -> ApiResponse:
        return await self.request(
            "POST",
            f"dm_conversations/with/{participant_id}/messages",
            json={"text": text},
        )

    async def get_dm_events(self, max_results: int = 10) -> ApiResponse:
        params = _params(
            max_results=max_results,
            dm_event__fields=_csv(DM_EVENT_FIELDS),
            event_types="MessageCreate",
        )
        return await self.request("GET", "dm_events", params=params)

    async def get_dm_events_with(self, participant_id: str, max_results: int = 10) -> ApiResponse:
        params = _params(
            max_results=max_results,
            dm_event__fields=_csv(DM_EVENT_FIELDS),
            event_types="MessageCreate",
        )
        return await self.request(
            "GET", f"dm_conversations/with/{participant_id}/dm_events", params=params
        )

    # -- media ---------------------------------------------------------------

    async def upload_media(
        self, media_base64: str, media_type: str, media_category: str = "tweet_image"
    ) -> ApiResponse:
        body = {
            "media": media_base64,
            "media_category": media_category,
            "media_type": media_type,
        }
        logger.info(f"X API: uploading {media_type} media ({len(media_base64)} base64 chars)")
        return await self.request("POST", "media/upload", json=body)
