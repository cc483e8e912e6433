"""Tweet ID and username helpers shared by the tool handlers."""

import re

_STATUS_ID = re.compile(r"status/(\d+)")


def parse_tweet_id(value: str) -> str:
    """Extract a tweet ID from a status URL, or return the stripped input.

    Accepts "1234", "https://x.com/user/status/1234" and the same URL with a
    query string or fragment. Anything else comes back stripped and
    otherwise untouched — the API rejects it if it isn't an ID.
    """
    match = _STATUS_ID.search(value)
    if match:
        return match.group(1)
    return value.strip()


def normalize_username(value: str) -> str:
    """Strip surrounding whitespace and at most one leading '@'."""
    username = value.strip()
    if username.startswith("@"):
        username = username[1:]
    return username.strip()


def tweet_url(tweet_id: str, username: str | None = None) -> str:
    # x.com/i/status/<id> redirects to the canonical URL when the author is unknown
    return f"https://x.com/{username or 'i'}/status/{tweet_id}"


def truncate(text: str, limit: int = 80) -> str:
    """Shorten text for audit summaries."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
