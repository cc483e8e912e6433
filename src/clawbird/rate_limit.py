"""Rate-limit interpretation for X API responses and errors.

The X API reports quota state on every response through three headers:

  x-rate-limit-limit      — requests allowed in the current window
  x-rate-limit-remaining  — requests left in the current window
  x-rate-limit-reset      — window reset time, epoch seconds

When the quota is exhausted the API answers 429. Tools hand any caught error
to parse_rate_limit_error() first; a match is returned to the agent as a
success-shaped payload carrying rateLimited=true and retryAfterSeconds, so
the agent can tell "retry later" apart from "this action is invalid" without
parsing a different envelope. Nothing here retries — that decision belongs
to the agent.
"""

from __future__ import annotations

import math
import time
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from clawbird.models import RateLimitError, RateLimitInfo

REMAINING_HEADER = "x-rate-limit-remaining"
LIMIT_HEADER = "x-rate-limit-limit"
RESET_HEADER = "x-rate-limit-reset"

RATE_LIMITED_STATUS = 429
DEFAULT_RETRY_AFTER_SECONDS = 60


def _header(headers: Mapping[str, str] | None, name: str) -> str | None:
    """Case-insensitive header lookup that works for httpx.Headers and plain dicts."""
    if not headers:
        return None
    value = headers.get(name)
    if value is None:
        for key, candidate in headers.items():
            if key.lower() == name:
                return candidate
    return value


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def _epoch_to_iso(epoch: int) -> str:
    """UTC ISO-8601 with a "Z" suffix, or "" when the epoch is out of range."""
    try:
        moment = datetime.fromtimestamp(epoch, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return ""
    return moment.isoformat().replace("+00:00", "Z")


def extract_rate_limit(headers: Mapping[str, str] | None) -> RateLimitInfo | None:
    """Read the quota headers. Returns None only when all three are absent."""
    remaining = _header(headers, REMAINING_HEADER)
    limit = _header(headers, LIMIT_HEADER)
    reset = _header(headers, RESET_HEADER)

    if remaining is None and limit is None and reset is None:
        return None

    reset_epoch = _parse_int(reset)
    remaining_value = _parse_int(remaining)
    limit_value = _parse_int(limit)
    return RateLimitInfo(
        remaining=remaining_value if remaining_value is not None else -1,
        limit=limit_value if limit_value is not None else -1,
        resets_at=_epoch_to_iso(reset_epoch) if reset_epoch is not None else "",
    )


def format_rate_limit(info: RateLimitInfo | None) -> dict[str, Any] | None:
    """Serialize quota state for inclusion in a tool payload."""
    if info is None:
        return None
    return info.model_dump(by_alias=True)


def parse_rate_limit_error(error: Any) -> RateLimitError | None:
    """Classify an error as a 429 and build retry guidance, or return None.

    Anything without a status attribute (plain exceptions, strings, None)
    is not a rate-limit error. retryAfterSeconds is the ceiling of the time
    until x-rate-limit-reset, floored at 0, or 60 when the header is absent
    or not a representable time.
    """
    if error is None or isinstance(error, (str, bytes)):
        return None
    if isinstance(error, Mapping):
        status = error.get("status")
        headers = error.get("headers")
    else:
        status = getattr(error, "status", None)
        headers = getattr(error, "headers", None)

    if status != RATE_LIMITED_STATUS:
        return None

    resets_at = ""
    retry_after = DEFAULT_RETRY_AFTER_SECONDS
    reset_epoch = _parse_int(_header(headers, RESET_HEADER))
    if reset_epoch is not None:
        resets_at = _epoch_to_iso(reset_epoch)
    # An unconvertible reset is treated as unknown.
    if resets_at:
        retry_after = max(0, math.ceil(reset_epoch - time.time()))

    return RateLimitError(
        error=(
            f"Rate limit exceeded. Retry after {retry_after}s "
            f"(resets at {resets_at or 'unknown'})."
        ),
        retry_after_seconds=retry_after,
        resets_at=resets_at,
    )
