"""Tests for rate-limit header extraction and 429 classification."""

import time

import httpx
import pytest
from clawbird.errors import ApiError
from clawbird.rate_limit import (
    DEFAULT_RETRY_AFTER_SECONDS,
    extract_rate_limit,
    format_rate_limit,
    parse_rate_limit_error,
)

# ---------------------------------------------------------------------------
# extract_rate_limit
# ---------------------------------------------------------------------------


class TestExtractRateLimit:
    def test_all_headers_present(self):
        headers = httpx.Headers(
            {
                "x-rate-limit-remaining": "42",
                "x-rate-limit-limit": "50",
                "x-rate-limit-reset": "1700000000",
            }
        )
        info = extract_rate_limit(headers)
        assert info is not None
        assert info.remaining == 42
        assert info.limit == 50
        assert info.resets_at == "2023-11-14T22:13:20Z"

    def test_no_headers_returns_none(self):
        assert extract_rate_limit(httpx.Headers({"content-type": "application/json"})) is None
        assert extract_rate_limit({}) is None
        assert extract_rate_limit(None) is None

    def test_partial_headers_fill_unknowns(self):
        info = extract_rate_limit({"x-rate-limit-remaining": "3"})
        assert info is not None
        assert info.remaining == 3
        assert info.limit == -1
        assert info.resets_at == ""

    def test_plain_dict_lookup_is_case_insensitive(self):
        info = extract_rate_limit({"X-Rate-Limit-Limit": "15"})
        assert info is not None
        assert info.limit == 15

    def test_format_rate_limit_uses_camel_case(self):
        info = extract_rate_limit({"x-rate-limit-remaining": "1", "x-rate-limit-limit": "2"})
        assert format_rate_limit(info) == {"remaining": 1, "limit": 2, "resetsAt": ""}
        assert format_rate_limit(None) is None


# ---------------------------------------------------------------------------
# parse_rate_limit_error
# ---------------------------------------------------------------------------


class TestParseRateLimitError:
    @pytest.mark.parametrize(
        "error",
        [
            None,
            "429",
            Exception("Too Many Requests"),
            {"status": 500},
            ApiError(401, "Unauthorized"),
            ApiError(404, "Not Found"),
        ],
    )
    def test_non_rate_limit_errors_return_none(self, error):
        assert parse_rate_limit_error(error) is None

    def test_429_without_reset_defaults_to_60(self):
        result = parse_rate_limit_error(ApiError(429, "Too Many Requests"))
        assert result is not None
        assert result.rate_limited is True
        assert result.retry_after_seconds == DEFAULT_RETRY_AFTER_SECONDS == 60
        assert result.resets_at == ""
        assert "unknown" in result.error

    def test_429_with_future_reset(self):
        reset = int(time.time()) + 300
        error = ApiError(429, "Too Many Requests", headers=httpx.Headers({"x-rate-limit-reset": str(reset)}))
        result = parse_rate_limit_error(error)
        assert result is not None
        assert 0 < result.retry_after_seconds <= 300
        assert result.resets_at.endswith("Z")
        assert f"Retry after {result.retry_after_seconds}s" in result.error
        assert result.resets_at in result.error

    def test_429_with_past_reset_floors_at_zero(self):
        reset = int(time.time()) - 100
        error = ApiError(429, "Too Many Requests", headers=httpx.Headers({"x-rate-limit-reset": str(reset)}))
        result = parse_rate_limit_error(error)
        assert result is not None
        assert result.retry_after_seconds == 0

    def test_dict_shaped_error(self):
        reset = int(time.time()) + 10
        result = parse_rate_limit_error({"status": 429, "headers": {"x-rate-limit-reset": str(reset)}})
        assert result is not None
        assert 0 < result.retry_after_seconds <= 10

    def test_serializes_with_agent_facing_keys(self):
        result = parse_rate_limit_error(ApiError(429, "Too Many Requests"))
        dumped = result.model_dump(by_alias=True)
        assert set(dumped) == {"error", "rateLimited", "retryAfterSeconds", "resetsAt"}
        assert dumped["rateLimited"] is True

    def test_out_of_range_reset_is_treated_as_unknown(self):
        error = ApiError(
            429, "Too Many Requests", headers=httpx.Headers({"x-rate-limit-reset": "99999999999999"})
        )
        result = parse_rate_limit_error(error)
        assert result is not None
        assert result.retry_after_seconds == DEFAULT_RETRY_AFTER_SECONDS
        assert result.resets_at == ""
        assert "unknown" in result.error


def test_extract_with_out_of_range_reset():
    info = extract_rate_limit(
        {"x-rate-limit-remaining": "5", "x-rate-limit-limit": "10", "x-rate-limit-reset": "-99999999999999"}
    )
    assert info is not None
    assert info.remaining == 5
    assert info.resets_at == ""
