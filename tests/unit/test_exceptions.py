"""
Tests for custom exceptions module.

This module tests all custom exception classes, their attributes,
inheritance hierarchy, and exit codes.
"""

from __future__ import annotations

import pytest

from channelsieve.exceptions import (
    EXIT_CODE_BLOCKED,
    EXIT_CODE_GENERAL_ERROR,
    EXIT_CODE_INVALID_ARGS,
    EXIT_CODE_SUCCESS,
    BlockedError,
    ChannelsieveError,
    ExtractionError,
    FetchError,
    HttpStatusError,
    MetadataMissingError,
    RetryableHttpError,
    RetryExhaustedError,
    RulesConfigError,
    TransportError,
)

URL = "https://www.youtube.com/@kanal/about"


class TestChannelsieveError:
    """Tests for base ChannelsieveError exception."""

    def test_base_error_with_message(self) -> None:
        """Test base error stores message correctly."""
        error = ChannelsieveError("Test error message")
        assert error.message == "Test error message"
        assert str(error) == "Test error message"

    def test_base_error_can_be_raised(self) -> None:
        """Test ChannelsieveError can be raised and caught."""
        with pytest.raises(ChannelsieveError, match="Test error"):
            raise ChannelsieveError("Test error")


class TestFetchErrors:
    """Tests for the fetch error hierarchy."""

    @pytest.mark.parametrize(
        "error",
        [
            BlockedError(URL, "www.youtube.com", "recaptcha"),
            HttpStatusError(URL, 404),
            RetryExhaustedError(URL, 3, RetryableHttpError(URL, 503, wait_ms=1000)),
            TransportError(URL),
        ],
    )
    def test_all_carry_url(self, error: FetchError) -> None:
        """Every fetch error is a FetchError with the requested URL."""
        assert isinstance(error, FetchError)
        assert isinstance(error, ChannelsieveError)
        assert error.url == URL

    def test_blocked_error_attributes(self) -> None:
        """Test BlockedError stores block details."""
        error = BlockedError(URL, "www.youtube.com", "sorry", status=429, snippet="unusual traffic")

        assert error.host == "www.youtube.com"
        assert error.marker == "sorry"
        assert error.status == 429
        assert error.snippet == "unusual traffic"
        assert error.message == "Block page detected (www.youtube.com, HTTP 429, marker=sorry)"

    def test_blocked_error_without_status(self) -> None:
        error = BlockedError(URL, "www.youtube.com", "recaptcha")
        assert "HTTP ?" in error.message
        assert error.status is None

    def test_http_status_error_message(self) -> None:
        """Test the reason phrase is optional."""
        assert HttpStatusError(URL, 404, "Not Found").message == f"HTTP 404 Not Found for {URL}"
        assert HttpStatusError(URL, 410).message == f"HTTP 410 for {URL}"

    def test_retryable_is_http_status_error(self) -> None:
        error = RetryableHttpError(URL, 429, wait_ms=2500, retry_after_ms=2000)
        assert isinstance(error, HttpStatusError)
        assert error.status == 429
        assert error.wait_ms == 2500
        assert error.retry_after_ms == 2000

    def test_retry_exhausted_exposes_last_status(self) -> None:
        last = RetryableHttpError(URL, 503, wait_ms=4000, reason="Service Unavailable")
        error = RetryExhaustedError(URL, 7, last)

        assert error.attempts == 7
        assert error.last_error is last
        assert error.status == 503
        assert "after 7 attempts" in error.message

    def test_transport_error_defaults(self) -> None:
        original = ConnectionResetError("reset")
        error = TransportError(URL, original_error=original, retry_count=2)

        assert error.message == "Network error occurred"
        assert error.original_error is original
        assert error.retry_count == 2


class TestOtherErrors:
    """Tests for extraction and configuration errors."""

    def test_metadata_missing_default_message(self) -> None:
        error = MetadataMissingError()
        assert isinstance(error, ExtractionError)
        assert "channelMetadataRenderer" in error.message

    def test_rules_config_error_path(self) -> None:
        error = RulesConfigError("Invalid rules", "rules.yaml")
        assert error.path == "rules.yaml"
        assert str(error) == "Invalid rules"


class TestExitCodes:
    """Tests for CLI exit codes."""

    def test_exit_codes_are_distinct(self) -> None:
        codes = [
            EXIT_CODE_SUCCESS,
            EXIT_CODE_GENERAL_ERROR,
            EXIT_CODE_INVALID_ARGS,
            EXIT_CODE_BLOCKED,
        ]
        assert codes == [0, 1, 2, 3]
