"""
Custom exceptions for the channelsieve application.

This module defines domain-specific exceptions for error handling
throughout the application: fetch failures (blocks, HTTP errors, network
failures), extraction failures and configuration errors.
"""

from __future__ import annotations


class ChannelsieveError(Exception):
    """Base exception for all channelsieve errors."""

    def __init__(self, message: str) -> None:
        """
        Initialize ChannelsieveError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        """
        self.message = message
        super().__init__(message)


class FetchError(ChannelsieveError):
    """
    Base exception for failures of a logical page fetch.

    Attributes
    ----------
    message : str
        Human-readable error message.
    url : str
        The URL that was being fetched.
    """

    def __init__(self, message: str, url: str) -> None:
        """
        Initialize FetchError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        url : str
            The URL that was being fetched.
        """
        self.url = url
        super().__init__(message)


class BlockedError(FetchError):
    """
    Exception raised when a block or verification page is detected.

    YouTube serves interstitial pages (``/sorry/`` redirects, reCAPTCHA
    challenges, "confirm you're not a bot") when it suspects automated
    access. This error is never retried: it means the whole crawl session
    should pause until an operator has intervened.

    Attributes
    ----------
    message : str
        Human-readable error message.
    url : str
        The URL that returned the block page.
    host : str
        Host of the blocked request.
    status : int | None
        HTTP status of the block response, if any.
    marker : str
        Key of the block marker that matched.
    snippet : str | None
        Short text excerpt around the match, for operator diagnosis.

    Examples
    --------
    >>> try:
    ...     html = await fetcher.fetch_text(url)
    ... except BlockedError as e:
    ...     print(f"Blocked on {e.host} ({e.marker}), open {e.url} in a browser")
    ...     raise typer.Exit(EXIT_CODE_BLOCKED)
    """

    def __init__(
        self,
        url: str,
        host: str,
        marker: str,
        status: int | None = None,
        snippet: str | None = None,
    ) -> None:
        """
        Initialize BlockedError.

        Parameters
        ----------
        url : str
            The URL that returned the block page.
        host : str
            Host of the blocked request.
        marker : str
            Key of the block marker that matched.
        status : int | None, optional
            HTTP status of the block response (default: None).
        snippet : str | None, optional
            Text excerpt around the match (default: None).
        """
        self.host = host
        self.status = status
        self.marker = marker
        self.snippet = snippet
        status_text = status if status is not None else "?"
        super().__init__(
            f"Block page detected ({host}, HTTP {status_text}, marker={marker})",
            url,
        )


class HttpStatusError(FetchError):
    """
    Exception raised for a non-success HTTP status that is not retried.

    Attributes
    ----------
    message : str
        Human-readable error message.
    url : str
        The requested URL.
    status : int
        The HTTP status code of the response.
    """

    def __init__(self, url: str, status: int, reason: str = "") -> None:
        """
        Initialize HttpStatusError.

        Parameters
        ----------
        url : str
            The requested URL.
        status : int
            The HTTP status code of the response.
        reason : str, optional
            The HTTP reason phrase (default: "").
        """
        self.status = status
        message = f"HTTP {status} {reason}".rstrip() + f" for {url}"
        super().__init__(message, url)


class RetryableHttpError(HttpStatusError):
    """
    Exception for a retryable HTTP status (429, 502, 503, 504).

    Raised internally for each failed attempt; callers only see it as the
    ``last_error`` of a :class:`RetryExhaustedError`.

    Attributes
    ----------
    status : int
        The HTTP status code of the response.
    wait_ms : int
        Delay the fetcher waited (or would wait) before the next attempt.
    retry_after_ms : int | None
        Delay requested by the server's ``Retry-After`` header, if any.
    """

    def __init__(
        self,
        url: str,
        status: int,
        wait_ms: int,
        retry_after_ms: int | None = None,
        reason: str = "",
    ) -> None:
        """
        Initialize RetryableHttpError.

        Parameters
        ----------
        url : str
            The requested URL.
        status : int
            The HTTP status code of the response.
        wait_ms : int
            Delay before the next attempt in milliseconds.
        retry_after_ms : int | None, optional
            Delay requested by ``Retry-After`` (default: None).
        reason : str, optional
            The HTTP reason phrase (default: "").
        """
        self.wait_ms = wait_ms
        self.retry_after_ms = retry_after_ms
        super().__init__(url, status, reason)


class RetryExhaustedError(FetchError):
    """
    Exception raised when retryable HTTP failures outlast ``max_retries``.

    Attributes
    ----------
    message : str
        Human-readable error message.
    url : str
        The requested URL.
    attempts : int
        Number of attempts that were made.
    last_error : RetryableHttpError
        The error of the final attempt.
    """

    def __init__(self, url: str, attempts: int, last_error: RetryableHttpError) -> None:
        """
        Initialize RetryExhaustedError.

        Parameters
        ----------
        url : str
            The requested URL.
        attempts : int
            Number of attempts that were made.
        last_error : RetryableHttpError
            The error of the final attempt.
        """
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Giving up on {url} after {attempts} attempts: {last_error.message}",
            url,
        )

    @property
    def status(self) -> int:
        """HTTP status of the final attempt."""
        return self.last_error.status


class TransportError(FetchError):
    """
    Exception raised for network failures and attempt timeouts.

    Attributes
    ----------
    message : str
        Human-readable error message.
    url : str
        The requested URL.
    original_error : BaseException | None
        The underlying httpx or asyncio exception.
    retry_count : int
        Number of retries made before this error was surfaced.
    """

    def __init__(
        self,
        url: str,
        message: str = "Network error occurred",
        original_error: BaseException | None = None,
        retry_count: int = 0,
    ) -> None:
        """
        Initialize TransportError.

        Parameters
        ----------
        url : str
            The requested URL.
        message : str, optional
            Human-readable error message (default: "Network error occurred").
        original_error : BaseException | None, optional
            The underlying exception (default: None).
        retry_count : int, optional
            Number of retries made (default: 0).
        """
        self.original_error = original_error
        self.retry_count = retry_count
        super().__init__(message, url)


class ExtractionError(ChannelsieveError):
    """Base exception for failures while reading the embedded page data."""


class MetadataMissingError(ExtractionError):
    """
    Exception raised when ``metadata.channelMetadataRenderer`` is absent.

    This is the one fatal extraction case: every other field of a channel
    record is independently optional. It usually means YouTube changed the
    page layout or the page did not load completely.
    """

    def __init__(
        self,
        message: str = (
            "channelMetadataRenderer not found; the page layout changed "
            "or the page did not load completely"
        ),
    ) -> None:
        """
        Initialize MetadataMissingError.

        Parameters
        ----------
        message : str, optional
            Human-readable error message.
        """
        super().__init__(message)


class RulesConfigError(ChannelsieveError):
    """
    Exception raised when a classifier rules file cannot be loaded.

    Attributes
    ----------
    message : str
        Human-readable error message.
    path : str | None
        Path of the offending rules file.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        """
        Initialize RulesConfigError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        path : str | None, optional
            Path of the offending rules file (default: None).
        """
        self.path = path
        super().__init__(message)


# Exit codes for the CLI
EXIT_CODE_SUCCESS = 0
EXIT_CODE_GENERAL_ERROR = 1
EXIT_CODE_INVALID_ARGS = 2
EXIT_CODE_BLOCKED = 3  # Session must pause until an operator clears the block
