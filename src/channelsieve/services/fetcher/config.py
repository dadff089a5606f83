"""
Configuration models for the resilient fetcher.

Models
------
HostRule
    Pacing parameters (minimum interval and jitter) for one host.
BlockMarker
    A host-scoped pattern that identifies a block/verification page.
FetcherConfig
    Complete fetcher configuration, buildable from application settings.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from channelsieve.config.settings import DEFAULT_USER_AGENT

if TYPE_CHECKING:
    from channelsieve.config.settings import Settings


class HostRule(BaseModel):
    """
    Pacing parameters for requests to a single host.

    Attributes
    ----------
    min_interval_ms : int
        Minimum delay between the starts of two requests to the host.
    jitter_ms : int
        Upper bound of the uniformly random extra delay added on top.
    """

    model_config = ConfigDict(frozen=True)

    min_interval_ms: int = Field(default=1500, ge=0)
    jitter_ms: int = Field(default=500, ge=0)


@lru_cache(maxsize=64)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


class BlockMarker(BaseModel):
    """
    A pattern identifying a block or verification page.

    Attributes
    ----------
    key : str
        Short identifier reported in :class:`~channelsieve.exceptions.BlockedError`.
    pattern : str
        Case-insensitive regular expression.
    hosts : tuple[str, ...]
        Host substrings the marker applies to. Empty means every host.
    target : {"body", "url"}
        Whether the pattern is matched against the response body prefix or
        against the request/final URL.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    pattern: str
    hosts: tuple[str, ...] = ("youtube.com",)
    target: Literal["body", "url"] = "body"

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Reject patterns that are not valid regular expressions."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid block marker pattern {v!r}: {e}") from e
        return v

    @property
    def regex(self) -> re.Pattern[str]:
        """Compiled, case-insensitive pattern."""
        return _compile(self.pattern)

    def applies_to(self, host: str) -> bool:
        """Whether this marker is relevant for ``host``."""
        if not self.hosts:
            return True
        host_lower = host.lower()
        return any(h.lower() in host_lower for h in self.hosts)


DEFAULT_BLOCK_MARKERS: tuple[BlockMarker, ...] = (
    BlockMarker(key="url_sorry", pattern=r"/sorry/", target="url"),
    BlockMarker(key="recaptcha", pattern=r"recaptcha|g-recaptcha|hcaptcha"),
    BlockMarker(
        key="sorry",
        pattern=r"/sorry/|unusual traffic|traffic from your computer network",
    ),
    BlockMarker(key="robot_check", pattern=r"i.?m not a robot|robot check"),
    BlockMarker(key="verify", pattern=r"verify it.?s you|confirm you.?re not a bot"),
)
"""Markers YouTube is known to serve on its block and challenge pages."""


class FetcherConfig(BaseModel):
    """
    Complete configuration of a :class:`~channelsieve.services.fetcher.SafeFetcher`.

    Attributes
    ----------
    concurrency : int
        Maximum number of requests in flight across all hosts.
    default_rule : HostRule
        Pacing for hosts without an override.
    host_rules : dict[str, HostRule]
        Per-host pacing overrides keyed by lowercase hostname.
    max_retries : int
        Retries per logical fetch (attempts = ``max_retries + 1``).
    timeout_seconds : float
        Upper bound of a single attempt.
    user_agent : str
        Default ``User-Agent`` header.
    accept_language : str
        Default ``Accept-Language`` header.
    stop_on_block : bool
        Whether block markers are checked at all.
    block_scan_max_chars : int
        Length of the body prefix scanned for block markers.
    block_markers : tuple[BlockMarker, ...]
        Markers that identify block pages.
    """

    model_config = ConfigDict(frozen=True)

    concurrency: int = Field(default=1, ge=1)
    default_rule: HostRule = Field(default_factory=HostRule)
    host_rules: dict[str, HostRule] = Field(default_factory=dict)
    max_retries: int = Field(default=6, ge=0)
    timeout_seconds: float = Field(default=25.0, gt=0)
    user_agent: str = DEFAULT_USER_AGENT
    accept_language: str = "de,de-DE;q=1.0,en;q=0.5"
    stop_on_block: bool = True
    block_scan_max_chars: int = Field(default=200_000, gt=0)
    block_markers: tuple[BlockMarker, ...] = DEFAULT_BLOCK_MARKERS

    @field_validator("host_rules")
    @classmethod
    def normalize_hosts(cls, v: dict[str, HostRule]) -> dict[str, HostRule]:
        """Lowercase host keys so lookups are case-insensitive."""
        return {host.strip().lower(): rule for host, rule in v.items()}

    def rule_for(self, host: str) -> HostRule:
        """Return the pacing rule for ``host``, falling back to the default."""
        return self.host_rules.get(host.lower(), self.default_rule)

    @classmethod
    def from_settings(cls, settings: Settings) -> FetcherConfig:
        """
        Build a fetcher configuration from application settings.

        Parameters
        ----------
        settings : Settings
            Loaded application settings.

        Returns
        -------
        FetcherConfig
            Configuration using the settings' fetch values and host rules.
        """
        return cls(
            concurrency=settings.fetch_concurrency,
            default_rule=HostRule(
                min_interval_ms=settings.fetch_min_interval_ms,
                jitter_ms=settings.fetch_jitter_ms,
            ),
            host_rules={
                host: HostRule.model_validate(rule)
                for host, rule in settings.host_rules.items()
            },
            max_retries=settings.fetch_max_retries,
            timeout_seconds=settings.fetch_timeout_seconds,
            user_agent=settings.fetch_user_agent,
            accept_language=settings.fetch_accept_language,
            block_scan_max_chars=settings.block_scan_max_chars,
        )
