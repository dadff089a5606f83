"""
Configuration models for the rule classifier.

Models
------
LocationRuleConfig
    Allow-listed countries and the missing-country policy.
AlphabetRuleConfig
    Disallowed characters and the per-field distinct threshold.
LanguageRuleConfig
    Reference words and the fixed or dynamic minimum.
TopicRuleConfig
    One named negative-keyword rule.
ClassifierConfig
    Stage order plus all rule configurations.

Functions
---------
load_classifier_config
    Load a :class:`ClassifierConfig` from a YAML rules file.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from channelsieve.exceptions import RulesConfigError
from channelsieve.models.enums import FilterStage, MissingCountryPolicy
from channelsieve.services.classifier.wordlists import (
    ALLOWED_COUNTRIES,
    DEFAULT_TOPIC_KEYWORDS,
    GERMAN_WORDS,
    NON_GERMAN_CHARS,
)

logger = logging.getLogger(__name__)

DEFAULT_STAGE_ORDER: tuple[FilterStage, ...] = (
    FilterStage.LOCATION,
    FilterStage.ALPHABET,
    FilterStage.LANGUAGE,
    FilterStage.TOPIC,
)


def _normalize_words(values: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(v.strip().lower() for v in values if v and v.strip()))


class LocationRuleConfig(BaseModel):
    """
    Location stage configuration.

    Attributes
    ----------
    enabled : bool
        Whether the stage runs at all.
    allowed_countries : tuple[str, ...]
        Accepted country names and codes, matched case-insensitively.
    missing_country : MissingCountryPolicy
        ``reject`` fails channels without a country; ``defer`` lets them
        through to the content-based stages.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    allowed_countries: tuple[str, ...] = ALLOWED_COUNTRIES
    missing_country: MissingCountryPolicy = MissingCountryPolicy.REJECT

    @field_validator("allowed_countries")
    @classmethod
    def normalize_countries(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Lowercase, trim and deduplicate countries, keeping order."""
        return _normalize_words(v)


class AlphabetRuleConfig(BaseModel):
    """
    Alphabet stage configuration.

    Attributes
    ----------
    bad_chars : tuple[str, ...]
        Disallowed characters. Multi-character entries are split.
    max_distinct_per_field : int
        A field fails when it contains more distinct bad characters.
    """

    model_config = ConfigDict(frozen=True)

    bad_chars: tuple[str, ...] = NON_GERMAN_CHARS
    max_distinct_per_field: int = Field(default=3, ge=0)

    @field_validator("bad_chars", mode="before")
    @classmethod
    def split_chars(cls, v: Any) -> Any:
        """Accept a plain string or entries holding several characters."""
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple)):
            chars: list[str] = []
            for entry in v:
                chars.extend(str(entry))
            return tuple(dict.fromkeys(c for c in chars if not c.isspace()))
        return v

    @property
    def bad_char_set(self) -> frozenset[str]:
        """Bad characters as a set for membership tests."""
        return frozenset(self.bad_chars)


class LanguageRuleConfig(BaseModel):
    """
    Language stage configuration.

    With ``dynamic`` enabled the minimum grows with the amount of text::

        min_required = max(min_distinct,
                           min(dynamic_cap, ceil(total_tokens / words_per_required_match)))

    Attributes
    ----------
    words : tuple[str, ...]
        Reference words.
    min_distinct : int
        Fixed minimum, and the lower bound of the dynamic minimum.
    dynamic : bool
        Whether the minimum depends on the token count.
    dynamic_cap : int
        Upper bound of the dynamic minimum.
    words_per_required_match : int
        Tokens of text per additionally required distinct match.
    """

    model_config = ConfigDict(frozen=True)

    words: tuple[str, ...] = GERMAN_WORDS
    min_distinct: int = Field(default=5, ge=0)
    dynamic: bool = False
    dynamic_cap: int = Field(default=12, ge=0)
    words_per_required_match: int = Field(default=40, ge=1)

    @field_validator("words")
    @classmethod
    def normalize_reference_words(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Lowercase, trim and deduplicate words, keeping order."""
        return _normalize_words(v)

    def min_required(self, total_tokens: int) -> int:
        """
        Minimum number of distinct reference words for ``total_tokens``.

        Examples
        --------
        >>> cfg = LanguageRuleConfig(min_distinct=3, dynamic=True, dynamic_cap=10,
        ...                          words_per_required_match=20)
        >>> cfg.min_required(10), cfg.min_required(100), cfg.min_required(1000)
        (3, 5, 10)
        """
        if not self.dynamic:
            return self.min_distinct
        scaled = math.ceil(total_tokens / self.words_per_required_match)
        return max(self.min_distinct, min(self.dynamic_cap, scaled))


class TopicRuleConfig(BaseModel):
    """
    One negative topic rule.

    A channel matching ``threshold`` or more distinct keywords is rejected.

    Attributes
    ----------
    name : str
        Topic name reported in the verdict.
    keywords : tuple[str, ...]
        Keywords or multi-word phrases, matched on word boundaries.
    threshold : int
        Distinct keyword matches that reject the channel.
    enabled : bool
        Whether the rule is evaluated.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    keywords: tuple[str, ...] = ()
    threshold: int = Field(default=3, ge=1)
    enabled: bool = True

    @field_validator("keywords")
    @classmethod
    def normalize_keywords(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Lowercase, trim, collapse whitespace and deduplicate keywords."""
        return _normalize_words(tuple(" ".join(k.split()) for k in v))


def _default_topics() -> tuple[TopicRuleConfig, ...]:
    return tuple(
        TopicRuleConfig(name=name, keywords=keywords, threshold=3)
        for name, keywords in DEFAULT_TOPIC_KEYWORDS.items()
    )


class ClassifierConfig(BaseModel):
    """
    Complete rule classifier configuration.

    Stages absent from ``stage_order`` never run.

    Attributes
    ----------
    stage_order : tuple[FilterStage, ...]
        Evaluation order of the stages.
    location : LocationRuleConfig
        Location stage configuration.
    alphabet : AlphabetRuleConfig
        Alphabet stage configuration.
    language : LanguageRuleConfig
        Language stage configuration.
    topics : tuple[TopicRuleConfig, ...]
        Topic rules, evaluated in order.
    """

    model_config = ConfigDict(frozen=True)

    stage_order: tuple[FilterStage, ...] = DEFAULT_STAGE_ORDER
    location: LocationRuleConfig = Field(default_factory=LocationRuleConfig)
    alphabet: AlphabetRuleConfig = Field(default_factory=AlphabetRuleConfig)
    language: LanguageRuleConfig = Field(default_factory=LanguageRuleConfig)
    topics: tuple[TopicRuleConfig, ...] = Field(default_factory=_default_topics)

    @field_validator("stage_order")
    @classmethod
    def validate_stage_order(cls, v: tuple[FilterStage, ...]) -> tuple[FilterStage, ...]:
        """Reject ``none`` and repeated stages."""
        if FilterStage.NONE in v:
            raise ValueError("stage_order cannot contain 'none'")
        if len(set(v)) != len(v):
            raise ValueError("stage_order contains duplicate stages")
        return v

    @field_validator("topics")
    @classmethod
    def validate_topic_names(
        cls, v: tuple[TopicRuleConfig, ...]
    ) -> tuple[TopicRuleConfig, ...]:
        """Reject topic rules sharing a name."""
        names = [t.name for t in v]
        if len(set(names)) != len(names):
            raise ValueError("topic rule names must be unique")
        return v


def load_classifier_config(path: Path | str | None = None) -> ClassifierConfig:
    """
    Load classifier rules from a YAML file.

    Keys missing from the file keep their defaults, so a rules file only
    needs to list what it changes.

    Parameters
    ----------
    path : Path | str | None, optional
        YAML rules file. None returns the default configuration.

    Returns
    -------
    ClassifierConfig
        The validated configuration.

    Raises
    ------
    RulesConfigError
        If the file cannot be read, is not valid YAML, is not a mapping or
        fails validation.

    Examples
    --------
    A rules file tightening the language stage and adding a topic::

        language:
          min_distinct: 3
          dynamic: true
        topics:
          - name: gambling
            keywords: [casino, poker, sportwetten]
            threshold: 2
    """
    if path is None:
        return ClassifierConfig()

    rules_path = Path(path)
    try:
        raw = yaml.safe_load(rules_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise RulesConfigError(f"Cannot read rules file: {e}", str(rules_path)) from e
    except yaml.YAMLError as e:
        raise RulesConfigError(f"Invalid YAML in rules file: {e}", str(rules_path)) from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise RulesConfigError("Rules file must contain a mapping", str(rules_path))

    try:
        config = ClassifierConfig.model_validate(raw)
    except ValidationError as e:
        raise RulesConfigError(f"Invalid rules: {e}", str(rules_path)) from e

    logger.info("Loaded classifier rules from %s", rules_path)
    return config


def dump_classifier_config(config: ClassifierConfig) -> str:
    """Render a configuration as YAML, in the format the loader accepts."""
    data = config.model_dump(mode="json")
    return yaml.safe_dump(data, allow_unicode=True, sort_keys=False, default_flow_style=False)
