"""
Pydantic models for classifier output.

Each stage of the rule classifier produces a frozen result model carrying
enough detail (counts, matched items, capped text samples) to explain the
decision without re-running the check. :class:`FilterVerdict` bundles the
results of the stages that ran.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from channelsieve.models.enums import FilterStage


class LocationResult(BaseModel):
    """Outcome of the location stage."""

    model_config = ConfigDict(frozen=True)

    passed: bool
    reason: str | None = None
    country: str | None = None
    matched: str | None = None
    deferred: bool = False


class AlphabetFieldMatch(BaseModel):
    """Disallowed characters found in one text field."""

    model_config = ConfigDict(frozen=True)

    field: str
    distinct_count: int
    chars: list[str]
    text_sample: str


class AlphabetResult(BaseModel):
    """Outcome of the alphabet stage."""

    model_config = ConfigDict(frozen=True)

    passed: bool
    reason: str | None = None
    max_distinct_per_field: int
    matches: list[AlphabetFieldMatch] = Field(default_factory=list)


class LanguageResult(BaseModel):
    """Outcome of the language stage."""

    model_config = ConfigDict(frozen=True)

    passed: bool
    reason: str | None = None
    min_required: int
    hits_distinct: int
    total_tokens: int
    words_found_sample: list[str] = Field(default_factory=list)


class TopicFieldHit(BaseModel):
    """Occurrences of one topic keyword inside one text field."""

    model_config = ConfigDict(frozen=True)

    field: str
    count: int
    samples: list[str] = Field(default_factory=list)


class TopicKeywordMatch(BaseModel):
    """One topic keyword found in the channel's text."""

    model_config = ConfigDict(frozen=True)

    keyword: str
    count: int
    fields: list[TopicFieldHit] = Field(default_factory=list)


class TopicResult(BaseModel):
    """Outcome of one named topic rule."""

    model_config = ConfigDict(frozen=True)

    passed: bool
    reason: str | None = None
    topic: str
    threshold: int
    hits_distinct: int
    hits_total: int
    matches: list[TopicKeywordMatch] = Field(default_factory=list)


class FilterVerdict(BaseModel):
    """
    Result of one classification call.

    Stages that did not run (because an earlier stage failed, or because
    they are disabled) have no diagnostics: their field is ``None`` or, for
    topics, absent from :attr:`topics`.

    Attributes
    ----------
    passed : bool
        Whether the channel passed every stage that ran.
    failed_stage : FilterStage
        The first failing stage, or ``FilterStage.NONE`` when passed.
    reason : str | None
        Human-readable reason of the failing stage.
    location : LocationResult | None
        Location stage diagnostics.
    alphabet : AlphabetResult | None
        Alphabet stage diagnostics.
    language : LanguageResult | None
        Language stage diagnostics.
    topics : dict[str, TopicResult]
        Diagnostics per topic rule that ran, in evaluation order.
    """

    model_config = ConfigDict(frozen=True)

    passed: bool
    failed_stage: FilterStage = FilterStage.NONE
    reason: str | None = None
    location: LocationResult | None = None
    alphabet: AlphabetResult | None = None
    language: LanguageResult | None = None
    topics: dict[str, TopicResult] = Field(default_factory=dict)

    @property
    def stages_run(self) -> list[FilterStage]:
        """Stages that produced diagnostics, in canonical order."""
        stages: list[FilterStage] = []
        if self.location is not None:
            stages.append(FilterStage.LOCATION)
        if self.alphabet is not None:
            stages.append(FilterStage.ALPHABET)
        if self.language is not None:
            stages.append(FilterStage.LANGUAGE)
        if self.topics:
            stages.append(FilterStage.TOPIC)
        return stages
