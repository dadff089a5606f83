"""
The individual rule classifier stages.

Each check is a pure function over the channel's text and its rule
configuration, returning a result model with the diagnostics behind the
decision.
"""

from __future__ import annotations

import re
from functools import lru_cache

from channelsieve.models.enums import MissingCountryPolicy
from channelsieve.models.verdict import (
    AlphabetFieldMatch,
    AlphabetResult,
    LanguageResult,
    LocationResult,
    TopicFieldHit,
    TopicKeywordMatch,
    TopicResult,
)
from channelsieve.services.classifier.config import (
    AlphabetRuleConfig,
    LanguageRuleConfig,
    LocationRuleConfig,
    TopicRuleConfig,
)
from channelsieve.services.classifier.texts import ChannelTexts, tokenize

MAX_CHARS_REPORTED = 50
TEXT_SAMPLE_LENGTH = 140
MAX_WORDS_REPORTED = 50
MAX_SAMPLES_PER_FIELD = 3
SAMPLE_WINDOW = 40

_COUNTRY_DELIMITERS_RE = re.compile(r"[\s,;/()\[\]]+")


def check_location(country: str | None, config: LocationRuleConfig) -> LocationResult:
    """
    Check the channel country against the allow-list.

    A country passes when, trimmed and lowercased, it equals an allowed
    entry or contains one as a whole token ("Deutschland (DE)").

    Parameters
    ----------
    country : str | None
        Free-text country from the channel page.
    config : LocationRuleConfig
        Allow-list and missing-country policy.

    Returns
    -------
    LocationResult
        The stage result; ``deferred`` is set when a missing country was
        let through under the ``defer`` policy.
    """
    raw = (country or "").strip()
    normalized = raw.lower()
    if not normalized:
        if config.missing_country is MissingCountryPolicy.DEFER:
            return LocationResult(
                passed=True,
                reason="No country specified; deferred to content checks",
                deferred=True,
            )
        return LocationResult(passed=False, reason="No country specified")

    allowed = config.allowed_countries
    if normalized in allowed:
        return LocationResult(passed=True, country=country, matched=normalized)

    for token in _COUNTRY_DELIMITERS_RE.split(normalized):
        if token and token in allowed:
            return LocationResult(passed=True, country=country, matched=token)

    return LocationResult(
        passed=False,
        reason=f'Country "{raw}" not in allowed list',
        country=country,
    )


def _distinct_bad_chars(text: str, bad_chars: frozenset[str]) -> list[str]:
    # Order of first appearance keeps results reproducible
    return list(dict.fromkeys(ch for ch in text if ch in bad_chars))


def check_alphabet(texts: ChannelTexts, config: AlphabetRuleConfig) -> AlphabetResult:
    """
    Count distinct disallowed characters per field.

    Title, description and every video title are checked independently;
    the stage fails if any single field has more than
    ``max_distinct_per_field`` distinct bad characters.
    """
    limit = config.max_distinct_per_field
    bad_chars = config.bad_char_set
    if not bad_chars:
        return AlphabetResult(passed=True, max_distinct_per_field=limit)

    matches: list[AlphabetFieldMatch] = []
    passed = True
    for field, text in texts.fields():
        found = _distinct_bad_chars(text, bad_chars)
        if not found:
            continue
        matches.append(
            AlphabetFieldMatch(
                field=field,
                distinct_count=len(found),
                chars=found[:MAX_CHARS_REPORTED],
                text_sample=text[:TEXT_SAMPLE_LENGTH],
            )
        )
        if len(found) > limit:
            passed = False

    return AlphabetResult(
        passed=passed,
        reason=None if passed else "Too many disallowed characters in one or more fields",
        max_distinct_per_field=limit,
        matches=matches,
    )


def check_language(texts: ChannelTexts, config: LanguageRuleConfig) -> LanguageResult:
    """
    Count distinct reference words in the combined channel text.

    Reference words are reported in reference-list order.
    """
    tokens = tokenize(texts.full_text())
    token_set = set(tokens)
    found = [word for word in config.words if word in token_set]
    min_required = config.min_required(len(tokens))
    passed = len(found) >= min_required

    return LanguageResult(
        passed=passed,
        reason=(
            None
            if passed
            else f"Only {len(found)} distinct reference words found (minimum: {min_required})"
        ),
        min_required=min_required,
        hits_distinct=len(found),
        total_tokens=len(tokens),
        words_found_sample=found[:MAX_WORDS_REPORTED],
    )


@lru_cache(maxsize=1024)
def _keyword_regex(keyword: str) -> re.Pattern[str]:
    # Whole-word match; inner whitespace of phrases matches any whitespace run
    body = r"\s+".join(re.escape(part) for part in keyword.split())
    return re.compile(rf"(?<![^\W_]){body}(?![^\W_])", re.IGNORECASE)


def _samples(text: str, matches: list[re.Match[str]]) -> list[str]:
    samples: list[str] = []
    for match in matches[:MAX_SAMPLES_PER_FIELD]:
        start = max(0, match.start() - SAMPLE_WINDOW)
        samples.append(text[start : match.end() + SAMPLE_WINDOW])
    return samples


def check_topic(texts: ChannelTexts, rule: TopicRuleConfig) -> TopicResult:
    """
    Evaluate one negative topic rule.

    Every keyword is searched in every field on word boundaries. The rule
    fails (rejecting the channel) when the number of distinct keywords
    found reaches ``rule.threshold``. Matches are reported by descending
    total count, ties in keyword order.
    """
    fields = list(texts.fields())
    keyword_matches: list[TopicKeywordMatch] = []

    for keyword in rule.keywords:
        regex = _keyword_regex(keyword)
        field_hits: list[TopicFieldHit] = []
        for field, text in fields:
            if not text:
                continue
            found = list(regex.finditer(text))
            if found:
                field_hits.append(
                    TopicFieldHit(field=field, count=len(found), samples=_samples(text, found))
                )
        if field_hits:
            keyword_matches.append(
                TopicKeywordMatch(
                    keyword=keyword,
                    count=sum(h.count for h in field_hits),
                    fields=field_hits,
                )
            )

    keyword_matches.sort(key=lambda m: m.count, reverse=True)
    hits_distinct = len(keyword_matches)
    hits_total = sum(m.count for m in keyword_matches)
    passed = hits_distinct < rule.threshold

    return TopicResult(
        passed=passed,
        reason=(
            None
            if passed
            else (
                f"Detected as {rule.name} content ({hits_distinct} distinct "
                f"keyword hits, threshold: {rule.threshold})"
            )
        ),
        topic=rule.name,
        threshold=rule.threshold,
        hits_distinct=hits_distinct,
        hits_total=hits_total,
        matches=keyword_matches,
    )
