"""
Rule classifier for extracted YouTube channels.

Stages (in default order, short-circuiting on the first failure):
- location: country allow-list
- alphabet: distinct disallowed characters per text field
- language: distinct reference words in the combined text
- topic: named negative-keyword rules

Modules
-------
classifier
    The :func:`classify` entry point
stages
    The individual stage checks
config
    Rule configuration models and YAML loading
texts
    Channel text views and tokenization
wordlists
    Default reference lists
"""

from __future__ import annotations

from channelsieve.services.classifier.classifier import classify
from channelsieve.services.classifier.config import (
    AlphabetRuleConfig,
    ClassifierConfig,
    LanguageRuleConfig,
    LocationRuleConfig,
    TopicRuleConfig,
    dump_classifier_config,
    load_classifier_config,
)
from channelsieve.services.classifier.stages import (
    check_alphabet,
    check_language,
    check_location,
    check_topic,
)
from channelsieve.services.classifier.texts import ChannelTexts, tokenize

__all__ = [
    "AlphabetRuleConfig",
    "ChannelTexts",
    "ClassifierConfig",
    "LanguageRuleConfig",
    "LocationRuleConfig",
    "TopicRuleConfig",
    "check_alphabet",
    "check_language",
    "check_location",
    "check_topic",
    "classify",
    "dump_classifier_config",
    "load_classifier_config",
    "tokenize",
]
