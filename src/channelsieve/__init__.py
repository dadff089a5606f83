"""
channelsieve - YouTube channel exclusion-list builder.

A CLI-first application that crawls public YouTube channel pages, extracts
the embedded ``ytInitialData`` state object, and classifies each channel
against a configurable rule set to build advertising-exclusion lists.
"""

from __future__ import annotations

__version__ = "0.4.0"
__author__ = "channelsieve"
__email__ = "noreply@channelsieve.dev"
__license__ = "AGPL-3.0-or-later"

__all__ = ["__version__", "__author__", "__email__", "__license__"]
