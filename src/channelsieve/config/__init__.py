"""
Configuration management module for channelsieve.

Handles application settings and environment variables for the crawler,
the fetcher and the pipeline driver.
"""

from __future__ import annotations

__all__: list[str] = []
