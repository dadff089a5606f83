"""
Locate and parse the ``ytInitialData`` state object embedded in page HTML.

YouTube pages assign the state object to a script variable. The JSON body
is located by marker and delimited by brace counting, because a non-greedy
regex breaks on arbitrarily nested structures.
"""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

INITIAL_DATA_MARKERS: tuple[str, ...] = (
    "var ytInitialData =",
    'window["ytInitialData"] =',
    "window['ytInitialData'] =",
    "ytInitialData =",
)
"""Assignment prefixes tried in order; the first one found wins."""

INITIAL_PLAYER_RESPONSE_MARKERS: tuple[str, ...] = (
    "var ytInitialPlayerResponse =",
    'window["ytInitialPlayerResponse"] =',
    "ytInitialPlayerResponse =",
)
"""Assignment prefixes of the player response embedded in watch pages."""


def _extract_json_object(html: str, start: int) -> str | None:
    """
    Extract a balanced JSON object from HTML starting at the given position.

    Tracks brace depth, whether the scanner is inside a string literal and
    whether the previous character was an escaping backslash, so braces
    and quotes inside strings are ignored.

    Parameters
    ----------
    html : str
        Raw HTML source.
    start : int
        Position of the opening ``{`` in the HTML string.

    Returns
    -------
    str | None
        The balanced JSON string, or None if there is no opening brace at
        ``start`` or the braces never balance.
    """
    if start >= len(html) or html[start] != "{":
        return None

    depth = 0
    in_string = False
    escape = False

    for i in range(start, len(html)):
        ch = html[i]

        if escape:
            escape = False
            continue

        if ch == "\\":
            if in_string:
                escape = True
            continue

        if ch == '"':
            in_string = not in_string
            continue

        if in_string:
            continue

        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return html[start : i + 1]

    return None


def extract_embedded_object(
    html: str, markers: tuple[str, ...] = INITIAL_DATA_MARKERS
) -> dict[str, Any] | None:
    """
    Extract the embedded state object from a page.

    Parameters
    ----------
    html : str
        Raw page HTML.
    markers : tuple[str, ...], optional
        Assignment prefixes to look for, in priority order
        (default: the ``ytInitialData`` variants).

    Returns
    -------
    dict[str, Any] | None
        The parsed object, or None when no marker is present, no ``{``
        follows it, the braces never balance, the JSON is invalid or the
        value is not an object. Never raises.

    Examples
    --------
    >>> extract_embedded_object('<script>var ytInitialData = {"a": 1};</script>')
    {'a': 1}
    >>> extract_embedded_object("<html></html>") is None
    True
    """
    if not html:
        return None

    idx = -1
    for marker in markers:
        idx = html.find(marker)
        if idx != -1:
            break
    if idx == -1:
        return None

    start = html.find("{", idx)
    if start == -1:
        return None

    json_str = _extract_json_object(html, start)
    if json_str is None:
        logger.debug("Embedded object at offset %d never balances", start)
        return None

    try:
        data = json.loads(json_str)
    except (json.JSONDecodeError, ValueError) as e:
        logger.debug("Embedded object is not valid JSON: %s", e)
        return None
    except RecursionError:
        logger.debug("Embedded object at offset %d is nested too deeply", start)
        return None

    return data if isinstance(data, dict) else None


def extract_player_response(html: str) -> dict[str, Any] | None:
    """Extract ``ytInitialPlayerResponse`` from a watch page, if present."""
    return extract_embedded_object(html, INITIAL_PLAYER_RESPONSE_MARKERS)
