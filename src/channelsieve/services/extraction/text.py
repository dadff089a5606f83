"""
Accessors for the untyped ``ytInitialData`` tree.

The tree is plain ``dict``/``list`` data with an unstable layout, so every
read goes through these helpers instead of chained subscripts.
"""

from __future__ import annotations

from typing import Any


def dig(value: Any, *path: str | int) -> Any:
    """
    Follow a path of dict keys and list indices, returning None on any miss.

    Examples
    --------
    >>> dig({"a": [{"b": 1}]}, "a", 0, "b")
    1
    >>> dig({"a": []}, "a", 0, "b") is None
    True
    """
    current = value
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(step)
        if current is None:
            return None
    return current


def dig_list(value: Any, *path: str | int) -> list[Any]:
    """Like :func:`dig`, but return ``[]`` unless the target is a list."""
    result = dig(value, *path)
    return result if isinstance(result, list) else []


def dig_dict(value: Any, *path: str | int) -> dict[str, Any] | None:
    """Like :func:`dig`, but return None unless the target is a dict."""
    result = dig(value, *path)
    return result if isinstance(result, dict) else None


def extract_text(value: Any) -> str | None:
    """
    Convert a YouTube text value to a plain string.

    YouTube represents text as a plain string, as ``{"simpleText": ...}``
    or as ``{"runs": [{"text": ...}, ...]}``.

    Parameters
    ----------
    value : Any
        A string, a text object or anything else.

    Returns
    -------
    str | None
        The stripped text, or None when it is empty or the shape is not
        recognised.

    Examples
    --------
    >>> extract_text({"runs": [{"text": "Hallo "}, {"text": "Welt"}]})
    'Hallo Welt'
    >>> extract_text({"simpleText": "   "}) is None
    True
    """
    if not value:
        return None
    if isinstance(value, str):
        return value.strip() or None
    if not isinstance(value, dict):
        return None

    simple = value.get("simpleText")
    if isinstance(simple, str):
        return simple.strip() or None

    runs = value.get("runs")
    if isinstance(runs, list):
        text = "".join(
            r["text"]
            for r in runs
            if isinstance(r, dict) and isinstance(r.get("text"), str)
        ).strip()
        return text or None

    return None
