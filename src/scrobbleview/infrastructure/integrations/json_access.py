"""Lenient accessors for the loosely typed JSON scrobble providers return.

Last.fm in particular is inconsistent: numbers arrive as strings ("42"), empty
strings stand in for missing values, and a list with one element is sometimes
sent as that bare element. These helpers absorb all of that so the parsers can
stay declarative. None of them raise.
"""

import math
from collections.abc import Sequence
from typing import Any

PathKey = str | int


def get_path(data: Any, *path: PathKey) -> Any:
    """Walk nested dicts/lists; None as soon as a step is missing.

    Example:
        get_path(payload, "recenttracks", "track", 0, "name")
    """
    current = data
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or not -len(current) <= key < len(current):
                return None
            current = current[key]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(key)
        if current is None:
            return None
    return current


def get_optional_str(data: Any, *path: PathKey) -> str | None:
    """String at ``path``; numbers are stringified, empty strings become None."""
    value = get_path(data, *path)
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, str) and value:
        return value
    return None


def get_str(data: Any, *path: PathKey, default: str = "") -> str:
    """Like get_optional_str, but never None."""
    value = get_optional_str(data, *path)
    return default if value is None else value


def get_optional_int(data: Any, *path: PathKey) -> int | None:
    """Integer at ``path``; numeric strings ("42", " 7 ", "3.0") parse, anything else is None."""
    value = get_path(data, *path)
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            try:
                return int(float(text))
            except (ValueError, OverflowError):
                return None
    return None


def get_int(data: Any, *path: PathKey, default: int = 0) -> int:
    """Like get_optional_int, but missing or unparsable values give ``default``."""
    value = get_optional_int(data, *path)
    return default if value is None else value


def as_list(value: Any) -> list[Any]:
    """Normalize a provider "list": None -> [], bare object -> [object]."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, Sequence) and not isinstance(value, str | bytes):
        return list(value)
    return [value]
