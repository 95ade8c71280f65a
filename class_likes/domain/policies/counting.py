"""Counting policy — how a like action changes a counter.

Every backend routes its arithmetic through these helpers so the
non-negative floor is applied identically everywhere.
"""

from __future__ import annotations

import math

from class_likes.domain.value_objects.enums import LikeAction


def delta_for(action: LikeAction) -> int:
    """+1 for a like, -1 for an unlike."""
    return 1 if action == LikeAction.LIKE else -1


def apply_delta(count: int, delta: int) -> int:
    """Clamped decrement: the result is floored at zero."""
    return max(0, count + delta)


def coerce_count(raw: object) -> int:
    """Turn a stored value into a valid count.

    Backends hand back ints, numeric strings (Redis) or floats (JSON).
    Anything non-numeric, non-finite, fractional or negative reads as 0.
    """
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw if raw >= 0 else 0
    if isinstance(raw, float):
        if not math.isfinite(raw) or not raw.is_integer():
            return 0
        return max(0, int(raw))
    if isinstance(raw, (str, bytes)):
        text = raw.decode() if isinstance(raw, bytes) else raw
        try:
            return coerce_count(int(text.strip()))
        except ValueError:
            return 0
    return 0


def sanitize_snapshot(raw: dict) -> tuple[dict[str, int], bool]:
    """Coerce every value of a decoded snapshot.

    Returns:
        (clean_snapshot, had_invalid_values)
    """
    clean: dict[str, int] = {}
    dirty = False
    for class_id, value in raw.items():
        count = coerce_count(value)
        if count != value or isinstance(value, bool):
            dirty = True
        clean[str(class_id)] = count
    return clean, dirty
