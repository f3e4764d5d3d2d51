"""Percentage extraction from loosely-shaped challenge-progress entries."""

import math
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from .constants import CHALLENGE_ID_FIELDS, CHALLENGE_PERCENTAGE_FIELDS


def to_number(value: Any) -> Optional[float]:
    """
    Coerce a raw upstream value to a finite float.

    None, booleans, non-numeric strings, NaN and infinities all count as
    absent and return None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    return number


def sanitize_percentage(value: Any) -> Optional[float]:
    """
    Validate a candidate goal percentage.

    Values above 100 are legitimate over-achievement and pass through
    unclamped; only the progress bar fill is capped.

    Returns:
        The value rounded to 2 decimals, or None when it is missing,
        non-finite or negative
    """
    number = to_number(value)
    if number is None or number < 0:
        return None
    return round(number, 2)


def entry_challenge_id(entry: Mapping[str, Any]) -> Optional[str]:
    """Read the challenge identifier from the first populated id field."""
    for field_name in CHALLENGE_ID_FIELDS:
        value = entry.get(field_name)
        if value is not None and value != '':
            return str(value)
    return None


def entry_percentage(entry: Mapping[str, Any]) -> Optional[float]:
    """Read the percentage from the first value field holding a finite number."""
    for field_name in CHALLENGE_PERCENTAGE_FIELDS:
        number = to_number(entry.get(field_name))
        if number is not None:
            return number
    return None


def extract_challenge_percentage(
    entries: Optional[Iterable[Any]],
    accepted_ids: Iterable[str],
) -> Optional[float]:
    """
    Find the progress value for a metric in a player's challenge list.

    Entries may name their identifier 'challenge', 'challengeId' or 'id'
    and their value 'percentage', 'percent_completed' or 'progress'.

    Args:
        entries: Challenge-progress entries from the player status
        accepted_ids: Challenge identifiers that back the metric

    Returns:
        The first matching entry's value (may legitimately be 0), or None
        when no entry matches or the match carries no usable number
    """
    accepted = set(accepted_ids)
    for entry in entries or []:
        if not isinstance(entry, Mapping):
            continue
        if entry_challenge_id(entry) in accepted:
            return entry_percentage(entry)
    return None
