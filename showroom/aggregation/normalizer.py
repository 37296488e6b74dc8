"""
Record Normalizer

Coerces loosely-typed upstream values into the types the aggregation engine
works with. Amounts may arrive as numbers, numeric strings, Decimals, null or
garbage; every reader degrades to a neutral value instead of raising, so one
malformed row contributes zero rather than poisoning a whole aggregate.
"""

import math
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Optional

TRUE_STRINGS = frozenset({"true", "1", "yes", "y", "t"})


def normalize_amount(raw: Any) -> float:
    """
    Parse a monetary or numeric value.

    Args:
        raw: Any value read from a record field

    Returns:
        The parsed finite number, or 0.0 when the value is missing,
        non-numeric, NaN or infinite
    """
    if raw is None or isinstance(raw, bool):
        return 0.0

    if isinstance(raw, (int, float, Decimal)):
        try:
            value = float(raw)
        except (ValueError, OverflowError):
            return 0.0
    elif isinstance(raw, str):
        stripped = raw.strip()
        if not stripped:
            return 0.0
        try:
            value = float(stripped)
        except ValueError:
            return 0.0
    else:
        return 0.0

    if not math.isfinite(value):
        return 0.0
    return value


def normalize_count(raw: Any) -> int:
    """Parse a non-negative integer count; anything unusable counts as 0."""
    value = normalize_amount(raw)
    if value <= 0:
        return 0
    return int(value)


def normalize_flag(raw: Any) -> bool:
    """Parse a boolean flag. Missing values are False."""
    if raw is None:
        return False
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int):
        return raw != 0
    if isinstance(raw, (float, Decimal)):
        return normalize_amount(raw) != 0
    if isinstance(raw, str):
        return raw.strip().lower() in TRUE_STRINGS
    return False


def normalize_timestamp(raw: Any) -> Optional[datetime]:
    """
    Parse a creation timestamp.

    Accepts datetimes, dates, ISO-8601 strings (date-only and a trailing
    ``Z`` included) and epoch seconds. Naive values are taken as UTC so that
    every timestamp compares with every other.

    Returns:
        A timezone-aware datetime, or None when the value cannot be read
    """
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, datetime):
        parsed = raw
    elif isinstance(raw, date):
        parsed = datetime(raw.year, raw.month, raw.day)
    elif isinstance(raw, (int, float, Decimal)):
        try:
            seconds = float(raw)
            if not math.isfinite(seconds):
                return None
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(raw, str):
        stripped = raw.strip()
        if not stripped:
            return None
        if stripped.endswith(("Z", "z")):
            stripped = stripped[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(stripped)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_identifier(raw: Any) -> Optional[str]:
    """Normalize a join key to a non-empty string, or None."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    text = str(raw).strip()
    return text or None


def normalize_text(raw: Any) -> str:
    """Normalize a display string. Missing values become an empty string."""
    if raw is None:
        return ""
    return str(raw).strip()

