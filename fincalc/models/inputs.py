"""
Parsing of raw form input.

Form fields arrive as strings (or loosely typed JSON values) and are re-sent
on every edit, so parsing never fails: empty or unparseable values become the
field default (or None for optional fields) and numbers are clamped to the
field's documented bounds.
"""

import math
from typing import Any, Optional

MAX_MONEY = 1_000_000_000.0


def _to_float(raw: Any) -> Optional[float]:
    if raw is None:
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    else:
        return None
    return value if math.isfinite(value) else None


def _clamp(value: float, minimum: Optional[float], maximum: Optional[float]) -> float:
    if minimum is not None:
        value = max(minimum, value)
    if maximum is not None:
        value = min(maximum, value)
    return value


def parse_number(
    raw: Any,
    default: float = 0.0,
    minimum: Optional[float] = 0.0,
    maximum: Optional[float] = MAX_MONEY,
) -> float:
    """
    Parse a numeric form value.

    Args:
        raw: Raw value (string, number or None)
        default: Value used when ``raw`` is empty or invalid
        minimum: Lower bound (None for unbounded)
        maximum: Upper bound (None for unbounded)

    Returns:
        Parsed and clamped number
    """
    value = _to_float(raw)
    if value is None:
        value = default
    return _clamp(value, minimum, maximum)


def parse_optional_number(
    raw: Any,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
) -> Optional[float]:
    """Parse a value that may be left blank; blank or invalid gives None."""
    value = _to_float(raw)
    if value is None:
        return None
    return _clamp(value, minimum, maximum)


def parse_int(
    raw: Any,
    default: int = 0,
    minimum: Optional[int] = 0,
    maximum: Optional[int] = None,
) -> int:
    """Parse an integer field, truncating any fractional part."""
    value = _to_float(raw)
    parsed = default if value is None else int(value)
    return int(_clamp(parsed, minimum, maximum))


def parse_percent(raw: Any, maximum: float = 100.0, default: float = 0.0) -> float:
    """Parse a percentage field clamped to [0, maximum]."""
    return parse_number(raw, default=default, minimum=0.0, maximum=maximum)


def parse_bool(raw: Any) -> bool:
    """Parse a checkbox value."""
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    return bool(raw)
