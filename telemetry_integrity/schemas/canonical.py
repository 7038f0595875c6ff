"""
Schemas & Canonicalization
File: canonical.py

Purpose: Deterministic serialization utilities for Merkle leaves.

CRITICAL: All outputs from this module MUST be byte-identical across runs
and across implementations in other languages. Objects are serialized from
an explicit, ordered field list; keys are never sorted and dict ordering is
never relied upon.

Formatting rules (leaf encoding "v1"):
- Compact JSON object, separators "," and ":", no whitespace
- Strings JSON-escaped, non-ASCII characters left as UTF-8
- Datetimes as ISO-8601 UTC with millisecond precision and Z suffix
- Numbers in shortest round-trip form, rendered the way ECMAScript's
  Number.prototype.toString renders them (20 not 20.0, 1e-7 not 1e-07)
- None as null; NaN and Infinity are rejected
"""

import json
import math
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Sequence

from .errors import CanonicalizationError

# Canonical JSON separators - no whitespace
CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")

# ECMAScript switches to exponent notation outside this decimal-point range
_MAX_POSITIONAL_EXPONENT = 21
_MIN_POSITIONAL_EXPONENT = -6


def ensure_utc(dt: datetime) -> datetime:
    """
    Ensure a datetime is timezone-aware and in UTC.

    Rules:
        - If naive (no tzinfo): treat as UTC
        - If aware: convert to UTC
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_datetime_canonical(dt: datetime) -> str:
    """
    Format a datetime as ISO-8601 UTC with millisecond precision.

    Sub-millisecond precision is truncated, not rounded.

    Args:
        dt: A datetime object (naive values are treated as UTC).

    Returns:
        ISO-8601 string with Z suffix (e.g., "2025-01-01T08:00:00.000Z").
    """
    utc_dt = ensure_utc(dt)
    return (
        f"{utc_dt.year:04d}-{utc_dt.month:02d}-{utc_dt.day:02d}"
        f"T{utc_dt.hour:02d}:{utc_dt.minute:02d}:{utc_dt.second:02d}"
        f".{utc_dt.microsecond // 1000:03d}Z"
    )


def format_number_canonical(value: int | float, path: str = "") -> str:
    """
    Format a number as its canonical JSON text.

    Python's repr() and ECMAScript both emit the shortest digit string
    that round-trips a double; they differ only in where the decimal
    point goes and how exponents are spelled. This lays the digits out
    with the ECMAScript rules.

    Args:
        value: An int or float.
        path: Field name for error reporting.

    Returns:
        The JSON number text.

    Raises:
        CanonicalizationError: If the value is a bool, not a number,
            or not finite.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CanonicalizationError(
            message=f"Expected a number, got {type(value).__name__}",
            details={"path": path, "type": type(value).__name__},
        )

    number = float(value)
    if not math.isfinite(number):
        raise CanonicalizationError(
            message=f"Non-finite number encountered: {value}",
            details={"path": path, "value": str(value)},
        )

    # Covers -0.0 as well
    if number == 0:
        return "0"

    sign = "-" if number < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(number))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = k + exponent  # position of the decimal point relative to the digits

    if k <= n <= _MAX_POSITIONAL_EXPONENT:
        return sign + digits + "0" * (n - k)
    if 0 < n <= _MAX_POSITIONAL_EXPONENT:
        return sign + digits[:n] + "." + digits[n:]
    if _MIN_POSITIONAL_EXPONENT < n <= 0:
        return sign + "0." + "0" * (-n) + digits

    e = n - 1
    exp_text = f"e{'+' if e >= 0 else '-'}{abs(e)}"
    if k == 1:
        return sign + digits + exp_text
    return sign + digits[0] + "." + digits[1:] + exp_text


def canonicalize_scalar(value: Any, path: str = "") -> str:
    """
    Render a single scalar value as canonical JSON text.

    Raises:
        CanonicalizationError: For unsupported types.
    """
    if value is None:
        return "null"

    if isinstance(value, bool):
        # Must check bool before int since bool is subclass of int
        return "true" if value else "false"

    if isinstance(value, (int, float)):
        return format_number_canonical(value, path)

    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)

    if isinstance(value, datetime):
        return json.dumps(format_datetime_canonical(value))

    raise CanonicalizationError(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical_fields(fields: Sequence[tuple[str, Any]]) -> str:
    """
    Serialize an explicitly ordered field list to a canonical JSON object.

    Field order is taken from the sequence as given.

    Args:
        fields: (name, value) pairs in their fixed output order.

    Returns:
        A compact JSON object string.

    Raises:
        CanonicalizationError: On duplicate names or unsupported values.

    Example:
        >>> dumps_canonical_fields([("index", 0), ("distance", 20.0)])
        '{"index":0,"distance":20}'
    """
    item_sep, key_sep = CANONICAL_JSON_SEPARATORS
    seen: set[str] = set()
    parts: list[str] = []
    for name, value in fields:
        if name in seen:
            raise CanonicalizationError(
                message=f"Duplicate field name in canonical payload: {name}",
                details={"path": name},
            )
        seen.add(name)
        parts.append(json.dumps(name, ensure_ascii=False) + key_sep + canonicalize_scalar(value, name))
    return "{" + item_sep.join(parts) + "}"
