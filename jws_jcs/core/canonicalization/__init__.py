"""
Deterministic JSON canonicalization (RFC 8785, JCS).

This module converts a parsed JSON value tree to the unique canonical byte
sequence used as signature payload. Object keys are sorted by UTF-16 code
units, strings use the minimal JSON escape set, numbers are rendered with the
ECMAScript Number-to-String algorithm and no insignificant whitespace is
emitted. Output does not depend on locale or platform.
"""

import json
import math
from decimal import Decimal
from typing import Any, Dict

from jws_jcs.core.errors import JwsJcsError
from jws_jcs.core.models import FailureReason


class CanonicalizationError(JwsJcsError):
    """Raised when canonicalization fails due to invalid input."""

    reason = FailureReason.CANONICALIZATION_ERROR


def _render_number(value: Any) -> str:
    """Render a number the way ECMAScript ``Number.prototype.toString`` does."""
    try:
        number = float(value)
    except OverflowError:
        raise CanonicalizationError(f"Number not representable as a double: {value}")
    if not math.isfinite(number):
        raise CanonicalizationError(f"Non-finite number: {value}")
    if number == 0:
        # Covers -0 as well
        return "0"

    sign = "-" if number < 0 else ""
    # repr() yields the shortest digit string that round-trips
    digits_tuple, exponent = Decimal(repr(abs(number))).as_tuple()[1:]
    digits = "".join(str(d) for d in digits_tuple).rstrip("0")
    exponent += len(digits_tuple) - len(digits)
    k = len(digits)
    n = k + exponent

    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * (-n) + digits

    e = n - 1
    exp_sign = "+" if e >= 0 else "-"
    mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
    return f"{sign}{mantissa}e{exp_sign}{abs(e)}"


def _render_string(value: str) -> str:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise CanonicalizationError("String contains an unpaired surrogate")
    # json.dumps escapes exactly '"', '\\' and C0 controls (short forms where defined)
    return json.dumps(value, ensure_ascii=False)


def _utf16_sort_key(key: str) -> bytes:
    return key.encode("utf-16-be", "surrogatepass")


def _canonicalize_value(value: Any) -> str:
    """Recursively convert a JSON value to its canonical string representation."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return _render_number(value)
    if isinstance(value, str):
        return _render_string(value)
    if isinstance(value, list):
        return "[" + ",".join(_canonicalize_value(item) for item in value) + "]"
    if isinstance(value, dict):
        return _canonicalize_object(value)

    raise CanonicalizationError(f"Unsupported type for canonicalization: {type(value).__name__}")


def _canonicalize_object(obj: Dict[str, Any]) -> str:
    """Convert a dictionary to a canonical JSON object string."""
    for key in obj:
        if not isinstance(key, str):
            raise CanonicalizationError(f"Object keys must be strings, got {type(key).__name__}")

    items = sorted(obj.items(), key=lambda kv: _utf16_sort_key(kv[0]))
    return "{" + ",".join(
        f"{_render_string(key)}:{_canonicalize_value(value)}" for key, value in items
    ) + "}"


def canonicalize(data: Any) -> bytes:
    """
    Convert a JSON value tree to canonical JSON bytes.

    Args:
        data: The value to canonicalize (dict, list, or primitive)

    Returns:
        bytes: The canonical JSON representation as UTF-8 bytes

    Raises:
        CanonicalizationError: If the input cannot be canonicalized
    """
    try:
        return _canonicalize_value(data).encode("utf-8")
    except RecursionError as e:
        raise CanonicalizationError("Structure nested too deeply") from e


def canonical_json_dumps(data: Any) -> str:
    """
    Convert a JSON value tree to a canonical JSON string.

    This is a convenience wrapper around canonicalize() that returns a string.
    """
    return canonicalize(data).decode("utf-8")


def verify_canonical_equivalence(a: Any, b: Any) -> bool:
    """
    Check if two values have equivalent canonical JSON representations.

    This is useful for testing and verification purposes.
    """
    return canonicalize(a) == canonicalize(b)
