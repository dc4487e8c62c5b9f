"""
Strict JSON parsing into an order-preserving value tree.

Values are plain Python objects: ``dict`` (insertion ordered), ``list``,
``str``, ``int``, ``float``, ``bool`` and ``None``. Parsing is stricter than
``json.loads``: duplicate keys, ``NaN``/``Infinity``, numbers that do not fit
an IEEE-754 double, lone surrogates and excessive nesting are all rejected.
"""

import json
import logging
import math
import re
from typing import Any, Dict, List, Tuple, Union

from jws_jcs.core.errors import ParseError, PropertyNotFoundError

logger = logging.getLogger(__name__)

JsonValue = Union[Dict[str, Any], List[Any], str, int, float, bool, None]

DEFAULT_MAX_DEPTH = 128

_NONZERO_DIGIT = re.compile(r"[1-9]")


def _unique_object(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    obj: Dict[str, Any] = {}
    for key, value in pairs:
        if key in obj:
            raise ParseError(f"Duplicate property: {key!r}")
        obj[key] = value
    return obj


def _parse_int(literal: str) -> int:
    try:
        value = int(literal)
        float(value)
    except (OverflowError, ValueError):
        raise ParseError(f"Number out of range: {literal[:32]}")
    return value


def _parse_float(literal: str) -> float:
    value = float(literal)
    if math.isinf(value):
        raise ParseError(f"Number out of range: {literal[:32]}")
    if value == 0.0 and _NONZERO_DIGIT.search(literal.split("e")[0].split("E")[0]):
        raise ParseError(f"Number underflows to zero: {literal[:32]}")
    return value


def _reject_constant(name: str) -> None:
    raise ParseError(f"Unsupported JSON constant: {name}")


def _check_string(value: str) -> None:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ParseError("String contains an unpaired surrogate")


def _check_tree(value: JsonValue, max_depth: int, depth: int = 0) -> None:
    if isinstance(value, (dict, list)):
        if depth >= max_depth:
            raise ParseError(f"Nesting deeper than {max_depth} levels")
        if isinstance(value, dict):
            for key, item in value.items():
                _check_string(key)
                _check_tree(item, max_depth, depth + 1)
        else:
            for item in value:
                _check_tree(item, max_depth, depth + 1)
    elif isinstance(value, str):
        _check_string(value)


def parse(text: Union[str, bytes], max_depth: int = DEFAULT_MAX_DEPTH) -> JsonValue:
    """
    Parse JSON text into a value tree.

    Args:
        text: JSON text, either ``str`` or UTF-8 encoded ``bytes``
        max_depth: Maximum nesting of objects and arrays

    Returns:
        The parsed value with object properties in document order

    Raises:
        ParseError: If the input is not strict, well-formed JSON
    """
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"Input is not valid UTF-8: {e}") from e
    try:
        value = json.loads(
            text,
            object_pairs_hook=_unique_object,
            parse_int=_parse_int,
            parse_float=_parse_float,
            parse_constant=_reject_constant,
        )
    except ParseError:
        raise
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e}") from e
    except RecursionError as e:
        raise ParseError("Nesting too deep") from e
    _check_tree(value, max_depth)
    return value


def remove_property(obj: Dict[str, Any], key: str) -> Dict[str, Any]:
    """
    Return a copy of ``obj`` without ``key``.

    The input is left untouched and the remaining properties keep their
    relative order.

    Raises:
        PropertyNotFoundError: If ``key`` is not present
    """
    if not isinstance(obj, dict):
        raise PropertyNotFoundError(f"Expected a JSON object, got {type(obj).__name__}")
    if key not in obj:
        raise PropertyNotFoundError(f"Property not found: {key!r}")
    return {k: v for k, v in obj.items() if k != key}


def serialize_pretty(value: JsonValue, indent: int = 2) -> str:
    """Non-canonical, human-readable rendering in document order."""
    return json.dumps(value, ensure_ascii=False, indent=indent)
